# ─────────────────────────────────────────────────────────────────
# database.py — Ordered Key-Value Storage
#
# SEPARATION OF CONCERNS:
# This file owns all data storage for the application and the
# layout of every key written to it.
# If we ever swap to a hosted key-value engine, we only change THIS
# file. Nothing else in the project composes key tuples by hand —
# it calls the key helpers below.
#
# KEY LAYOUT (tuples of strings, ordered lexicographically):
#   ("monitors", owner, id)                        → Monitor
#   ("monitor-logs", owner, monitor_id, log_id)    → MonitorLog
#   ("monitor-owners", id)                         → owner (system index)
#
# The tenant is always the SECOND segment of a tenant record, so a
# prefix scan on (kind, owner) returns only that tenant's records.
# ─────────────────────────────────────────────────────────────────

import bisect
import copy
import logging
import threading
from typing import Any, Iterator, Optional, Tuple

logger = logging.getLogger("database")

Key = Tuple[str, ...]

MONITORS = "monitors"
MONITOR_LOGS = "monitor-logs"
MONITOR_OWNERS = "monitor-owners"


# ─────────────────────────────────────────────────────────────────
# KEY HELPERS
# ─────────────────────────────────────────────────────────────────

def monitor_key(owner: str, monitor_id: str) -> Key:
    return (MONITORS, owner, monitor_id)


def monitors_prefix(owner: Optional[str] = None) -> Key:
    """
    Prefix for monitor listings.

    With an owner → exactly that tenant's monitors.
    Without one   → every monitor of every tenant (fan-out only).
    """
    if owner is None:
        return (MONITORS,)
    return (MONITORS, owner)


def monitor_log_key(owner: str, monitor_id: str, log_id: str) -> Key:
    return (MONITOR_LOGS, owner, monitor_id, log_id)


def monitor_logs_prefix(owner: str, monitor_id: str) -> Key:
    return (MONITOR_LOGS, owner, monitor_id)


def monitor_owner_key(monitor_id: str) -> Key:
    # Verification tasks only carry the monitor id, so the executor
    # resolves the owner through this index before reading the monitor.
    return (MONITOR_OWNERS, monitor_id)


# ─────────────────────────────────────────────────────────────────
# THE STORE
# ─────────────────────────────────────────────────────────────────

class KVStore:
    """
    In-process ordered key-value store.

    Supports point get/set/delete and ordered prefix scans.
    Each operation is atomic for a single key; there are no
    multi-key transactions.

    Values are deep-copied on the way in and out so a caller
    holding a returned dict can never mutate stored state.
    """

    def __init__(self):
        self._data: dict = {}
        self._keys: list = []          # kept sorted for prefix scans
        self._lock = threading.Lock()

    def get(self, key: Key) -> Optional[Any]:
        with self._lock:
            value = self._data.get(key)
        return copy.deepcopy(value)

    def set(self, key: Key, value: Any) -> None:
        stored = copy.deepcopy(value)
        with self._lock:
            if key not in self._data:
                bisect.insort(self._keys, key)
            self._data[key] = stored

    def delete(self, key: Key) -> bool:
        """Removes a key. Returns False if it was not there."""
        with self._lock:
            if key not in self._data:
                return False
            del self._data[key]
            index = bisect.bisect_left(self._keys, key)
            del self._keys[index]
        return True

    def list(self, prefix: Key) -> Iterator[Tuple[Key, Any]]:
        """
        Yields (key, value) pairs whose key starts with `prefix`,
        in key order.

        Matching is per segment: ("monitors", "a") never matches
        ("monitors", "ab", ...).
        """
        prefix = tuple(prefix)
        with self._lock:
            start = bisect.bisect_left(self._keys, prefix)
            matches = []
            for key in self._keys[start:]:
                if key[:len(prefix)] != prefix:
                    break
                matches.append((key, self._data[key]))

        for key, value in matches:
            yield key, copy.deepcopy(value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


def open_store() -> KVStore:
    """Opens the process-wide store. Called once at startup."""
    store = KVStore()
    logger.info("🗄️  Key-value store opened")
    return store
