# ─────────────────────────────────────────────────────────────────
# registry.py — Monitor Registry
#
# CRUD over Monitor records, always scoped to one tenant.
# The tenant is an explicit argument on every call — the registry
# never reads it from a request.
#
# The only unscoped reads are list_all() (fan-out) and find()
# (verification by id), both used by the /jobs endpoints.
# ─────────────────────────────────────────────────────────────────

import logging
import uuid
from typing import List

from database import (
    KVStore,
    monitor_key,
    monitor_owner_key,
    monitors_prefix,
)
from errors import NotFoundError, ValidationError
from models import Monitor, MonitorUpdate

logger = logging.getLogger("registry")


class MonitorRegistry:

    def __init__(self, store: KVStore):
        self.store = store

    def create(self, tenant: str, name: str, url: str, method: str) -> Monitor:
        """
        Registers a new monitor for `tenant`.

        Flow:
        1. Reject missing or empty name / url / method
        2. Generate a time-ordered id (uuid1)
        3. Write the monitor under ("monitors", tenant, id)
        4. Write the owner index under ("monitor-owners", id)

        Duplicate (name, url) pairs are allowed.
        """

        if not name or not url or not method:
            raise ValidationError("Name, URL, and method are required")

        monitor = Monitor(
            id=str(uuid.uuid1()),
            name=name,
            url=url,
            method=method,
            owner=tenant,
        )

        self.store.set(monitor_key(tenant, monitor.id), monitor.to_record())
        self.store.set(monitor_owner_key(monitor.id), tenant)

        logger.info(f"✅ Monitor created: '{monitor.id}' | {method} {url} | owner: {tenant}")
        return monitor

    def list(self, tenant: str) -> List[Monitor]:
        """All of one tenant's monitors, in key order. Empty if none."""
        return [
            Monitor.model_validate(value)
            for _, value in self.store.list(monitors_prefix(tenant))
        ]

    def list_all(self) -> List[Monitor]:
        """Every monitor of every tenant. Only the fan-out calls this."""
        return [
            Monitor.model_validate(value)
            for _, value in self.store.list(monitors_prefix())
        ]

    def get(self, tenant: str, monitor_id: str) -> Monitor:
        record = self.store.get(monitor_key(tenant, monitor_id))
        if record is None:
            raise NotFoundError("Monitor not found")
        return Monitor.model_validate(record)

    def find(self, monitor_id: str) -> Monitor:
        """
        Looks a monitor up by id alone, through the owner index.

        Raises NotFoundError if the monitor was deleted (or never
        existed) — e.g. deleted between fan-out and verification.
        """
        owner = self.store.get(monitor_owner_key(monitor_id))
        if owner is None:
            raise NotFoundError("Monitor not found")
        return self.get(owner, monitor_id)

    def update(self, tenant: str, monitor_id: str, update: MonitorUpdate) -> Monitor:
        """
        Applies a partial update.

        Only fields present in `update` overwrite the stored ones.
        `owner` and `id` are never touched. Read-then-write with no
        compare-and-swap: concurrent updates are last-writer-wins.
        """

        current = self.get(tenant, monitor_id)

        changes = update.changes()
        updated = current.model_copy(update=changes)

        self.store.set(monitor_key(tenant, monitor_id), updated.to_record())
        # A delete that raced this update may have dropped the index;
        # the monitor is written back, so it must stay resolvable by id
        self.store.set(monitor_owner_key(monitor_id), tenant)

        logger.info(f"✏️  Monitor updated: '{monitor_id}' | fields: {sorted(changes)}")
        return updated

    def delete(self, tenant: str, monitor_id: str) -> None:
        """Removes the monitor. Its logs are left in place."""

        if not self.store.delete(monitor_key(tenant, monitor_id)):
            raise NotFoundError("Monitor not found")
        self.store.delete(monitor_owner_key(monitor_id))

        logger.info(f"🗑️  Monitor deleted: '{monitor_id}' | owner: {tenant}")
