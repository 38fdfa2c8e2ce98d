# ─────────────────────────────────────────────────────────────────
# log_store.py — Monitor Log Store
#
# Append-only writer/reader of MonitorLog records, scoped per
# tenant and per monitor. There is no update or delete.
#
# Two writers use it:
#   - the verification executor, after a successful probe
#   - POST /monitors/{id}/logs, a general-purpose log sink
# ─────────────────────────────────────────────────────────────────

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Union

from database import KVStore, monitor_log_key, monitor_logs_prefix
from errors import ValidationError
from models import LogData, MonitorLog

logger = logging.getLogger("logs")


def utc_timestamp() -> str:
    # e.g. 2026-03-01T10:34:22.123Z
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LogStore:

    def __init__(self, store: KVStore):
        self.store = store

    def append(
        self,
        tenant: str,
        monitor_id: str,
        status_code: Optional[int],
        response_time: Optional[int],
        data: Optional[Union[LogData, dict]],
    ) -> MonitorLog:
        """
        Writes one log entry under
        ("monitor-logs", tenant, monitor_id, log_id).

        A field is missing only when it is None — a status code or
        response time of 0 is a legitimate value.
        """

        if status_code is None or response_time is None or data is None:
            raise ValidationError("Status code, response time, and data are required")

        log = MonitorLog(
            id=str(uuid.uuid1()),
            monitor_id=monitor_id,
            status_code=status_code,
            response_time=response_time,
            owner=tenant,
            data=data if isinstance(data, LogData) else LogData.model_validate(data),
            created_at=utc_timestamp(),
        )

        self.store.set(monitor_log_key(tenant, monitor_id, log.id), log.to_record())

        logger.debug(f"📝 Log '{log.id}' written for monitor '{monitor_id}' | status {status_code}")
        return log

    def list(self, tenant: str, monitor_id: str) -> List[MonitorLog]:
        """All logs for one monitor of one tenant. Empty if none."""
        return [
            MonitorLog.model_validate(value)
            for _, value in self.store.list(monitor_logs_prefix(tenant, monitor_id))
        ]
