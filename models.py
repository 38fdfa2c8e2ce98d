# ─────────────────────────────────────────────────────────────────
# models.py — Data Models (Pydantic Schemas)
#
# All data shapes live here: the stored records (Monitor,
# MonitorLog) and the request/response bodies of the API.
#
# JSON uses camelCase (statusCode, responseTime, monitorId,
# createdAt); Python code uses snake_case. The alias generator
# maps between the two, and FastAPI serialises response models
# by alias.
#
# Request bodies declare every field Optional on purpose:
# a missing field must produce our 400 ValidationError, not
# FastAPI's generic 422.
# ─────────────────────────────────────────────────────────────────

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        """Shape written to the store — same as the JSON contract."""
        return self.model_dump(by_alias=True)


# ── STORED RECORDS ────────────────────────────────────────────────

class Monitor(CamelModel):
    """A registered HTTP target, owned by exactly one tenant."""

    id: str
    name: str
    url: str
    method: str
    owner: str        # tenant (x-channel) — immutable after creation


class LogData(CamelModel):
    body: str
    headers: Dict[str, str]


class MonitorLog(CamelModel):
    """
    One probe outcome. Immutable once written.

    `owner` is copied from the monitor at probe time, so it still
    points at the right tenant after the monitor is deleted.
    """

    id: str
    monitor_id: str
    status_code: int
    response_time: int   # milliseconds
    owner: str
    data: LogData
    created_at: str


# ── REQUEST BODIES ────────────────────────────────────────────────

class MonitorCreate(CamelModel):
    """Body for POST /monitors. All three fields are required and non-empty."""

    name: Optional[str] = None
    url: Optional[str] = None
    method: Optional[str] = None


class MonitorUpdate(CamelModel):
    """
    Body for PUT /monitors/{id}.

    Only the fields the client actually sent are applied —
    see `changes()`. There is no `owner` field.
    """

    name: Optional[str] = None
    url: Optional[str] = None
    method: Optional[str] = None

    def changes(self) -> dict:
        # model_fields_set holds exactly the fields present in the
        # request, so {"name": ""} overwrites and {} leaves it alone.
        # An explicit null counts as "not supplied".
        return {
            field: getattr(self, field)
            for field in self.model_fields_set
            if getattr(self, field) is not None
        }


class MonitorLogCreate(CamelModel):
    """Body for POST /monitors/{id}/logs."""

    status_code: Optional[int] = None
    response_time: Optional[int] = None
    data: Optional[LogData] = None


# ── JOB RESPONSES ─────────────────────────────────────────────────

class VerifyResult(CamelModel):
    message: str
    data: MonitorLog


class FanOutResult(CamelModel):
    message: str
    published: int
    failed: List[str]   # ids of monitors whose task could not be published
