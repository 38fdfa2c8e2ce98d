# ─────────────────────────────────────────────────────────────────
# routes/monitors.py — Tenant-Facing Endpoints
#
# Everything under /monitors. Every route receives the tenant
# (x-channel) through get_channel and passes it EXPLICITLY to the
# registry or log store — isolation is enforced there, by key.
#
# This file owns HTTP request/response logic only.
# It does NOT know how keys are laid out (that's database.py)
# It does NOT know how errors become responses (that's main.py)
# ─────────────────────────────────────────────────────────────────

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from dependencies import get_channel, get_log_store, get_registry
from log_store import LogStore
from models import Monitor, MonitorCreate, MonitorLog, MonitorLogCreate, MonitorUpdate
from registry import MonitorRegistry

logger = logging.getLogger("routes")

router = APIRouter(
    prefix="/monitors",
    tags=["Monitors"]
)


# ─────────────────────────────────────────────────────────────────
# POST /monitors — Register a new monitor
# ─────────────────────────────────────────────────────────────────

@router.post("", status_code=201, response_model=Monitor)
def create_monitor(
    body: MonitorCreate,
    channel: str = Depends(get_channel),
    registry: MonitorRegistry = Depends(get_registry),
):
    """
    Registers a new HTTP target for the caller's tenant.
    400 if name, url or method is missing or empty.
    """
    return registry.create(channel, body.name, body.url, body.method)


# ─────────────────────────────────────────────────────────────────
# GET /monitors — List the caller's monitors
# ─────────────────────────────────────────────────────────────────

@router.get("", response_model=List[Monitor])
def list_monitors(
    channel: str = Depends(get_channel),
    registry: MonitorRegistry = Depends(get_registry),
):
    return registry.list(channel)


# ─────────────────────────────────────────────────────────────────
# GET /monitors/{monitor_id} — One of the caller's monitors
# ─────────────────────────────────────────────────────────────────

@router.get("/{monitor_id}", response_model=Monitor)
def get_monitor(
    monitor_id: str,
    channel: str = Depends(get_channel),
    registry: MonitorRegistry = Depends(get_registry),
):
    return registry.get(channel, monitor_id)


# ─────────────────────────────────────────────────────────────────
# PUT /monitors/{monitor_id} — Partial update
# ─────────────────────────────────────────────────────────────────

@router.put("/{monitor_id}", response_model=Monitor)
def update_monitor(
    monitor_id: str,
    body: MonitorUpdate,
    channel: str = Depends(get_channel),
    registry: MonitorRegistry = Depends(get_registry),
):
    """
    Overwrites only the fields present in the body (name, url,
    method). The owner cannot be changed.
    404 if the monitor does not exist for this tenant.
    """
    return registry.update(channel, monitor_id, body)


# ─────────────────────────────────────────────────────────────────
# DELETE /monitors/{monitor_id}
# ─────────────────────────────────────────────────────────────────

@router.delete("/{monitor_id}", status_code=204)
def delete_monitor(
    monitor_id: str,
    channel: str = Depends(get_channel),
    registry: MonitorRegistry = Depends(get_registry),
):
    # Logs are kept — they stay readable under the same monitor id
    registry.delete(channel, monitor_id)
    return Response(status_code=204)


# ─────────────────────────────────────────────────────────────────
# GET /monitors/{monitor_id}/logs — Probe history
# ─────────────────────────────────────────────────────────────────

@router.get("/{monitor_id}/logs", response_model=List[MonitorLog])
def list_monitor_logs(
    monitor_id: str,
    channel: str = Depends(get_channel),
    log_store: LogStore = Depends(get_log_store),
):
    return log_store.list(channel, monitor_id)


# ─────────────────────────────────────────────────────────────────
# POST /monitors/{monitor_id}/logs — Write a log entry directly
# ─────────────────────────────────────────────────────────────────

@router.post("/{monitor_id}/logs", status_code=201, response_model=MonitorLog)
def create_monitor_log(
    monitor_id: str,
    body: MonitorLogCreate,
    channel: str = Depends(get_channel),
    log_store: LogStore = Depends(get_log_store),
):
    """
    General-purpose log sink: a tenant may record results it
    measured itself. The monitor id is not checked against the
    registry.
    """
    log = log_store.append(
        channel,
        monitor_id,
        status_code=body.status_code,
        response_time=body.response_time,
        data=body.data,
    )
    logger.info(f"📝 External log recorded for '{monitor_id}' | owner: {channel}")
    return log
