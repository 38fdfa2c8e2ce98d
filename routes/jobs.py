# ─────────────────────────────────────────────────────────────────
# routes/jobs.py — System Endpoints (called by the task publisher)
#
# /jobs/* bypasses the x-channel requirement: these endpoints are
# invoked by the scheduler and the task publisher, not by tenants.
#
#   POST /jobs/verify        → fan out one task per monitor
#   POST /jobs/verify/{id}   → probe one monitor, write a log
# ─────────────────────────────────────────────────────────────────

from fastapi import APIRouter, Depends

from dependencies import get_executor, get_publisher, get_registry, get_settings
from executor import VerificationExecutor
from fanout import trigger_all
from models import FanOutResult, VerifyResult
from publisher import TaskPublisher
from registry import MonitorRegistry
from settings import Settings

router = APIRouter(
    prefix="/jobs",
    tags=["Jobs"]
)


@router.post("/verify", response_model=FanOutResult)
async def verify_all(
    registry: MonitorRegistry = Depends(get_registry),
    publisher: TaskPublisher = Depends(get_publisher),
    settings: Settings = Depends(get_settings),
):
    """
    Schedules verification of every monitor of every tenant.
    Always 200 — monitors whose task could not be published are
    listed in `failed`.
    """
    return await trigger_all(registry, publisher, settings.api_url)


@router.post("/verify/{monitor_id}", response_model=VerifyResult)
async def verify_one(
    monitor_id: str,
    executor: VerificationExecutor = Depends(get_executor),
):
    """
    Probes one monitor.

    200 → probe answered (any status code) and a log was written
    404 → monitor no longer exists
    502 → probe failed or timed out; nothing written, the publisher
          may redeliver
    """
    log = await executor.execute(monitor_id)
    return VerifyResult(message="Monitor verified and log created", data=log)
