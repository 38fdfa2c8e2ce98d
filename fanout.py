# ─────────────────────────────────────────────────────────────────
# fanout.py — Verification Fan-Out
#
# Enumerates every monitor of every tenant and publishes one
# verification task per monitor. This is the one place that reads
# across tenants: it is a system operation behind /jobs/verify,
# never a tenant-facing one.
#
# Fire-and-forget: we return once every publish attempt has been
# made. We never wait for a verification to run.
# ─────────────────────────────────────────────────────────────────

import logging

from errors import PublishError
from models import FanOutResult
from publisher import VERIFY_TOPIC, TaskPublisher
from registry import MonitorRegistry

logger = logging.getLogger("fanout")


def verify_target(api_url: str, monitor_id: str) -> str:
    return f"{api_url.rstrip('/')}/jobs/verify/{monitor_id}"


async def trigger_all(
    registry: MonitorRegistry,
    publisher: TaskPublisher,
    api_url: str,
) -> FanOutResult:
    """
    Publishes one POST /jobs/verify/{id} task per monitor.

    A publish failure for one monitor is logged and collected in
    `failed`; the remaining monitors are still published.
    """

    published = 0
    failed = []

    for monitor in registry.list_all():
        target = verify_target(api_url, monitor.id)
        try:
            await publisher.publish(VERIFY_TOPIC, target, "POST")
        except PublishError as e:
            logger.warning(f"⚠️  Could not schedule verification for '{monitor.id}': {e.message}")
            failed.append(monitor.id)
            continue
        published += 1

    logger.info(f"📣 Fan-out complete | published: {published} | failed: {len(failed)}")

    return FanOutResult(
        message="Monitor verification scheduled",
        published=published,
        failed=failed,
    )
