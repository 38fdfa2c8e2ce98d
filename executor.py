# ─────────────────────────────────────────────────────────────────
# executor.py — Verification Executor
#
# Runs once per task delivery: resolve the monitor by id, probe
# its URL, append a log. Holds no state between invocations, so
# any number of executions (including duplicates of the same
# monitor) can run concurrently.
#
# OUTCOMES:
#   any HTTP status (2xx…5xx) → a MonitorLog is written
#   probe error / timeout     → ProbeFailure, nothing written
#   unknown monitor id        → NotFoundError, nothing written
# ─────────────────────────────────────────────────────────────────

import logging
import time
from typing import Optional

import httpx

from errors import ProbeFailure
from log_store import LogStore
from models import LogData, MonitorLog
from registry import MonitorRegistry

logger = logging.getLogger("executor")


class VerificationExecutor:

    def __init__(
        self,
        registry: MonitorRegistry,
        log_store: LogStore,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.registry = registry
        self.log_store = log_store
        self.timeout = timeout
        # Only set in tests, to route probes to a mock transport
        self.transport = transport

    async def execute(self, monitor_id: str) -> MonitorLog:
        """
        Probes one monitor and records the result.

        responseTime is the wall-clock time from sending the request
        until the response headers arrive — the body download is not
        counted.
        """

        monitor = self.registry.find(monitor_id)

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            try:
                request = client.build_request(monitor.method, monitor.url)
                started = time.perf_counter()
                response = await client.send(request, stream=True)
                response_time = round((time.perf_counter() - started) * 1000)

                try:
                    await response.aread()
                finally:
                    await response.aclose()

            except httpx.TimeoutException as e:
                logger.warning(f"⏱️  Probe timed out for '{monitor_id}' ({monitor.url}) after {self.timeout}s")
                raise ProbeFailure(f"Probe timed out after {self.timeout}s") from e
            except (httpx.HTTPError, httpx.InvalidURL, TypeError, ValueError) as e:
                # httpcore rejects malformed methods (e.g. non-ASCII) with
                # TypeError or ValueError before anything is sent
                logger.warning(f"❌ Probe failed for '{monitor_id}' ({monitor.url}): {e}")
                raise ProbeFailure(f"Probe failed: {e}") from e

        log = self.log_store.append(
            monitor.owner,
            monitor.id,
            status_code=response.status_code,
            response_time=response_time,
            data=LogData(
                body=response.text,
                headers=dict(response.headers.items()),
            ),
        )

        logger.info(
            f"🔎 Verified '{monitor_id}' | {monitor.method} {monitor.url} "
            f"→ {response.status_code} in {response_time}ms"
        )
        return log
