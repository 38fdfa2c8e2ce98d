# ─────────────────────────────────────────────────────────────────
# publisher.py — Task Publishers
#
# The fan-out never probes anything itself. It hands one task per
# monitor to a publisher: (topic, target URL, HTTP method).
# The publisher promises the target is invoked EVENTUALLY —
# at least once, asynchronously, in no particular order.
#
# Two implementations:
#   HttpTaskPublisher  → an external job-dispatch service
#                        (production; selected by PUBLISHER_URL)
#   LocalTaskPublisher → background asyncio tasks in this process
#                        (development; no external service needed)
# ─────────────────────────────────────────────────────────────────

import asyncio
import logging
from typing import Optional, Protocol, Set

import httpx

from errors import PublishError

logger = logging.getLogger("publisher")

VERIFY_TOPIC = "monitor::verify"


class TaskPublisher(Protocol):

    async def publish(self, topic: str, target: str, method: str) -> None:
        """Accepts one task or raises PublishError."""
        ...

    async def aclose(self) -> None:
        ...


class HttpTaskPublisher:
    """
    Publishes tasks to an external job-dispatch service.

    POST {base_url}/jobs with
        {"topic": ..., "target": ..., "method": ...}
    and a bearer token. Any non-2xx answer or transport error
    becomes a PublishError.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def publish(self, topic: str, target: str, method: str) -> None:
        payload = {"topic": topic, "target": target, "method": method}
        try:
            response = await self.client.post("/jobs", json=payload)
        except httpx.HTTPError as e:
            raise PublishError(f"Job service unreachable: {e}") from e

        if response.is_error:
            raise PublishError(
                f"Job service rejected task for {target}: HTTP {response.status_code}"
            )

    async def aclose(self) -> None:
        await self.client.aclose()


class LocalTaskPublisher:
    """
    Delivers tasks from inside this process.

    publish() returns immediately — delivery runs as a background
    asyncio task. A delivery that hits a transport error or a 5xx
    is attempted again, up to `max_attempts` times in total.
    4xx answers (e.g. 404 for a deleted monitor) are final.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.transport = transport

        # Running deliveries. Holding the reference keeps the task
        # from being garbage-collected mid-flight.
        self.active_tasks: Set[asyncio.Task] = set()

    async def publish(self, topic: str, target: str, method: str) -> None:
        task = asyncio.create_task(self._deliver(topic, target, method))
        self.active_tasks.add(task)
        task.add_done_callback(self.active_tasks.discard)

    async def _deliver(self, topic: str, target: str, method: str) -> None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for attempt in range(1, self.max_attempts + 1):
                try:
                    response = await client.request(method, target)
                except httpx.HTTPError as e:
                    logger.warning(f"⚠️  [{topic}] {target} attempt {attempt} failed: {e}")
                else:
                    if response.status_code < 500:
                        logger.info(f"📬 [{topic}] {target} → {response.status_code}")
                        return
                    logger.warning(
                        f"⚠️  [{topic}] {target} attempt {attempt} → {response.status_code}"
                    )

                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_delay)

        logger.error(f"❌ [{topic}] {target} gave up after {self.max_attempts} attempts")

    async def aclose(self) -> None:
        """Waits for in-flight deliveries to finish."""
        if self.active_tasks:
            await asyncio.gather(*self.active_tasks, return_exceptions=True)
