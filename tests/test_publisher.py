from __future__ import annotations

import json

import httpx
import pytest

from errors import PublishError
from publisher import VERIFY_TOPIC, HttpTaskPublisher, LocalTaskPublisher


@pytest.mark.asyncio
async def test_http_publisher_posts_task_with_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(202, json={"queued": True})

    publisher = HttpTaskPublisher("http://jobs.test/", api_key="secret", transport=httpx.MockTransport(handler))
    await publisher.publish(VERIFY_TOPIC, "http://api.test/jobs/verify/m1", "POST")
    await publisher.aclose()

    assert len(seen) == 1
    request = seen[0]
    assert str(request.url) == "http://jobs.test/jobs"
    assert request.headers["Authorization"] == "Bearer secret"
    assert json.loads(request.content) == {
        "topic": VERIFY_TOPIC,
        "target": "http://api.test/jobs/verify/m1",
        "method": "POST",
    }


@pytest.mark.asyncio
async def test_http_publisher_raises_on_rejection() -> None:
    publisher = HttpTaskPublisher(
        "http://jobs.test", transport=httpx.MockTransport(lambda request: httpx.Response(500))
    )
    with pytest.raises(PublishError):
        await publisher.publish(VERIFY_TOPIC, "http://api.test/jobs/verify/m1", "POST")
    await publisher.aclose()


@pytest.mark.asyncio
async def test_http_publisher_raises_when_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    publisher = HttpTaskPublisher("http://jobs.test", transport=httpx.MockTransport(handler))
    with pytest.raises(PublishError):
        await publisher.publish(VERIFY_TOPIC, "http://api.test/jobs/verify/m1", "POST")
    await publisher.aclose()


@pytest.mark.asyncio
async def test_local_publisher_redelivers_on_server_error() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.method)
        return httpx.Response(502 if len(calls) < 2 else 200)

    publisher = LocalTaskPublisher(max_attempts=3, retry_delay=0, transport=httpx.MockTransport(handler))
    await publisher.publish(VERIFY_TOPIC, "http://api.test/jobs/verify/m1", "POST")
    await publisher.aclose()

    assert calls == ["POST", "POST"]
    assert not publisher.active_tasks


@pytest.mark.asyncio
async def test_local_publisher_does_not_redeliver_not_found() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(404)

    publisher = LocalTaskPublisher(max_attempts=3, retry_delay=0, transport=httpx.MockTransport(handler))
    await publisher.publish(VERIFY_TOPIC, "http://api.test/jobs/verify/gone", "POST")
    await publisher.aclose()

    assert calls == ["http://api.test/jobs/verify/gone"]


@pytest.mark.asyncio
async def test_local_publisher_gives_up_after_max_attempts() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        raise httpx.ConnectError("refused", request=request)

    publisher = LocalTaskPublisher(max_attempts=2, retry_delay=0, transport=httpx.MockTransport(handler))
    await publisher.publish(VERIFY_TOPIC, "http://api.test/jobs/verify/m1", "POST")
    await publisher.aclose()

    assert len(calls) == 2
