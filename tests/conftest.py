from __future__ import annotations

from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from database import KVStore
from errors import PublishError
from log_store import LogStore
from main import create_app
from registry import MonitorRegistry
from settings import Settings


class RecordingPublisher:
    """Captures published tasks instead of delivering them."""

    def __init__(self) -> None:
        self.tasks: list[tuple[str, str, str]] = []
        self.fail_targets: set[str] = set()
        self.closed = False

    async def publish(self, topic: str, target: str, method: str) -> None:
        if any(target.endswith(f"/{monitor_id}") for monitor_id in self.fail_targets):
            raise PublishError(f"rejected {target}")
        self.tasks.append((topic, target, method))

    async def aclose(self) -> None:
        self.closed = True


class ProbeTargets:
    """
    Routes probe requests to per-URL handlers.

    Unknown URLs answer 200 "ok".
    """

    def __init__(self) -> None:
        self.handlers: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []
        self.timeouts: list[dict | None] = []

    def respond(self, url: str, status_code: int = 200, text: str = "ok", headers: dict | None = None) -> None:
        self.handlers[url] = lambda request: httpx.Response(status_code, text=text, headers=headers or {})

    def fail(self, url: str, exc_type: type[httpx.HTTPError] = httpx.ConnectError) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc_type("probe target unreachable", request=request)

        self.handlers[url] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.timeouts.append(request.extensions.get("timeout"))
        handler = self.handlers.get(str(request.url))
        if handler is None:
            return httpx.Response(200, text="ok")
        return handler(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture()
def store() -> KVStore:
    return KVStore()


@pytest.fixture()
def registry(store: KVStore) -> MonitorRegistry:
    return MonitorRegistry(store)


@pytest.fixture()
def log_store(store: KVStore) -> LogStore:
    return LogStore(store)


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def targets() -> ProbeTargets:
    return ProbeTargets()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        port=3000,
        api_url="http://pulse.test",
        log_level="INFO",
        probe_timeout_seconds=2.0,
        publisher_url="",
        publisher_api_key="",
        publisher_max_attempts=1,
    )


@pytest.fixture()
def client(settings: Settings, publisher: RecordingPublisher, targets: ProbeTargets) -> TestClient:
    app = create_app(settings, publisher=publisher, probe_transport=targets.transport())
    with TestClient(app) as c:
        yield c
