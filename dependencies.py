# ─────────────────────────────────────────────────────────────────
# dependencies.py — FastAPI Dependencies
#
# Routes never reach for globals. The store-backed components are
# built once in create_app() and hung on app.state; these helpers
# hand them to each route through Depends().
# ─────────────────────────────────────────────────────────────────

from fastapi import Request

from errors import TenancyError
from executor import VerificationExecutor
from log_store import LogStore
from publisher import TaskPublisher
from registry import MonitorRegistry
from settings import Settings

CHANNEL_HEADER = "x-channel"


def get_channel(request: Request) -> str:
    """
    The tenant for this request, from the x-channel header.

    The tenant filter in main.py already rejects requests without
    it; this check keeps routes safe if they are mounted elsewhere.
    """
    channel = request.headers.get(CHANNEL_HEADER)
    if not channel:
        raise TenancyError("x-channel header is required")
    return channel


def get_registry(request: Request) -> MonitorRegistry:
    return request.app.state.registry


def get_log_store(request: Request) -> LogStore:
    return request.app.state.log_store


def get_executor(request: Request) -> VerificationExecutor:
    return request.app.state.executor


def get_publisher(request: Request) -> TaskPublisher:
    return request.app.state.publisher


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
