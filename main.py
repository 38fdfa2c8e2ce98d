# ─────────────────────────────────────────────────────────────────
# main.py — Application Setup
#
# Builds the FastAPI app:
#   1. Opens the key-value store (once, at startup)
#   2. Wires registry, log store, publisher and executor onto
#      app.state
#   3. Installs the tenant filter (x-channel required)
#   4. Registers the error handlers
#   5. Includes the /monitors and /jobs routers
#
# Run locally:   python main.py
#          or:   uvicorn main:app --port 3000
# ─────────────────────────────────────────────────────────────────

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from database import open_store
from dependencies import CHANNEL_HEADER
from errors import PulseError
from executor import VerificationExecutor
from log_store import LogStore
from logging_config import configure_logging
from publisher import HttpTaskPublisher, LocalTaskPublisher, TaskPublisher
from registry import MonitorRegistry
from routes import jobs, monitors
from settings import Settings

logger = logging.getLogger("main")

# Paths that skip the x-channel filter
SYSTEM_PATH_PREFIXES = ("/jobs",)
DOCS_PATHS = {"/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json"}


def build_publisher(settings: Settings) -> TaskPublisher:
    if settings.publisher_url:
        logger.info(f"📡 Publishing verification tasks to {settings.publisher_url}")
        return HttpTaskPublisher(settings.publisher_url, settings.publisher_api_key)

    logger.info("📡 No PUBLISHER_URL set — delivering verification tasks in-process")
    return LocalTaskPublisher(max_attempts=settings.publisher_max_attempts)


def requires_channel(path: str) -> bool:
    if path in DOCS_PATHS:
        return False
    return not any(
        path == prefix or path.startswith(prefix + "/")
        for prefix in SYSTEM_PATH_PREFIXES
    )


def register_error_handlers(app: FastAPI):

    @app.exception_handler(PulseError)
    async def pulse_error_handler(request: Request, exc: PulseError) -> JSONResponse:
        logging.getLogger("errors").warning(
            f"{request.method} {request.url.path} → {exc.status_code}: {exc.message}"
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed JSON or wrong field types — same 400 as a missing field
        logging.getLogger("errors").warning(
            f"{request.method} {request.url.path} → 400: invalid request body"
        )
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": jsonable_errors(exc)},
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


def create_app(
    settings: Optional[Settings] = None,
    publisher: Optional[TaskPublisher] = None,
    probe_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Builds a fully wired app.

    `publisher` and `probe_transport` are for tests: a fake
    publisher to capture fan-out tasks, and an httpx transport
    that answers probes without touching the network.
    """

    settings = settings or Settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.publisher.aclose()

    app = FastAPI(
        title="Pulse Monitor API",
        description="Multi-tenant uptime monitoring: register HTTP endpoints, probe them, keep the results",
        version="1.0.0",
        lifespan=lifespan,
    )

    store = open_store()
    registry = MonitorRegistry(store)
    log_store = LogStore(store)

    app.state.settings = settings
    app.state.store = store
    app.state.registry = registry
    app.state.log_store = log_store
    app.state.publisher = publisher or build_publisher(settings)
    app.state.executor = VerificationExecutor(
        registry,
        log_store,
        timeout=settings.probe_timeout_seconds,
        transport=probe_transport,
    )

    # ── TENANT FILTER ─────────────────────────────────────────────
    # Runs before routing: no tenant-facing handler ever sees a
    # request without x-channel.
    @app.middleware("http")
    async def require_channel(request: Request, call_next):
        if requires_channel(request.url.path) and not request.headers.get(CHANNEL_HEADER):
            return JSONResponse(status_code=400, content={"error": "x-channel header is required"})
        return await call_next(request)

    register_error_handlers(app)

    app.include_router(monitors.router)
    app.include_router(jobs.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
