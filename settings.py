# ─────────────────────────────────────────────────────────────────
# settings.py — Configuration
#
# Every setting comes from an environment variable with a default,
# read once when Settings() is built. Tests pass an explicit
# Settings(...) to create_app() instead.
#
#   PORT                    port uvicorn listens on        (3000)
#   API_URL                 public base URL of this API,
#                           used to build verify targets   (http://localhost:PORT)
#   LOG_LEVEL               logging level                  (INFO)
#   PROBE_TIMEOUT_SECONDS   bound on each outbound probe   (10)
#   PUBLISHER_URL           external job-dispatch service;
#                           empty → in-process publisher   ("")
#   PUBLISHER_API_KEY       bearer token for that service  ("")
#   PUBLISHER_MAX_ATTEMPTS  in-process delivery attempts   (3)
# ─────────────────────────────────────────────────────────────────

import os
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return int(default)
    try:
        return int(str(raw).strip())
    except ValueError:
        return int(default)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return float(default)
    try:
        return float(str(raw).strip())
    except ValueError:
        return float(default)


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return str(default)
    s = str(raw).strip()
    return s if s else str(default)


def _default_api_url() -> str:
    port = _env_int("PORT", 3000)
    return _env_str("API_URL", f"http://localhost:{port}").rstrip("/")


@dataclass(frozen=True)
class Settings:
    port: int = field(default_factory=lambda: _env_int("PORT", 3000))
    api_url: str = field(default_factory=_default_api_url)
    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO").upper())

    # Outbound probes never hang forever — a timeout is a ProbeFailure.
    probe_timeout_seconds: float = field(default_factory=lambda: _env_float("PROBE_TIMEOUT_SECONDS", 10.0))

    publisher_url: str = field(default_factory=lambda: _env_str("PUBLISHER_URL", ""))
    publisher_api_key: str = field(default_factory=lambda: _env_str("PUBLISHER_API_KEY", ""))
    publisher_max_attempts: int = field(default_factory=lambda: _env_int("PUBLISHER_MAX_ATTEMPTS", 3))
