# ─────────────────────────────────────────────────────────────────
# logging_config.py — Logging Setup
#
# One global format for every log line:
#   %(asctime)s    → timestamp e.g. "2026-03-01 10:34:22"
#   %(levelname)s  → severity e.g. "INFO", "WARNING"
#   %(name)s       → which module logged it e.g. "executor"
#   %(message)s    → the message itself
#
# Each module creates its own named logger with
# logging.getLogger("<module>") and never configures handlers.
# ─────────────────────────────────────────────────────────────────

import logging

LOG_FORMAT = "%(asctime)s — %(levelname)s — [%(name)s] — %(message)s"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
