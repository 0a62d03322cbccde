"""Structured Logging — JSON and text formatters carrying fundraising identifiers.

Invariants:
    - Every record has timestamp, level, logger name and message
    - Identifiers passed via extra= (project_id, wallet, donor_wallet,
      milestone_number, token_id, error_code, path) appear in both formats
    - setup_logging is idempotent: calling it twice does not duplicate output

Design Decisions:
    - stdlib logging with a custom Formatter: no extra dependency
    - JSON in production, text (identifiers appended as key=value) in development
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "project_id", "application_id", "wallet", "donor_wallet", "milestone_number",
    "token_id",
    "error_code", "path",
)

_HANDLER_NAME = "milestone_fund"


def record_extras(record: logging.LogRecord) -> dict:
    """Identifiers attached to `record`, JSON-safe."""
    extras = {}
    for key in EXTRA_FIELDS:
        val = record.__dict__.get(key)
        if val is None:
            continue
        extras[key] = val if isinstance(val, (int, float, bool)) else str(val)
    return extras


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable line with identifiers appended."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if extras:
            line += " [" + " ".join(f"{k}={v}" for k, v in extras.items()) + "]"
        return line


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the app handler on the root logger (replacing a previous one)."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
