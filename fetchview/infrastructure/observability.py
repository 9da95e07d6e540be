"""Structured Logging — JSON formatter and setup for controller observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (controller, request_id, endpoint, ...) surfaced when present
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter on the stdlib logging module: no logging dependency for a library
    - setup_logging is opt-in — the library never configures logging on import
"""

import logging
import json
from datetime import datetime, timezone

from fetchview.config import get_settings

_EXTRA_FIELDS = (
    "controller", "request_id", "endpoint", "page_number",
    "error_code", "status_code",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(
    level: str | None = None, fmt: str | None = None,
) -> logging.Handler:
    """Attach a handler to the fetchview logger. Returns it so hosts can remove it.

    level and fmt default to Settings.log_level / Settings.log_format.
    """
    settings = get_settings()
    level = level or settings.log_level
    fmt = fmt or settings.log_format
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    root = logging.getLogger("fetchview")
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
