"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - Every record carries timestamp (record creation time, UTC), level, logger, message
    - Request and entity fields passed via `extra=` are copied to the top level
    - setup_logging() is idempotent: calling it again replaces its own handler

Design Decisions:
    - JSONFormatter on stdlib logging: zero dependencies, full control
    - uvicorn.access silenced: the request middleware already logs one line
      per request with status and duration
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "method", "path", "status_code", "duration_ms",
    "entity", "entity_id", "error_code",
)
_HANDLER_NAME = "invoice_api"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in _EXTRA_KEYS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the application handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
