"""Structured Logging — JSON log lines carrying campaign context.

Invariants:
    - Every line has timestamp (record creation time, UTC), level, logger, message
    - Campaign context passed via `extra=` (caller, request_index, error_code,
      event_type, amount, recipient, operation, path) is emitted when present
    - setup_logging is idempotent: a second call replaces its handler, never stacks

Design Decisions:
    - Stdlib logging + JSONFormatter: no extra dependency for structured output
    - SQLAlchemy engine logs pinned to WARNING so SQL never lands in app logs
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "caller", "request_index", "error_code", "event_type", "amount",
    "recipient", "operation", "path",
)

_HANDLER_NAME = "crowdvault"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in _EXTRA_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the root handler. fmt="json" for production, anything else for text."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
