"""
Logging setup.

Dev: human-readable lines at DEBUG, with tracebacks.
Prod: one JSON object per line at WARNING and above, for log aggregation.
"""
import json
import logging
from datetime import datetime, timezone

from futureagent.core.config import Settings

# Context keys callers may pass through ``extra=``
CONTEXT_FIELDS = ("operation", "attempt", "action", "page", "slug", "error")

HANDLER_NAME = "futureagent"


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
        }
        context = {
            key: getattr(record, key)
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        }
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["stack"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(settings: Settings) -> None:
    """Install the root handler for the current mode. Calling again replaces it."""
    handler = logging.StreamHandler()
    if settings.is_dev:
        handler.setFormatter(
            logging.Formatter("[%(levelname)s] [%(asctime)s] %(name)s: %(message)s")
        )
    else:
        handler.setFormatter(JsonFormatter())

    handler.set_name(HANDLER_NAME)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING))
