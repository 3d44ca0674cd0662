"""Structured JSON logging configuration.

One stdout handler on the root logger, JSON lines by default. Matching
modules attach context through ``extra`` (food_id, platform, query, ...);
fields named in EXTRA_FIELDS are copied into the JSON line.
"""

import logging
import json
import sys
from datetime import datetime, timezone

from .request_id import get_request_id


EXTRA_FIELDS = (
    "food_id",
    "platform",
    "platform_product_id",
    "query",
    "is_correct",
    "error_code",
    "method",
    "path",
    "status_code",
    "duration_ms",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(threadName)s %(name)s: %(message)s"

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


class RequestIDFilter(logging.Filter):
    """Stamp every record with the current request id (never filters)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "request_id": getattr(record, "request_id", "no-request-id"),
            "logger": record.name,
            "thread": record.threadName,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["error"] = str(record.exc_info[1])
            payload["traceback"] = self.formatException(record.exc_info)

        payload.update(
            (name, getattr(record, name)) for name in EXTRA_FIELDS if hasattr(record, name)
        )

        # Product names are mostly Chinese; keep them readable
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Install the application log handler, replacing existing root handlers.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON lines if True, otherwise a plain text format
    """
    numeric_level = getattr(logging, level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    handler.addFilter(RequestIDFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
