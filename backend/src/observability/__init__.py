"""Observability module - structured logging and request correlation"""

from .logging_config import JSONFormatter, RequestIDFilter, configure_logging
from .middleware import RequestIDMiddleware
from .request_id import generate_request_id, get_request_id, reset_request_id, set_request_id

__all__ = [
    "JSONFormatter",
    "RequestIDFilter",
    "configure_logging",
    "RequestIDMiddleware",
    "generate_request_id",
    "get_request_id",
    "reset_request_id",
    "set_request_id",
]
