"""Request ID management for log correlation.

The id lives in a ContextVar. The matcher runs catalog reads and batch foods
inside a copy of the caller's context, so worker-thread log lines carry the
request id of the call that spawned them.
"""

import uuid
from contextvars import ContextVar, Token
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID (UUID v4)."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get current request ID, or "no-request-id" if not set."""
    return request_id_var.get() or "no-request-id"


def set_request_id(request_id: str) -> Token:
    """Set request ID in current context.

    Returns:
        Token for reset_request_id
    """
    return request_id_var.set(request_id)


def reset_request_id(token: Token) -> None:
    request_id_var.reset(token)
