"""Matching error types.

Every error carries a stable code, a human-readable message and a details
dict so callers (and the HTTP layer) can react without parsing messages.
"""

from typing import Any, Dict, Optional


class MatcherError(Exception):
    """Exception raised for matching errors."""

    code = "MATCH_FAILED"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if code:
            self.code = code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": {key: _json_safe(value) for key, value in self.details.items()},
        }


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return str(value)


class MatchConfigError(MatcherError):
    """Malformed match configuration, raised before any catalog read."""

    code = "INVALID_CONFIG"


class MatchCancelledError(MatcherError):
    """The caller cancelled the match while it was in flight."""

    code = "CANCELLED"


class CatalogReadError(MatcherError):
    """A catalog read failed (connection error, timeout, bad query)."""

    code = "CATALOG_READ_FAILED"
