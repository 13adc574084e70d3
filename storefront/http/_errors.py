"""
HTTP errors: what the API client raises.
"""

from __future__ import annotations

from typing import Any

DEFAULT_ERROR_MESSAGE = "Ocorreu um erro inesperado"


class ApiError(Exception):
    """
    Failed API call.

    status is None when no response arrived (connection error, timeout).
    body is the decoded JSON error payload when the server sent one.
    """

    def __init__(self, status: int | None, message: str, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.body = body

    @property
    def is_transport(self) -> bool:
        return self.status is None

    def __repr__(self) -> str:
        return f"ApiError(status={self.status!r}, message={self.message!r})"


def message_from_body(body: Any) -> str | None:
    """Pull `message` (or `error`) out of a JSON error body."""
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return None


def error_message(error: object, fallback: str = DEFAULT_ERROR_MESSAGE) -> str:
    """
    User-facing message for any failure.

    ApiError → server message, other exceptions → str(exc), strings pass
    through, anything else → fallback.
    """
    if isinstance(error, ApiError):
        return message_from_body(error.body) or error.message or fallback
    if isinstance(error, Exception):
        return str(error) or fallback
    if isinstance(error, str):
        return error
    return fallback


__all__ = ("ApiError", "DEFAULT_ERROR_MESSAGE", "error_message", "message_from_body")
