"""Normalized errors raised to Bankline callers.

Every failed primary or retry attempt is converted to an ``ApiError``
before it leaves the executor. ``body`` holds the backend's structured
error payload when it sent one, otherwise a message string.
"""

import json
from typing import Any, Optional

import httpx

from .resilience.classifier import Disposition, classify

# Statuses the backend uses for rejected input
VALIDATION_STATUSES = (400, 422)


class ApiError(Exception):
    """Normalized error surfaced by every Bankline operation."""

    def __init__(
        self,
        body: Any,
        status_code: Optional[int] = None,
        operation: str = "",
    ):
        super().__init__(body if isinstance(body, str) else json.dumps(body, default=str))
        self.body = body
        self.status_code = status_code
        self.operation = operation


class ValidationError(ApiError):
    """Backend rejected malformed input."""

    pass


class TimeoutFailure(ApiError):
    """Attempt exceeded its duration budget."""

    pass


class ConnectivityFailure(ApiError):
    """Backend could not be reached."""

    pass


class TerminalFailure(ApiError):
    """Any other backend or transport failure."""

    pass


def _decode_body(response: httpx.Response) -> Any:
    """Decode an error response body.

    Returns:
        Parsed JSON, raw text, or None for an empty body
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text or None


def error_body(error: BaseException) -> Any:
    """Pick the body to surface for a failed attempt.

    The backend's payload wins when present; otherwise the error message.
    """
    if isinstance(error, httpx.HTTPStatusError):
        body = _decode_body(error.response)
        if body is not None:
            return body
    return str(error) or error.__class__.__name__


def normalize(error: BaseException, operation: str = "") -> ApiError:
    """Convert a failed attempt into an ApiError.

    Args:
        error: Exception raised by the attempt
        operation: Operation name for context

    Returns:
        The matching ApiError subclass
    """
    if isinstance(error, ApiError):
        return error

    body = error_body(error)

    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status in VALIDATION_STATUSES:
            return ValidationError(body, status, operation)
        return TerminalFailure(body, status, operation)

    disposition = classify(error)
    if disposition == Disposition.TIMEOUT_RETRYABLE:
        return TimeoutFailure(body, operation=operation)
    if disposition == Disposition.FALLBACK_ELIGIBLE:
        return ConnectivityFailure(body, operation=operation)
    return TerminalFailure(body, operation=operation)
