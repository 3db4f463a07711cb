"""Failure classification for backend calls.

Decides, from a failed attempt, whether it is:
- a timeout that deserves a slower retry
- a connectivity failure that can be served from the fallback source
- a terminal failure to surface as-is
"""

import asyncio
from enum import Enum

import httpx


class Disposition(str, Enum):
    """What the executor should do with a failed attempt."""

    TIMEOUT_RETRYABLE = "TIMEOUT_RETRYABLE"
    FALLBACK_ELIGIBLE = "FALLBACK_ELIGIBLE"
    TERMINAL = "TERMINAL"


TIMEOUT_EXCEPTIONS = (
    httpx.TimeoutException,
    asyncio.TimeoutError,
    TimeoutError,
)

CONNECTIVITY_EXCEPTIONS = (
    httpx.ConnectError,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    ConnectionError,
)

# Message fragments that mark a transport-level failure
NETWORK_MESSAGE_MARKERS = ("Network Error", "timeout")


def has_response(error: BaseException) -> bool:
    """Check whether the backend answered before the failure."""
    return isinstance(error, httpx.HTTPStatusError)


def classify(error: BaseException) -> Disposition:
    """Classify a failed attempt.

    Rules are evaluated in order: duration exceeded, then connectivity,
    then everything else.

    Args:
        error: Exception raised by the attempt

    Returns:
        Disposition for the failure
    """
    if isinstance(error, TIMEOUT_EXCEPTIONS):
        return Disposition.TIMEOUT_RETRYABLE

    if isinstance(error, CONNECTIVITY_EXCEPTIONS):
        return Disposition.FALLBACK_ELIGIBLE

    if not has_response(error):
        message = str(error)
        if any(marker in message for marker in NETWORK_MESSAGE_MARKERS):
            return Disposition.FALLBACK_ELIGIBLE

    return Disposition.TERMINAL
