"""
Error taxonomy and degradation helpers for the tubeai pipeline.

Only channel resolution and the required channel/video fetch may end a run with
a surfaced error. Every later stage absorbs its failures into a degraded but
complete result, using the helpers in this module.
"""

import asyncio
import logging
from typing import Callable, Any
from functools import wraps

logger = logging.getLogger(__name__)


class TubeAIError(Exception):
    """Base exception for errors surfaced to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(TubeAIError):
    """Raised when a required credential is not configured."""
    status_code = 500


class InputError(TubeAIError):
    """Raised for a malformed channel URL or request body."""
    status_code = 400


class NotFoundError(TubeAIError):
    """Raised when the channel or its uploads cannot be found."""
    status_code = 404


class RateLimitError(TubeAIError):
    """Raised when an upstream API quota or rate limit is exceeded."""
    status_code = 429

    def __init__(self, message: str = "API rate limit exceeded. Please try again later."):
        super().__init__(message)


class EnrichmentFailure(Exception):
    """
    Raised by optional stages (topics, news, discussions, ideas).

    Never surfaced: the orchestrator converts it into a fallback value.
    """
    pass


def status_for_error(error: BaseException) -> int:
    """
    Map an exception to the HTTP status category exposed at the boundary.

    Args:
        error: Exception raised by a run

    Returns:
        HTTP status code
    """
    if isinstance(error, TubeAIError):
        return error.status_code
    if isinstance(error, asyncio.TimeoutError):
        return 504
    return 500


def message_for_error(error: BaseException) -> str:
    """Human-readable message for an error response body."""
    if isinstance(error, TubeAIError):
        return error.message
    if isinstance(error, asyncio.TimeoutError):
        return "Analysis timed out"
    return str(error) or "Internal server error"


def tolerate_failure(operation: str, fallback: Callable[[], Any] = list):
    """
    Decorator that absorbs any exception into a fallback value.

    Args:
        operation: Description of the wrapped operation, used in log messages
        fallback: Zero-argument factory for the value returned on failure

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.warning(f"{operation} failed, continuing without it: {e}")
                return fallback()

        return wrapper
    return decorator
