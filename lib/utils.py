# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - ApplicationError: base class for provider client errors
# - with_retry: fixed-delay retry for flaky provider calls
# =============================================================================

import logging
import time
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Errors should tell HOW to fix, not just WHAT failed.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyServiceError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_SERVICE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }


# =============================================================================
# Retry
# =============================================================================

def with_retry(
    operation: Callable[[], T],
    attempts: int = 3,
    delay: float = 1.0,
    description: str = "operation",
) -> T:
    """
    Run a provider call, retrying with a fixed delay on failure.

    The call runs once, then up to `attempts` more times. The last error
    is re-raised unchanged once retries are exhausted.

    Args:
        operation: Zero-argument callable wrapping the provider call
        attempts: Number of retries after the first failure
        delay: Seconds to sleep between tries
        description: Label used in log messages

    Returns:
        Whatever `operation` returns on its first successful run

    Example:
        result = with_retry(lambda: cloudinary.uploader.destroy(public_id))
    """
    remaining = max(attempts, 0)
    while True:
        try:
            return operation()
        except Exception as e:
            if remaining <= 0:
                logger.error(f"{description} failed after retries: {e}")
                raise
            remaining -= 1
            logger.warning(f"{description} failed, retrying ({remaining} left): {e}")
            if delay > 0:
                time.sleep(delay)
