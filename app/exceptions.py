# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error response carries a human-readable detail and a machine-readable
# code, plus a suggestion telling the caller how to fix the request.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DealerAIException(Exception):
    """
    Base exception for DealerAI API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "DEALERAI_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Request Exceptions
# =============================================================================

class MissingFieldError(DealerAIException):
    """Raised when a required request field is absent or empty."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(
            message=message,
            code="MISSING_FIELD",
            status_code=400,
            suggestion="Include the required fields in the request body",
            details={"fields": fields} if fields else None,
        )


class InvalidRequestError(DealerAIException):
    """Raised when a field is present but holds an unsupported value."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="INVALID_REQUEST",
            status_code=400,
            details=details,
        )


# =============================================================================
# Listing Exceptions
# =============================================================================

class ListingNotFoundError(DealerAIException):
    """Raised when a listing ID doesn't exist in the store."""

    def __init__(self, listing_id: str):
        super().__init__(
            message="Listing not found",
            code="LISTING_NOT_FOUND",
            status_code=404,
            suggestion="Check that the listing id is correct and has not been deleted",
            details={"listing_id": listing_id},
        )


class VehicleNotFoundError(DealerAIException):
    """Raised when a tracking event names a vehicle missing from the vehicles table."""

    def __init__(self, vehicle_id: str):
        super().__init__(
            message="Vehicle not found",
            code="VEHICLE_NOT_FOUND",
            status_code=404,
            details={"vehicle_id": vehicle_id},
        )


# =============================================================================
# Image Exceptions
# =============================================================================

class InvalidEnhancementPresetError(DealerAIException):
    """Raised when a batch request names a preset that doesn't exist."""

    def __init__(self, preset: str, allowed: list[str]):
        super().__init__(
            message="Invalid preset specified",
            code="INVALID_PRESET",
            status_code=400,
            suggestion=f"Use one of: {', '.join(allowed)}",
            details={"preset": preset},
        )


class InvalidFileTypeError(DealerAIException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed},
        )


class FileTooLargeError(DealerAIException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


# =============================================================================
# Account & Billing Exceptions
# =============================================================================

class UserNotFoundError(DealerAIException):
    """Raised when the authenticated user has no row in the users table."""

    def __init__(self, user_id: str):
        super().__init__(
            message="User not found",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="Finish onboarding so a user profile exists for this account",
            details={"user_id": user_id},
        )


class NoDealershipError(DealerAIException):
    """Raised when a dealership-scoped route is called by a user without one."""

    def __init__(self, user_id: str):
        super().__init__(
            message="No dealership associated with this account",
            code="NO_DEALERSHIP",
            status_code=400,
            suggestion="Create or join a dealership before using this feature",
            details={"user_id": user_id},
        )


class InvalidSubscriptionTierError(DealerAIException):
    """Raised when checkout is requested for an unknown tier."""

    def __init__(self, tier: str | None, allowed: list[str]):
        super().__init__(
            message="Invalid subscription tier",
            code="INVALID_SUBSCRIPTION_TIER",
            status_code=400,
            suggestion=f"Use one of: {', '.join(allowed)}",
            details={"tier": tier},
        )


class NoSubscriptionError(DealerAIException):
    """Raised when the billing portal is requested before any checkout."""

    def __init__(self):
        super().__init__(
            message="No subscription found",
            code="NO_SUBSCRIPTION",
            status_code=400,
            suggestion="Subscribe to a plan before opening the billing portal",
        )


# =============================================================================
# Webhook Exceptions
# =============================================================================

class InvalidWebhookSignatureError(DealerAIException):
    """Raised when a provider notification fails signature verification."""

    def __init__(self, message: str = "Invalid signature", status_code: int = 400):
        super().__init__(
            message=message,
            code="INVALID_WEBHOOK_SIGNATURE",
            status_code=status_code,
        )


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(DealerAIException):
    """
    Raised when an external provider call fails.

    The message names the action that failed, never the provider's raw error,
    which is logged instead.
    """

    def __init__(self, message: str, error: str | None = None):
        super().__init__(
            message=message,
            code="PROVIDER_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error} if error else None,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def dealerai_exception_handler(
    request: Request,
    exc: DealerAIException
) -> JSONResponse:
    """
    Convert DealerAIException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Malformed bodies are client errors, so they share the 400 status used for
    missing fields.
    """
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Catch-all so unexpected failures never leak a traceback to clients."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )
