"""
Custom exception classes for the application.

Every API-facing error carries a code, message, HTTP status and details,
and renders to the standard error envelope via to_dict().
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "INVENTORY_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DuplicateError(ConflictError):
    """Duplicate resource (409)."""

    def __init__(
        self,
        resource: str,
        field: str,
        value: str
    ):
        super().__init__(
            code=f"{resource.upper()}_{field.upper()}_EXISTS",
            message=f"{resource} with this {field} already exists",
            details={field: value}
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


class DatabaseUnavailableError(ExternalServiceError):
    """Supabase credentials missing or client could not be built (503)."""

    def __init__(self, message: str):
        super().__init__(service="database", message=message)


class InvalidInputShapeError(TypeError):
    """
    Caller passed the wrong shape (e.g. a dict where a list of records belongs).

    This is a programming-contract violation, not a data problem, so it
    is a TypeError rather than an AppError and is never coerced away.
    """
    pass


# ===================
# PRODUCT ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, product_id: str):
        super().__init__(
            resource="Product",
            identifier=product_id,
            code="PRODUCT_NOT_FOUND"
        )


class ProductSKUExistsError(DuplicateError):
    """Product SKU already exists."""

    def __init__(self, sku: str):
        super().__init__(
            resource="Product",
            field="sku",
            value=sku
        )


# ===================
# INVENTORY ERRORS
# ===================

class InventoryNotFoundError(NotFoundError):
    """No inventory row for the product."""

    def __init__(self, product_id: str):
        super().__init__(
            resource="Inventory",
            identifier=product_id,
            code="INVENTORY_NOT_FOUND"
        )


# ===================
# PRODUCTION SCHEDULE ERRORS
# ===================

class ScheduleEntryNotFoundError(NotFoundError):
    """Production schedule entry not found."""

    def __init__(self, entry_id: str):
        super().__init__(
            resource="Schedule entry",
            identifier=entry_id,
            code="SCHEDULE_ENTRY_NOT_FOUND"
        )


class InvalidMonthError(ValidationError):
    """Month outside 1-12."""

    def __init__(self, month: int):
        super().__init__(
            code="INVALID_MONTH",
            message="Month must be between 1 and 12",
            details={"provided": month}
        )


# ===================
# CURRENCY ERRORS
# ===================

class UnsupportedCurrencyError(ValidationError):
    """Currency code not in the rate table."""

    def __init__(self, currency: str, supported: list[str]):
        super().__init__(
            code="UNSUPPORTED_CURRENCY",
            message=f"Unsupported currency: {currency}",
            details={"provided": currency, "valid": supported}
        )
