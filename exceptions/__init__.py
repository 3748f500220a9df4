"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    DuplicateError,
    ExternalServiceError,
    DatabaseError,
    DatabaseUnavailableError,
    InvalidInputShapeError,

    # Product
    ProductNotFoundError,
    ProductSKUExistsError,

    # Inventory
    InventoryNotFoundError,

    # Production Schedule
    ScheduleEntryNotFoundError,
    InvalidMonthError,

    # Currency
    UnsupportedCurrencyError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DuplicateError",
    "ExternalServiceError",
    "DatabaseError",
    "DatabaseUnavailableError",
    "InvalidInputShapeError",

    # Product
    "ProductNotFoundError",
    "ProductSKUExistsError",

    # Inventory
    "InventoryNotFoundError",

    # Production Schedule
    "ScheduleEntryNotFoundError",
    "InvalidMonthError",

    # Currency
    "UnsupportedCurrencyError",
]
