"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema, camel_field
from models.product import ProductCreate, ProductUpdate, ProductResponse
from models.inventory import (
    StockClassification,
    RecommendationPriority,
    ProductSummary,
    InventoryResponse,
    InventoryUpdate,
    InventoryRecord,
    Recommendation,
    OptimizationSummary,
    InventoryOptimization,
    OptimizationRequest,
)
from models.production_schedule import (
    ScheduleStatus,
    SchedulePriority,
    StatusIndicator,
    ScheduleEntry,
    ScheduleEntryCreate,
    ScheduleEntryUpdate,
    MonthRef,
    CalendarDay,
    CalendarMonth,
    CalendarRequest,
)
from models.currency import CurrencyRate, CurrencyConversion
from models.insights import (
    MoodProfile,
    MoodPreferences,
    MoodRequest,
    MoodRecommendation,
    InsightsRequest,
    ProductivityInsights,
)

__all__ = [
    # Base
    "BaseSchema",
    "camel_field",

    # Product
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",

    # Inventory
    "StockClassification",
    "RecommendationPriority",
    "ProductSummary",
    "InventoryResponse",
    "InventoryUpdate",
    "InventoryRecord",
    "Recommendation",
    "OptimizationSummary",
    "InventoryOptimization",
    "OptimizationRequest",

    # Production Schedule
    "ScheduleStatus",
    "SchedulePriority",
    "StatusIndicator",
    "ScheduleEntry",
    "ScheduleEntryCreate",
    "ScheduleEntryUpdate",
    "MonthRef",
    "CalendarDay",
    "CalendarMonth",
    "CalendarRequest",

    # Currency
    "CurrencyRate",
    "CurrencyConversion",

    # Insights
    "MoodProfile",
    "MoodPreferences",
    "MoodRequest",
    "MoodRecommendation",
    "InsightsRequest",
    "ProductivityInsights",
]
