"""
Inventory and inventory-optimization schemas.

InventoryResponse mirrors the database row (inventory joined with product).
InventoryRecord is the normalized snapshot the optimizer works on, and
Recommendation / InventoryOptimization are its derived, never-stored output.
"""

from pydantic import Field, model_validator
from typing import Any, Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum

from models.base import BaseSchema, camel_field


class StockClassification(str, Enum):
    """Stock health of a single inventory record."""
    CRITICAL = "critical"  # Out of stock
    REORDER = "reorder"    # At or below reorder point
    EXCESS = "excess"      # Above 80% of max stock
    OPTIMAL = "optimal"


class RecommendationPriority(str, Enum):
    """Severity bucket used only for ordering."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ===================
# DATABASE ROWS
# ===================

class ProductSummary(BaseSchema):
    """Product fields embedded in inventory and schedule rows."""

    id: str
    sku: str
    name: str
    category: Optional[str] = None
    base_price: Decimal = camel_field("base_price", Decimal("0"))


class InventoryResponse(BaseSchema):
    """
    Inventory row with its product.

    Stock levels are passed through as stored, nulls included; the
    optimizer applies its own defaults when it normalizes a row.
    """

    id: str
    product_id: str = camel_field("product_id")
    location: Optional[str] = "main_warehouse"
    current_stock: Optional[int] = camel_field("current_stock", 0)
    reserved_stock: Optional[int] = camel_field("reserved_stock", 0)
    reorder_point: Optional[int] = camel_field("reorder_point", 0)
    max_stock: Optional[int] = camel_field("max_stock", None)
    last_restocked: Optional[datetime] = camel_field("last_restocked", None)
    updated_at: Optional[datetime] = camel_field("updated_at", None)
    product: Optional[ProductSummary] = None


class InventoryUpdate(BaseSchema):
    """
    Update stock levels for a product.

    All fields optional - only provided fields are updated.
    """

    location: Optional[str] = None
    current_stock: Optional[int] = camel_field("current_stock", None, ge=0)
    reserved_stock: Optional[int] = camel_field("reserved_stock", None, ge=0)
    reorder_point: Optional[int] = camel_field("reorder_point", None, ge=0)
    max_stock: Optional[int] = camel_field("max_stock", None, gt=0)

    @model_validator(mode="after")
    def max_stock_covers_reorder_point(self) -> "InventoryUpdate":
        """max_stock must not be below reorder_point when both are sent."""
        if (
            self.max_stock is not None
            and self.reorder_point is not None
            and self.max_stock < self.reorder_point
        ):
            raise ValueError("max_stock must be greater than or equal to reorder_point")
        return self


# ===================
# OPTIMIZATION
# ===================

class InventoryRecord(BaseSchema):
    """Normalized inventory snapshot, one per product."""

    product_id: Optional[str] = None
    sku: Optional[str] = None
    name: Optional[str] = None
    base_price: Decimal = Field(Decimal("0"), ge=0)
    current_stock: int = Field(0, ge=0)
    reorder_point: int = Field(0, ge=0)
    max_stock: int = Field(10000, gt=0)


class Recommendation(BaseSchema):
    """Actionable recommendation for one inventory record."""

    record: InventoryRecord
    classification: StockClassification
    action: str = Field(..., description="Human-readable instruction")
    priority: RecommendationPriority
    potential_savings: Decimal = Field(..., ge=0)
    utilization_percent: float = Field(..., description="current / max × 100, not clamped")


class OptimizationSummary(BaseSchema):
    """Aggregates over every analyzed record."""

    items_analyzed: int
    total_potential_savings: Decimal
    counts_by_priority: dict[str, int]


class InventoryOptimization(BaseSchema):
    """Ranked recommendations plus summary."""

    recommendations: list[Recommendation]
    summary: OptimizationSummary
    currency: Optional[str] = None


class OptimizationRequest(BaseSchema):
    """Records posted for an ad-hoc optimization run (flat or nested shape)."""

    records: list[dict[str, Any]]
    limit: Optional[int] = Field(None, ge=1, le=1000)
