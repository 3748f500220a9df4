"""
Inventory optimization service - stock classification and ranking.

Turns inventory snapshots into actionable recommendations:
1. Normalize each raw row (flat or nested, camelCase or snake_case)
2. Classify stock health and derive action, priority and savings
3. Rank by priority tier (stable, no secondary key)
4. Summarize savings and counts

Classification precedence (first match wins):
    current == 0                 → critical / priority critical
    current <= reorder_point     → reorder  / priority high
    current > max_stock × 0.8    → excess   / priority medium
    otherwise                    → optimal  / priority low

Everything up to InventoryOptimizerService is pure: no I/O, no state.
"""

from collections.abc import Mapping
from typing import Any, Optional, Sequence
from decimal import Decimal
from math import floor
import structlog

from config import settings
from services.inventory_service import get_inventory_service
from models.inventory import (
    InventoryRecord,
    Recommendation,
    RecommendationPriority,
    StockClassification,
    OptimizationSummary,
    InventoryOptimization,
)
from exceptions import InvalidInputShapeError
from utils.number_utils import to_decimal, to_int, non_negative, first_present

logger = structlog.get_logger(__name__)


# Constants
DEFAULT_MAX_STOCK = 10000
EXCESS_THRESHOLD = Decimal("0.8")   # Above this share of max stock is excess
EXCESS_TARGET = Decimal("0.7")      # Excess is reduced down to this share
REORDER_SAVINGS_RATE = Decimal("0.1")
EXCESS_SAVINGS_RATE = Decimal("0.2")

PRIORITY_WEIGHTS = {
    RecommendationPriority.CRITICAL: 4,
    RecommendationPriority.HIGH: 3,
    RecommendationPriority.MEDIUM: 2,
    RecommendationPriority.LOW: 1,
}


# ===================
# NORMALIZATION
# ===================

def _as_mapping(value: Any) -> Optional[Mapping]:
    """Nested sub-objects may be dicts or pydantic models."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value
    if hasattr(value, "model_dump"):
        return value.model_dump()
    return None


def _lookup(source: Optional[Mapping], *keys: str) -> Any:
    if not source:
        return None
    return first_present(*(source.get(key) for key in keys))


def normalize_record(
    raw: Any,
    default_max_stock: int = DEFAULT_MAX_STOCK,
) -> InventoryRecord:
    """
    Build an InventoryRecord from a flat or nested inventory row.

    Inventory fields are read from an `inventory` sub-object first and
    fall back to the top level; product fields likewise from `product`
    (or `products`). Unreadable numbers fall back to documented defaults:
    stock and reorder point 0, max stock default_max_stock, price 0.

    Args:
        raw: Mapping or pydantic model for one row
        default_max_stock: Used when max stock is missing or zero

    Returns:
        InventoryRecord

    Raises:
        InvalidInputShapeError: If raw is not a mapping/model
    """
    row = _as_mapping(raw)
    if row is None:
        raise InvalidInputShapeError(
            f"Inventory record must be a mapping, got {type(raw).__name__}"
        )

    inventory = _as_mapping(row.get("inventory"))
    product = _as_mapping(first_present(row.get("product"), row.get("products")))

    def inventory_field(*keys: str) -> Any:
        return first_present(_lookup(inventory, *keys), _lookup(row, *keys))

    def product_field(*keys: str) -> Any:
        return first_present(_lookup(product, *keys), _lookup(row, *keys))

    max_stock = to_int(inventory_field("max_stock", "maxStock"))
    if max_stock <= 0:
        max_stock = default_max_stock

    base_price = to_decimal(product_field("base_price", "basePrice"))
    if base_price < 0:
        base_price = Decimal("0")

    product_id = first_present(
        _lookup(inventory, "product_id", "productId"),
        _lookup(row, "product_id", "productId"),
        _lookup(product, "id"),
    )
    sku = product_field("sku")
    name = product_field("name")

    return InventoryRecord(
        product_id=str(product_id) if product_id is not None else None,
        sku=str(sku) if sku is not None else None,
        name=str(name) if name is not None else None,
        base_price=base_price,
        current_stock=non_negative(to_int(inventory_field("current_stock", "currentStock"))),
        reorder_point=non_negative(to_int(inventory_field("reorder_point", "reorderPoint"))),
        max_stock=max_stock,
    )


# ===================
# CLASSIFICATION
# ===================

def classify(record: InventoryRecord) -> Recommendation:
    """
    Classify one record and derive its recommendation.

    Args:
        record: Normalized inventory record

    Returns:
        Recommendation (always exactly one per record)
    """
    current = record.current_stock
    reorder_point = record.reorder_point
    max_stock = record.max_stock
    price = record.base_price

    if current == 0:
        classification = StockClassification.CRITICAL
        action = f"Immediate reorder of {reorder_point * 2} units"
        priority = RecommendationPriority.CRITICAL
        savings = price * reorder_point

    elif current <= reorder_point:
        # max_stock below reorder_point is bad upstream data; never order negative
        quantity = max(max_stock - current, 0)
        classification = StockClassification.REORDER
        action = f"Reorder {quantity} units"
        priority = RecommendationPriority.HIGH
        savings = price * quantity * REORDER_SAVINGS_RATE

    elif current > max_stock * EXCESS_THRESHOLD:
        reduction = current - floor(max_stock * EXCESS_TARGET)
        classification = StockClassification.EXCESS
        action = f"Reduce stock by {reduction} units"
        priority = RecommendationPriority.MEDIUM
        savings = price * reduction * EXCESS_SAVINGS_RATE

    else:
        classification = StockClassification.OPTIMAL
        action = "No action needed"
        priority = RecommendationPriority.LOW
        savings = Decimal("0")

    return Recommendation(
        record=record,
        classification=classification,
        action=action,
        priority=priority,
        potential_savings=savings,
        utilization_percent=current / max_stock * 100,
    )


# ===================
# RANKING & SUMMARY
# ===================

def rank(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    """
    Order recommendations by priority tier, critical first.

    The sort is stable: equal-priority items keep their input order.
    No secondary key (savings, stock depth) is applied, so a truncated
    top-N view shows the same items the dashboard always has.
    """
    _require_sequence(recommendations, "recommendations")
    return sorted(recommendations, key=lambda rec: -PRIORITY_WEIGHTS[rec.priority])


def summarize(recommendations: Sequence[Recommendation]) -> OptimizationSummary:
    """
    Total savings and counts per priority.

    Empty input is valid: zero savings, every count zero.
    """
    _require_sequence(recommendations, "recommendations")

    counts = {priority.value: 0 for priority in RecommendationPriority}
    total = Decimal("0")
    for rec in recommendations:
        counts[rec.priority.value] += 1
        total += rec.potential_savings

    return OptimizationSummary(
        items_analyzed=len(recommendations),
        total_potential_savings=total,
        counts_by_priority=counts,
    )


def optimize(
    records: Sequence[Any],
    default_max_stock: int = DEFAULT_MAX_STOCK,
    limit: Optional[int] = None,
) -> InventoryOptimization:
    """
    Normalize, classify, rank and summarize a batch of inventory rows.

    Args:
        records: Raw rows (flat or nested)
        default_max_stock: Substitute for missing max stock
        limit: Keep only the first N ranked recommendations.
            The summary always covers every record.

    Returns:
        InventoryOptimization

    Raises:
        InvalidInputShapeError: If records is not a list of mappings
    """
    _require_sequence(records, "records")

    recommendations = [
        classify(normalize_record(raw, default_max_stock=default_max_stock))
        for raw in records
    ]
    ranked = rank(recommendations)
    summary = summarize(recommendations)

    if limit is not None:
        ranked = ranked[:limit]

    return InventoryOptimization(recommendations=ranked, summary=summary)


def _require_sequence(value: Any, name: str) -> None:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise InvalidInputShapeError(
            f"{name} must be a list, got {type(value).__name__}"
        )


# ===================
# SERVICE
# ===================

class InventoryOptimizerService:
    """
    Inventory optimization over the live inventory table.

    Reads every active inventory row and runs the optimizer on it.
    """

    def __init__(self):
        # Settings (from environment config)
        self.default_max_stock = settings.default_max_stock  # 10000
        self.default_limit = settings.top_recommendations_limit  # 10
        self.currency = settings.base_currency

    def run(
        self,
        records: Sequence[Any],
        limit: Optional[int] = None,
    ) -> InventoryOptimization:
        """
        Optimize caller-supplied rows.

        Args:
            records: Raw rows (flat or nested)
            limit: Number of ranked recommendations to return
                (None uses the settings default; 0 returns none)

        Returns:
            InventoryOptimization in the base currency
        """
        result = optimize(
            records,
            default_max_stock=self.default_max_stock,
            limit=self.default_limit if limit is None else limit,
        )
        result.currency = self.currency

        logger.info(
            "inventory_optimization_calculated",
            items=result.summary.items_analyzed,
            returned=len(result.recommendations),
            total_savings=float(result.summary.total_potential_savings),
            critical=result.summary.counts_by_priority["critical"],
            high=result.summary.counts_by_priority["high"],
        )

        return result

    def get_optimization(self, limit: Optional[int] = None) -> InventoryOptimization:
        """
        Optimize the current inventory.

        Stored rows go straight to normalize_record, so a null stock
        level gets the same default as a missing one in a posted record.

        Returns:
            InventoryOptimization for every active product's inventory
        """
        logger.info("calculating_inventory_optimization")
        rows = get_inventory_service().get_rows()
        return self.run(rows, limit=limit)


# Singleton instance for convenience
_inventory_optimizer_service: Optional[InventoryOptimizerService] = None


def get_inventory_optimizer_service() -> InventoryOptimizerService:
    """Get or create InventoryOptimizerService instance."""
    global _inventory_optimizer_service
    if _inventory_optimizer_service is None:
        _inventory_optimizer_service = InventoryOptimizerService()
    return _inventory_optimizer_service
