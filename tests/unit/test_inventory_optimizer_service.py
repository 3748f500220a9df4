"""
Unit tests for the inventory optimizer.

Tests the scoring engine:
1. Normalization of flat, nested and malformed rows
2. Classification precedence and savings formulas
3. Stable priority ranking
4. Summary aggregates
5. Service wiring (settings, inventory source)
"""

import pytest
from decimal import Decimal
from unittest.mock import MagicMock, patch

from services.inventory_optimizer_service import (
    normalize_record,
    classify,
    rank,
    summarize,
    optimize,
    InventoryOptimizerService,
    get_inventory_optimizer_service,
    DEFAULT_MAX_STOCK,
)
from models.inventory import (
    InventoryRecord,
    StockClassification,
    RecommendationPriority,
)
from exceptions import InvalidInputShapeError
from tests.factories import InventoryFactory


def record(current_stock, reorder_point=100, max_stock=1000, base_price="10", product_id="p1"):
    return InventoryRecord(
        product_id=product_id,
        sku=f"SKU-{product_id}",
        name=f"Product {product_id}",
        base_price=Decimal(base_price),
        current_stock=current_stock,
        reorder_point=reorder_point,
        max_stock=max_stock,
    )


# ===================
# NORMALIZATION
# ===================

class TestNormalizeRecord:
    """Tests for normalize_record across input shapes."""

    def test_flat_camel_case_row(self):
        """Flat dashboard rows use camelCase keys."""
        row = {
            "productId": "p1",
            "sku": "CC-001",
            "name": "Cove",
            "currentStock": 50,
            "reorderPoint": 100,
            "maxStock": 1000,
            "basePrice": "8.63",
        }

        result = normalize_record(row)

        assert result.product_id == "p1"
        assert result.sku == "CC-001"
        assert result.current_stock == 50
        assert result.reorder_point == 100
        assert result.max_stock == 1000
        assert result.base_price == Decimal("8.63")

    def test_snake_case_row_with_embedded_product(self):
        """Database rows carry the product under 'product'."""
        row = InventoryFactory.create(current_stock=42, base_price=12.5, sku="CC-042")

        result = normalize_record(row)

        assert result.current_stock == 42
        assert result.base_price == Decimal("12.5")
        assert result.sku == "CC-042"
        assert result.product_id == row["product_id"]

    def test_nested_values_win_over_top_level(self):
        """inventory/product sub-objects override top-level values."""
        row = {
            "currentStock": 999,
            "basePrice": 1,
            "inventory": {"currentStock": 5, "reorderPoint": 10, "maxStock": 100},
            "product": {"id": "p9", "sku": "N-1", "name": "Nested", "basePrice": 20},
        }

        result = normalize_record(row)

        assert result.current_stock == 5
        assert result.base_price == Decimal("20")
        assert result.product_id == "p9"

    def test_top_level_used_when_nested_value_absent(self):
        """Missing nested fields fall back to the top level."""
        row = {
            "maxStock": 500,
            "inventory": {"currentStock": 5},
            "product": {"sku": "N-2"},
            "name": "Top level name",
        }

        result = normalize_record(row)

        assert result.max_stock == 500
        assert result.name == "Top level name"
        assert result.sku == "N-2"

    def test_products_key_accepted(self):
        """Some joins embed the product under 'products'."""
        row = {"currentStock": 1, "products": {"sku": "P-1", "base_price": "3"}}

        result = normalize_record(row)

        assert result.sku == "P-1"
        assert result.base_price == Decimal("3")

    def test_missing_fields_use_defaults(self):
        """An empty row normalizes to documented defaults."""
        result = normalize_record({})

        assert result.current_stock == 0
        assert result.reorder_point == 0
        assert result.max_stock == DEFAULT_MAX_STOCK
        assert result.base_price == Decimal("0")
        assert result.product_id is None

    def test_zero_max_stock_uses_default(self):
        result = normalize_record({"maxStock": 0, "currentStock": 10})
        assert result.max_stock == DEFAULT_MAX_STOCK

    def test_custom_default_max_stock(self):
        result = normalize_record({"currentStock": 10}, default_max_stock=250)
        assert result.max_stock == 250

    def test_malformed_numbers_are_coerced(self):
        """Unreadable numbers become defaults, never errors."""
        row = {
            "currentStock": "abc",
            "reorderPoint": None,
            "maxStock": "lots",
            "basePrice": "not a price",
        }

        result = normalize_record(row)

        assert result.current_stock == 0
        assert result.reorder_point == 0
        assert result.max_stock == DEFAULT_MAX_STOCK
        assert result.base_price == Decimal("0")

    def test_numeric_strings_are_parsed(self):
        row = {"currentStock": "150", "reorderPoint": "100.0", "basePrice": "5.50"}

        result = normalize_record(row)

        assert result.current_stock == 150
        assert result.reorder_point == 100
        assert result.base_price == Decimal("5.50")

    def test_negative_values_clamped(self):
        row = {"currentStock": -5, "reorderPoint": -1, "basePrice": -3}

        result = normalize_record(row)

        assert result.current_stock == 0
        assert result.reorder_point == 0
        assert result.base_price == Decimal("0")

    def test_non_mapping_raises(self):
        """A non-object record is a contract violation."""
        with pytest.raises(InvalidInputShapeError):
            normalize_record(["not", "a", "record"])

        with pytest.raises(InvalidInputShapeError):
            normalize_record("record")


# ===================
# CLASSIFICATION
# ===================

class TestClassify:
    """
    Tests for classify.

    Precedence: zero stock > at/below reorder point > above 80% max > optimal.
    """

    def test_zero_stock_is_critical(self):
        result = classify(record(0, reorder_point=100, base_price="10"))

        assert result.classification == StockClassification.CRITICAL
        assert result.priority == RecommendationPriority.CRITICAL
        assert result.action == "Immediate reorder of 200 units"
        assert result.potential_savings == Decimal("1000")

    def test_zero_stock_critical_even_with_zero_reorder_point(self):
        """current == 0 wins regardless of other fields."""
        result = classify(record(0, reorder_point=0, max_stock=1))
        assert result.classification == StockClassification.CRITICAL

    def test_at_reorder_point_is_reorder(self):
        result = classify(record(100, reorder_point=100, max_stock=1000, base_price="10"))

        assert result.classification == StockClassification.REORDER
        assert result.priority == RecommendationPriority.HIGH
        assert result.action == "Reorder 900 units"
        assert result.potential_savings == Decimal("900")

    def test_below_reorder_point_is_reorder(self):
        result = classify(record(1, reorder_point=100))
        assert result.classification == StockClassification.REORDER

    def test_reorder_wins_over_excess(self):
        """Stock at reorder point but above 80% of max is still reorder."""
        result = classify(record(90, reorder_point=100, max_stock=100))
        assert result.classification == StockClassification.REORDER

    def test_reorder_quantity_never_negative(self):
        """max_stock below reorder point must not produce a negative order."""
        result = classify(record(50, reorder_point=200, max_stock=40))

        assert result.action == "Reorder 0 units"
        assert result.potential_savings == Decimal("0")

    def test_above_eighty_percent_is_excess(self):
        result = classify(record(850, reorder_point=100, max_stock=1000, base_price="2"))

        assert result.classification == StockClassification.EXCESS
        assert result.priority == RecommendationPriority.MEDIUM
        # 850 - floor(1000 × 0.7) = 150
        assert result.action == "Reduce stock by 150 units"
        assert result.potential_savings == Decimal("60")

    def test_exactly_eighty_percent_is_optimal(self):
        result = classify(record(800, reorder_point=100, max_stock=1000))
        assert result.classification == StockClassification.OPTIMAL

    def test_excess_target_is_floored(self):
        # floor(999 × 0.7) = 699
        result = classify(record(900, reorder_point=100, max_stock=999))
        assert result.action == "Reduce stock by 201 units"

    def test_optimal(self):
        result = classify(record(500))

        assert result.classification == StockClassification.OPTIMAL
        assert result.priority == RecommendationPriority.LOW
        assert result.action == "No action needed"
        assert result.potential_savings == Decimal("0")

    def test_utilization_not_clamped(self):
        """Stock above max reports more than 100% utilization."""
        result = classify(record(1500, max_stock=1000))
        assert result.utilization_percent == pytest.approx(150.0)

    def test_utilization_percent(self):
        result = classify(record(250, max_stock=1000))
        assert result.utilization_percent == pytest.approx(25.0)

    def test_record_is_kept_on_recommendation(self):
        rec = record(500, product_id="keep-me")
        assert classify(rec).record.product_id == "keep-me"


# ===================
# RANKING
# ===================

class TestRank:
    """Tests for stable priority ranking."""

    def test_example_scenario(self):
        """Critical first, then excess (medium), then optimal (low)."""
        records = [
            {"productId": "critical-item", "currentStock": 0, "reorderPoint": 100, "maxStock": 1000, "basePrice": 10},
            {"productId": "optimal-item", "currentStock": 150, "reorderPoint": 100, "maxStock": 1000, "basePrice": 5},
            {"productId": "excess-item", "currentStock": 850, "reorderPoint": 100, "maxStock": 1000, "basePrice": 2},
        ]

        recommendations = [classify(normalize_record(r)) for r in records]
        assert [r.classification for r in recommendations] == [
            StockClassification.CRITICAL,
            StockClassification.OPTIMAL,
            StockClassification.EXCESS,
        ]

        ranked = rank(recommendations)
        assert [r.record.product_id for r in ranked] == [
            "critical-item",
            "excess-item",
            "optimal-item",
        ]

    def test_equal_priority_keeps_input_order(self):
        """No secondary key: higher savings do not jump ahead."""
        low_savings = classify(record(50, base_price="1", product_id="first"))
        high_savings = classify(record(50, base_price="1000", product_id="second"))
        third = classify(record(10, base_price="5", product_id="third"))

        ranked = rank([low_savings, high_savings, third])

        assert [r.record.product_id for r in ranked] == ["first", "second", "third"]

    def test_interleaved_priorities_stable(self):
        recs = [
            classify(record(500, product_id="low-1")),
            classify(record(0, product_id="crit-1")),
            classify(record(500, product_id="low-2")),
            classify(record(0, product_id="crit-2")),
            classify(record(50, product_id="high-1")),
        ]

        ranked = rank(recs)

        assert [r.record.product_id for r in ranked] == [
            "crit-1", "crit-2", "high-1", "low-1", "low-2"
        ]

    def test_no_drops_or_duplicates(self):
        recs = [classify(record(stock, product_id=str(i))) for i, stock in enumerate([0, 50, 900, 500, 0, 100])]

        ranked = rank(recs)

        assert len(ranked) == len(recs)
        assert sorted(r.record.product_id for r in ranked) == sorted(r.record.product_id for r in recs)

    def test_empty(self):
        assert rank([]) == []

    def test_input_not_mutated(self):
        recs = [classify(record(500, product_id="a")), classify(record(0, product_id="b"))]

        rank(recs)

        assert [r.record.product_id for r in recs] == ["a", "b"]

    def test_non_list_raises(self):
        with pytest.raises(InvalidInputShapeError):
            rank({"not": "a list"})


# ===================
# SUMMARY
# ===================

class TestSummarize:
    """Tests for summary aggregates."""

    def test_empty_input_is_all_zero(self):
        summary = summarize([])

        assert summary.items_analyzed == 0
        assert summary.total_potential_savings == Decimal("0")
        assert summary.counts_by_priority == {
            "critical": 0, "high": 0, "medium": 0, "low": 0
        }

    def test_totals_and_counts(self):
        recs = [
            classify(record(0, reorder_point=100, base_price="10")),       # 1000
            classify(record(100, reorder_point=100, base_price="10")),     # 900
            classify(record(850, max_stock=1000, base_price="2")),         # 60
            classify(record(500)),                                         # 0
        ]

        summary = summarize(recs)

        assert summary.items_analyzed == 4
        assert summary.total_potential_savings == Decimal("1960")
        assert summary.counts_by_priority == {
            "critical": 1, "high": 1, "medium": 1, "low": 1
        }


# ===================
# OPTIMIZE
# ===================

class TestOptimize:
    """Tests for the batch pipeline."""

    def test_limit_truncates_list_but_not_summary(self):
        records = [InventoryFactory.create_flat(current_stock=500) for _ in range(5)]
        records.append(InventoryFactory.create_flat(current_stock=0))

        result = optimize(records, limit=2)

        assert len(result.recommendations) == 2
        assert result.recommendations[0].classification == StockClassification.CRITICAL
        assert result.summary.items_analyzed == 6

    def test_mixed_shapes(self):
        records = [
            InventoryFactory.create(current_stock=0),
            InventoryFactory.create_nested(current_stock=50),
            InventoryFactory.create_flat(current_stock=500),
        ]

        result = optimize(records)

        assert [r.priority for r in result.recommendations] == [
            RecommendationPriority.CRITICAL,
            RecommendationPriority.HIGH,
            RecommendationPriority.LOW,
        ]

    def test_empty_records(self):
        result = optimize([])

        assert result.recommendations == []
        assert result.summary.total_potential_savings == Decimal("0")

    def test_dict_instead_of_list_raises(self):
        with pytest.raises(InvalidInputShapeError):
            optimize({"currentStock": 5})

    def test_string_instead_of_list_raises(self):
        with pytest.raises(InvalidInputShapeError):
            optimize("records")

    def test_non_mapping_item_raises(self):
        with pytest.raises(InvalidInputShapeError):
            optimize([{"currentStock": 1}, 42])

    def test_input_rows_not_mutated(self):
        row = InventoryFactory.create_nested(current_stock=0)
        snapshot = {"inventory": dict(row["inventory"]), "product": dict(row["product"])}

        optimize([row])

        assert row == snapshot


# ===================
# SERVICE
# ===================

@pytest.fixture
def mock_settings():
    with patch("services.inventory_optimizer_service.settings") as settings:
        settings.default_max_stock = 10000
        settings.top_recommendations_limit = 2
        settings.base_currency = "ZAR"
        yield settings


class TestInventoryOptimizerService:
    """Tests for the settings-driven service."""

    def test_run_applies_default_limit_and_currency(self, mock_settings):
        service = InventoryOptimizerService()
        records = [InventoryFactory.create_flat(current_stock=500) for _ in range(4)]

        result = service.run(records)

        assert len(result.recommendations) == 2
        assert result.summary.items_analyzed == 4
        assert result.currency == "ZAR"

    def test_run_explicit_limit(self, mock_settings):
        service = InventoryOptimizerService()
        records = [InventoryFactory.create_flat(current_stock=500) for _ in range(4)]

        result = service.run(records, limit=3)

        assert len(result.recommendations) == 3

    def test_run_zero_limit_returns_no_recommendations(self, mock_settings):
        """limit=0 is an explicit request for none, not the default."""
        service = InventoryOptimizerService()
        records = [InventoryFactory.create_flat(current_stock=500) for _ in range(4)]

        result = service.run(records, limit=0)

        assert result.recommendations == []
        assert result.summary.items_analyzed == 4

    def test_get_optimization_reads_inventory(self, mock_settings):
        """Live rows come from the inventory service."""
        rows = [
            InventoryFactory.create(current_stock=500),
            InventoryFactory.create(current_stock=0, base_price=4),
        ]

        with patch("services.inventory_optimizer_service.get_inventory_service") as get_inventory:
            get_inventory.return_value = MagicMock()
            get_inventory.return_value.get_rows.return_value = rows

            result = InventoryOptimizerService().get_optimization()

        assert result.recommendations[0].classification == StockClassification.CRITICAL
        assert result.recommendations[0].record.product_id == rows[1]["product_id"]
        assert result.recommendations[0].potential_savings == Decimal("400")

    def test_get_optimization_null_max_stock_uses_default(self, mock_settings, mock_db, mock_supabase):
        """A stored null max_stock is treated like a missing one."""
        row = InventoryFactory.create(current_stock=9000)
        row["max_stock"] = None
        mock_supabase.set_table_data("inventory", [row])

        result = InventoryOptimizerService().get_optimization()

        recommendation = result.recommendations[0]
        assert recommendation.record.max_stock == 10000
        assert recommendation.classification == StockClassification.EXCESS

    def test_singleton(self, reset_singletons):
        assert get_inventory_optimizer_service() is get_inventory_optimizer_service()
