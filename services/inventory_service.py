"""
Inventory service for stock-level data access.

Reads inventory rows (joined with their product) and updates stock levels.
"""

from typing import Optional
from datetime import datetime
import structlog

from config import get_supabase_client
from models.inventory import InventoryResponse, InventoryUpdate
from exceptions import (
    InventoryNotFoundError,
    DatabaseError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# PostgREST embed: inventory row plus its product under "product"
SELECT_WITH_PRODUCT = "*, product:products(*)"


class InventoryService:
    """
    Inventory business logic.

    Handles reads and stock-level updates for the inventory table.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "inventory"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_rows(self, active_only: bool = True) -> list[dict]:
        """
        Raw inventory rows, product embedded, exactly as stored.

        Used by the optimizer, which does its own normalization.

        Args:
            active_only: Skip rows whose product is inactive
        """
        logger.info("getting_inventory", active_only=active_only)

        try:
            result = (
                self.db.table(self.table)
                .select(SELECT_WITH_PRODUCT)
                .order("product_id")
                .execute()
            )
        except Exception as e:
            logger.error("get_inventory_failed", error=str(e))
            raise DatabaseError("select", str(e))

        rows = result.data or []
        if active_only:
            rows = [
                row for row in rows
                if (row.get("product") or {}).get("is_active", True)
            ]

        logger.info("inventory_retrieved", count=len(rows))

        return rows

    def get_all(self, active_only: bool = True) -> list[InventoryResponse]:
        """
        Get inventory for every product.

        Args:
            active_only: Skip rows whose product is inactive

        Returns:
            List of InventoryResponse with product embedded
        """
        return [InventoryResponse(**row) for row in self.get_rows(active_only)]

    def get_by_product(self, product_id: str) -> InventoryResponse:
        """
        Get inventory for a single product.

        Args:
            product_id: Product UUID

        Returns:
            InventoryResponse

        Raises:
            InventoryNotFoundError: If product has no inventory row
        """
        logger.debug("getting_inventory_for_product", product_id=product_id)

        try:
            result = (
                self.db.table(self.table)
                .select(SELECT_WITH_PRODUCT)
                .eq("product_id", product_id)
                .execute()
            )

            if not result.data:
                raise InventoryNotFoundError(product_id)

            return InventoryResponse(**result.data[0])

        except InventoryNotFoundError:
            raise
        except Exception as e:
            logger.error(
                "get_inventory_for_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def update(self, product_id: str, data: InventoryUpdate) -> InventoryResponse:
        """
        Update stock levels for a product.

        Only provided fields are changed. max_stock is checked against the
        resulting reorder_point, including the stored one when only one of
        the two is sent.

        Args:
            product_id: Product UUID
            data: Fields to update

        Returns:
            Updated InventoryResponse

        Raises:
            InventoryNotFoundError: If product has no inventory row
            ValidationError: If no fields provided or max_stock < reorder_point
        """
        logger.info("updating_inventory", product_id=product_id)

        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise ValidationError("No fields to update")

        existing = self.get_by_product(product_id)

        max_stock = update_data.get("max_stock", existing.max_stock)
        reorder_point = update_data.get("reorder_point", existing.reorder_point)
        if max_stock is not None and reorder_point is not None and max_stock < reorder_point:
            raise ValidationError(
                "max_stock must be greater than or equal to reorder_point",
                details={"max_stock": max_stock, "reorder_point": reorder_point}
            )

        update_data["updated_at"] = datetime.utcnow().isoformat()

        try:
            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("product_id", product_id)
                .execute()
            )

            if not result.data:
                raise InventoryNotFoundError(product_id)

            logger.info(
                "inventory_updated",
                product_id=product_id,
                fields=list(update_data.keys())
            )

            row = {**result.data[0], "product": existing.product}
            return InventoryResponse(**row)

        except InventoryNotFoundError:
            raise
        except Exception as e:
            logger.error(
                "update_inventory_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("update", str(e))


# Singleton instance for convenience
_inventory_service: Optional[InventoryService] = None


def get_inventory_service() -> InventoryService:
    """Get or create InventoryService instance."""
    global _inventory_service
    if _inventory_service is None:
        _inventory_service = InventoryService()
    return _inventory_service
