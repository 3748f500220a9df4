"""
Product service for the catalog.

CRUD over the products table. Creating a product also opens its
inventory row so it shows up in stock views straight away.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.product import ProductCreate, ProductUpdate, ProductResponse
from exceptions import (
    ProductNotFoundError,
    ProductSKUExistsError,
    DatabaseError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# Inventory row opened for every new product
INITIAL_INVENTORY = {
    "location": "main_warehouse",
    "current_stock": 0,
    "reserved_stock": 0,
    "reorder_point": 100,
    "max_stock": 10000,
}

# Characters with meaning inside a PostgREST or=() filter
_FILTER_SYNTAX = str.maketrans("", "", ",()")


def search_filter(query: str) -> str:
    """or=() filter matching name, sku or description, case-insensitively."""
    term = query.translate(_FILTER_SYNTAX).strip()
    return ",".join(
        f"{column}.ilike.%{term}%" for column in ("name", "sku", "description")
    )


class ProductService:
    """
    Product business logic.

    Handles CRUD operations for products.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "products"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        active_only: bool = True
    ) -> list[ProductResponse]:
        """
        List products ordered by category, then SKU.

        Args:
            search: Substring matched against name, SKU and description
            category: Exact category (case-insensitive)
            active_only: Skip soft-deleted products

        Returns:
            List of ProductResponse
        """
        logger.info(
            "getting_products",
            search=search,
            category=category,
            active_only=active_only
        )

        try:
            query = self.db.table(self.table).select("*")

            if active_only:
                query = query.eq("is_active", True)
            if category:
                query = query.eq("category", category.upper())
            if search and search.strip():
                query = query.or_(search_filter(search))

            result = query.order("category").order("sku").execute()

            products = [ProductResponse(**row) for row in result.data or []]

            logger.info("products_retrieved", count=len(products))

            return products

        except Exception as e:
            logger.error("get_products_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, product_id: str) -> ProductResponse:
        """
        Get a single product by ID.

        Soft-deleted products are still returned.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.debug("getting_product", product_id=product_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", product_id)
                .execute()
            )

            if not result.data:
                raise ProductNotFoundError(product_id)

            return ProductResponse(**result.data[0])

        except ProductNotFoundError:
            raise
        except Exception as e:
            logger.error("get_product_failed", product_id=product_id, error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_sku(self, sku: str) -> Optional[ProductResponse]:
        """
        Get a product by SKU.

        Returns:
            ProductResponse or None if not found
        """
        logger.debug("getting_product_by_sku", sku=sku)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("sku", sku.upper().strip())
                .execute()
            )

            if not result.data:
                return None

            return ProductResponse(**result.data[0])

        except Exception as e:
            logger.error("get_product_by_sku_failed", sku=sku, error=str(e))
            raise DatabaseError("select", str(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: ProductCreate) -> ProductResponse:
        """
        Create a product and its empty inventory row.

        Raises:
            ProductSKUExistsError: If SKU already exists
        """
        logger.info("creating_product", sku=data.sku, category=data.category)

        if self.get_by_sku(data.sku):
            raise ProductSKUExistsError(data.sku)

        try:
            insert_data = data.model_dump(mode="json", exclude_none=True)
            insert_data["is_active"] = True

            result = self.db.table(self.table).insert(insert_data).execute()
            product = ProductResponse(**result.data[0])

            self.db.table("inventory").insert(
                {"product_id": product.id, **INITIAL_INVENTORY}
            ).execute()

            logger.info("product_created", product_id=product.id, sku=product.sku)

            return product

        except Exception as e:
            logger.error("create_product_failed", sku=data.sku, error=str(e))
            raise DatabaseError("insert", str(e))

    def update(self, product_id: str, data: ProductUpdate) -> ProductResponse:
        """
        Update an existing product.

        Only provided fields are changed.

        Raises:
            ProductNotFoundError: If product doesn't exist
            ProductSKUExistsError: If new SKU already exists
            ValidationError: If no fields provided
        """
        logger.info("updating_product", product_id=product_id)

        update_data = data.model_dump(mode="json", exclude_none=True)
        if not update_data:
            raise ValidationError("No fields to update")

        existing = self.get_by_id(product_id)

        if data.sku and data.sku != existing.sku and self.get_by_sku(data.sku):
            raise ProductSKUExistsError(data.sku)

        try:
            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("id", product_id)
                .execute()
            )

            if not result.data:
                raise ProductNotFoundError(product_id)

            logger.info(
                "product_updated",
                product_id=product_id,
                fields=list(update_data.keys())
            )

            return ProductResponse(**result.data[0])

        except ProductNotFoundError:
            raise
        except Exception as e:
            logger.error("update_product_failed", product_id=product_id, error=str(e))
            raise DatabaseError("update", str(e))

    def delete(self, product_id: str) -> None:
        """
        Soft delete a product (set is_active=False).

        Its inventory row stays; inventory views skip inactive products.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.info("deleting_product", product_id=product_id)

        self.get_by_id(product_id)

        try:
            (
                self.db.table(self.table)
                .update({"is_active": False})
                .eq("id", product_id)
                .execute()
            )
        except Exception as e:
            logger.error("delete_product_failed", product_id=product_id, error=str(e))
            raise DatabaseError("update", str(e))

        logger.info("product_deleted", product_id=product_id)


# Singleton instance for convenience
_product_service: Optional[ProductService] = None


def get_product_service() -> ProductService:
    """Get or create ProductService instance."""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service
