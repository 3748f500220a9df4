"""
Product catalog API routes.
"""

from fastapi import APIRouter, Query, Response
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.product import ProductCreate, ProductUpdate, ProductResponse
from services.product_service import get_product_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("", response_model=list[ProductResponse])
async def list_products(
    search: Optional[str] = Query(None, description="Match name, SKU or description"),
    category: Optional[str] = Query(None, description="Filter by category (EPS, BR, LED)"),
    include_inactive: bool = Query(False, description="Include soft-deleted products"),
):
    """
    List products ordered by category and SKU.
    """
    try:
        service = get_product_service()
        return service.get_all(
            search=search,
            category=category,
            active_only=not include_inactive
        )

    except Exception as e:
        return handle_error(e)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str):
    """
    Get a single product by ID.

    Raises:
        404: Product not found
    """
    try:
        service = get_product_service()
        return service.get_by_id(product_id)

    except Exception as e:
        return handle_error(e)


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(data: ProductCreate):
    """
    Create a new product with an empty inventory row.

    Raises:
        409: SKU already exists
        422: Validation error
    """
    try:
        service = get_product_service()
        return service.create(data)

    except Exception as e:
        return handle_error(e)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, data: ProductUpdate):
    """
    Update an existing product.

    Only provided fields are updated.

    Raises:
        404: Product not found
        409: New SKU already exists
        422: Validation error
    """
    try:
        service = get_product_service()
        return service.update(product_id, data)

    except Exception as e:
        return handle_error(e)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: str):
    """
    Delete a product (soft delete).

    Raises:
        404: Product not found
    """
    try:
        service = get_product_service()
        service.delete(product_id)
        return Response(status_code=204)

    except Exception as e:
        return handle_error(e)
