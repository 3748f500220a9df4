"""
Inventory API routes.

Stock levels per product, and the optimization view that ranks
what needs attention first.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.inventory import (
    InventoryResponse,
    InventoryUpdate,
    InventoryOptimization,
    OptimizationRequest,
)
from services.inventory_service import get_inventory_service
from services.inventory_optimizer_service import get_inventory_optimizer_service
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
    # Unexpected error
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

@router.get("", response_model=list[InventoryResponse])
async def list_inventory():
    """
    Get inventory for every active product, with product details.
    """
    try:
        service = get_inventory_service()
        return service.get_all()

    except Exception as e:
        return handle_error(e)


@router.get("/optimization", response_model=InventoryOptimization)
async def get_inventory_optimization(
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Ranked recommendations to return")
):
    """
    Get ranked stock recommendations for the current inventory.

    Recommendations are ordered critical > high > medium > low; items with
    the same priority keep inventory order. The summary covers every
    product even when the list is truncated.
    """
    try:
        service = get_inventory_optimizer_service()
        return service.get_optimization(limit=limit)

    except Exception as e:
        return handle_error(e)


@router.post("/optimization", response_model=InventoryOptimization)
async def optimize_inventory(request: OptimizationRequest):
    """
    Rank stock recommendations for posted inventory rows.

    Rows may be flat ({currentStock, reorderPoint, maxStock, basePrice, ...})
    or nested ({inventory: {...}, product: {...}}).
    """
    try:
        service = get_inventory_optimizer_service()
        return service.run(request.records, limit=request.limit)

    except Exception as e:
        return handle_error(e)


@router.put("/{product_id}", response_model=InventoryResponse)
async def update_inventory(product_id: str, data: InventoryUpdate):
    """
    Update stock levels for a product.

    Raises:
        404: No inventory row for product
        422: Validation error
    """
    try:
        service = get_inventory_service()
        return service.update(product_id, data)

    except Exception as e:
        return handle_error(e)
