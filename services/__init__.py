"""
Business logic services.

Each service handles one domain area.
"""

from services.product_service import ProductService, get_product_service
from services.inventory_service import InventoryService, get_inventory_service
from services.inventory_optimizer_service import (
    InventoryOptimizerService,
    get_inventory_optimizer_service,
)
from services.production_schedule_service import (
    ProductionScheduleService,
    get_production_schedule_service,
)
from services.insights_service import InsightsService, get_insights_service

__all__ = [
    "ProductService",
    "get_product_service",
    "InventoryService",
    "get_inventory_service",
    "InventoryOptimizerService",
    "get_inventory_optimizer_service",
    "ProductionScheduleService",
    "get_production_schedule_service",
    "InsightsService",
    "get_insights_service",
]
