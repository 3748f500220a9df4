"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.products import router as products_router
from routes.inventory import router as inventory_router
from routes.production_schedule import router as production_schedule_router
from routes.currencies import router as currencies_router
from routes.ai import router as ai_router

__all__ = [
    "products_router",
    "inventory_router",
    "production_schedule_router",
    "currencies_router",
    "ai_router",
]
