"""API route modules."""

from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.inventory_logs import router as inventory_logs_router
from stockledger.api.routes.products import router as products_router
from stockledger.api.routes.purchases import router as purchases_router
from stockledger.api.routes.sales import router as sales_router

__all__ = [
    "health_router",
    "inventory_logs_router",
    "products_router",
    "purchases_router",
    "sales_router",
]
