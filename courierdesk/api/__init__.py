"""API routers package initialization."""

from courierdesk.api.packages import router as packages_router
from courierdesk.api.tracking_numbers import router as tracking_numbers_router
from courierdesk.api.customers import router as customers_router
from courierdesk.api.pre_alerts import router as pre_alerts_router
from courierdesk.api.customer_portal import router as customer_portal_router
from courierdesk.api.tracking import router as tracking_router
from courierdesk.api.api_keys import router as api_keys_router

__all__ = [
    "packages_router",
    "tracking_numbers_router",
    "customers_router",
    "pre_alerts_router",
    "customer_portal_router",
    "tracking_router",
    "api_keys_router",
]
