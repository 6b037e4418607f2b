"""Store domain API package."""

from store.api.admin import admin_router
from store.api.dashboard import dashboard_router
from store.api.routes import cart_router, checkout_router, product_router

__all__ = ["product_router", "cart_router", "checkout_router", "admin_router", "dashboard_router"]
