"""Identity domain API package."""

from identity.api.routes import admin_router, auth_router, profile_router

__all__ = ["auth_router", "profile_router", "admin_router"]
