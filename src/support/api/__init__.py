"""Support domain API package."""

from support.api.routes import admin_chat_router, chat_router

__all__ = ["chat_router", "admin_chat_router"]
