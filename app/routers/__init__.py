"""Routers package."""
from app.routers.menu_router import router as menu_router, set_menu_handler
from app.routers.cart_router import router as cart_router

__all__ = ["menu_router", "set_menu_handler", "cart_router"]
