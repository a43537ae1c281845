"""Services package."""
from app.services.menu_service import MenuService
from app.services.cart_service import CartService

__all__ = ["MenuService", "CartService"]
