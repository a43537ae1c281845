"""HTTP handlers package."""
from app.handlers.menu_handler import MenuHandler, MenuUnavailableError

__all__ = ["MenuHandler", "MenuUnavailableError"]
