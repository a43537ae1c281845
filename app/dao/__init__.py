"""Data access objects package."""
from app.dao.redis_menu_dao import RedisMenuDAO

__all__ = ["RedisMenuDAO"]
