"""Data models package for cardapio-server."""
from app.models.opening_hours import (
    OpeningHourWindow,
    OpeningHour,
    NextOpen,
    RestaurantStatus,
    RestaurantStatusResponse,
)
from app.models.menu import (
    Category,
    Product,
    RestaurantConfig,
    MenuData,
)
from app.models.cart import (
    CartItem,
    Cart,
    CartLineItem,
    CartTotals,
    CartView,
    AddCartItemRequest,
    SetCartItemQuantityRequest,
    ConsumptionType,
    CONSUMPTION_LABELS,
    OrderRequest,
    WhatsAppMessage,
)

__all__ = [
    # Opening hours models
    "OpeningHourWindow",
    "OpeningHour",
    "NextOpen",
    "RestaurantStatus",
    "RestaurantStatusResponse",
    # Menu models
    "Category",
    "Product",
    "RestaurantConfig",
    "MenuData",
    # Cart and order models
    "CartItem",
    "Cart",
    "CartLineItem",
    "CartTotals",
    "CartView",
    "AddCartItemRequest",
    "SetCartItemQuantityRequest",
    "ConsumptionType",
    "CONSUMPTION_LABELS",
    "OrderRequest",
    "WhatsAppMessage",
]
