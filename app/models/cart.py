"""Cart and order hand-off models."""
from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from app.models.menu import Product


class CartItem(BaseModel):
    """Quantity of one product in a cart."""
    product_id: str = Field(alias="productId")
    quantity: int

    model_config = ConfigDict(populate_by_name=True)


class Cart(BaseModel):
    """A visitor's cart.

    Stored in Redis at key: cart_v1:{cart_id}
    """
    cart_id: str = Field(alias="cartId")
    items: list[CartItem] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=datetime.utcnow, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class CartLineItem(BaseModel):
    """A cart item resolved against the current menu."""
    product: Product
    quantity: int
    line_total: float = Field(alias="lineTotal")

    model_config = ConfigDict(populate_by_name=True)


class CartTotals(BaseModel):
    total_quantity: int = Field(default=0, alias="totalQuantity")
    subtotal: float = 0.0

    model_config = ConfigDict(populate_by_name=True)


class CartView(BaseModel):
    """Cart with line items and totals, as returned by the API."""
    cart_id: str = Field(alias="cartId")
    items: list[CartItem] = Field(default_factory=list)
    line_items: list[CartLineItem] = Field(default_factory=list, alias="lineItems")
    totals: CartTotals = Field(default_factory=CartTotals)

    model_config = ConfigDict(populate_by_name=True)


MAX_ITEM_QUANTITY = 99


class AddCartItemRequest(BaseModel):
    product_id: str = Field(alias="productId")
    quantity: int = Field(default=1, le=MAX_ITEM_QUANTITY)

    model_config = ConfigDict(populate_by_name=True)


class SetCartItemQuantityRequest(BaseModel):
    quantity: int = Field(le=MAX_ITEM_QUANTITY)


class ConsumptionType(str, Enum):
    """How the customer will get the order."""
    DINE_IN = "dine-in"
    PICKUP = "pickup"


CONSUMPTION_LABELS = {
    ConsumptionType.DINE_IN: "Consumo no local",
    ConsumptionType.PICKUP: "Retirada no local",
}


class OrderRequest(BaseModel):
    """Checkout form submitted from the cart dialog."""
    customer_name: str = Field(alias="customerName")
    notes: Optional[str] = None
    consumption_type: ConsumptionType = Field(
        default=ConsumptionType.DINE_IN, alias="consumptionType"
    )

    model_config = ConfigDict(populate_by_name=True)


class WhatsAppMessage(BaseModel):
    """Pre-filled WhatsApp hand-off."""
    phone: str
    message: str
    url: str
