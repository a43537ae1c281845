"""FastAPI routes for cart and checkout endpoints."""
import logging

from fastapi import APIRouter, HTTPException, Path

from app.handlers import MenuUnavailableError
from app.models import (
    CartView,
    AddCartItemRequest,
    SetCartItemQuantityRequest,
    OrderRequest,
    WhatsAppMessage,
)
from app.routers.menu_router import get_handler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/carts", tags=["cart"])

CART_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


def _handle_error(operation: str, e: Exception):
    if isinstance(e, HTTPException):
        raise e
    if isinstance(e, MenuUnavailableError):
        raise HTTPException(status_code=503, detail=str(e))
    if isinstance(e, ValueError):
        raise HTTPException(status_code=400, detail=str(e))
    logger.error(f"[CartRouter] Error in {operation}: {e}")
    raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{cart_id}", response_model=CartView, summary="Get cart")
async def get_cart(cart_id: str = Path(..., pattern=CART_ID_PATTERN)) -> CartView:
    """Cart with line items and totals."""
    try:
        return await get_handler().get_cart(cart_id)
    except Exception as e:
        _handle_error("get_cart", e)


@router.post("/{cart_id}/items", response_model=CartView, summary="Add item to cart")
async def add_item(
    body: AddCartItemRequest,
    cart_id: str = Path(..., pattern=CART_ID_PATTERN),
) -> CartView:
    """Add a product; adding an existing product increases its quantity."""
    try:
        return await get_handler().add_item(cart_id, body.product_id, body.quantity)
    except Exception as e:
        _handle_error("add_item", e)


@router.put(
    "/{cart_id}/items/{product_id}",
    response_model=CartView,
    summary="Set item quantity",
)
async def set_item_quantity(
    body: SetCartItemQuantityRequest,
    product_id: str,
    cart_id: str = Path(..., pattern=CART_ID_PATTERN),
) -> CartView:
    """Overwrite a quantity; zero or less removes the item."""
    try:
        return await get_handler().set_item_quantity(cart_id, product_id, body.quantity)
    except Exception as e:
        _handle_error("set_item_quantity", e)


@router.delete(
    "/{cart_id}/items/{product_id}",
    response_model=CartView,
    summary="Remove item from cart",
)
async def remove_item(
    product_id: str,
    cart_id: str = Path(..., pattern=CART_ID_PATTERN),
) -> CartView:
    try:
        return await get_handler().remove_item(cart_id, product_id)
    except Exception as e:
        _handle_error("remove_item", e)


@router.delete("/{cart_id}", response_model=CartView, summary="Clear cart")
async def clear_cart(cart_id: str = Path(..., pattern=CART_ID_PATTERN)) -> CartView:
    try:
        return await get_handler().clear_cart(cart_id)
    except Exception as e:
        _handle_error("clear_cart", e)


@router.post(
    "/{cart_id}/checkout",
    response_model=WhatsAppMessage,
    summary="Checkout via WhatsApp",
    description="Build the pre-filled WhatsApp message and link for the order",
)
async def checkout(
    order: OrderRequest,
    cart_id: str = Path(..., pattern=CART_ID_PATTERN),
) -> WhatsAppMessage:
    try:
        return await get_handler().checkout(cart_id, order)
    except Exception as e:
        _handle_error("checkout", e)
