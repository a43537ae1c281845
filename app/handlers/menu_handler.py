"""Menu handler for HTTP requests."""
import logging
from datetime import datetime
from typing import Optional

from app.models import (
    MenuData,
    RestaurantStatusResponse,
    CartView,
    OrderRequest,
    WhatsAppMessage,
)
from app.services.menu_service import MenuService
from app.services.cart_service import CartService, build_cart_line_items
from app.services.opening_hours import (
    get_restaurant_status,
    format_status_hint,
    resolve_timezone,
)
from app.services.whatsapp_service import build_whatsapp_message
from app.metrics import RESTAURANT_OPEN, CHECKOUTS_TOTAL, CHECKOUT_ITEMS

logger = logging.getLogger(__name__)


class MenuUnavailableError(Exception):
    """Raised when no menu is cached and the spreadsheet cannot be read."""


class MenuHandler:
    """Handler for menu, status and cart HTTP requests."""

    def __init__(
        self,
        menu_service: MenuService,
        cart_service: CartService,
        default_timezone: str,
    ):
        """Initialize menu handler.

        Args:
            menu_service: Menu loading and caching service
            cart_service: Persisted cart service
            default_timezone: Timezone used when the menu config has none
        """
        self.menu_service = menu_service
        self.cart_service = cart_service
        self.default_timezone = default_timezone

    def ping(self) -> dict[str, str]:
        """Health check."""
        return {"status": "pong"}

    async def _require_menu(self) -> MenuData:
        menu = await self.menu_service.get_menu()
        if menu is None:
            raise MenuUnavailableError("Não foi possível carregar o cardápio")
        return menu

    async def get_menu(self) -> MenuData:
        return await self._require_menu()

    async def refresh_menu(self) -> MenuData:
        return await self.menu_service.refresh_menu()

    async def get_status(self, at: Optional[datetime] = None) -> RestaurantStatusResponse:
        """Evaluate the open/closed badge for now (or for `at`).

        Unknown timezones from the config sheet are evaluated in UTC; that
        fallback is logged here since the evaluator stays silent.
        """
        menu = await self._require_menu()
        timezone_name = menu.config.timezone or self.default_timezone

        _, known = resolve_timezone(timezone_name)
        if not known:
            logger.warning(
                f"[MenuHandler] Unknown timezone '{timezone_name}', evaluating opening hours in UTC"
            )

        status = get_restaurant_status(menu.opening_hours, timezone_name, at)
        RESTAURANT_OPEN.set(1 if status.is_open else 0)

        return RestaurantStatusResponse(
            **status.model_dump(),
            hint=format_status_hint(status),
            timezone=timezone_name if known else "UTC",
        )

    async def get_cart(self, cart_id: str) -> CartView:
        menu = await self._require_menu()
        return self.cart_service.get_cart_view(cart_id, menu.products)

    async def add_item(self, cart_id: str, product_id: str, quantity: int = 1) -> CartView:
        """Add a product to the cart.

        Raises:
            ValueError: If the product is unknown or unavailable
        """
        menu = await self._require_menu()
        product = menu.get_product(product_id)
        if product is None:
            raise ValueError(f"Produto não encontrado: {product_id}")
        if not product.available:
            raise ValueError(f"Produto indisponível: {product.name}")

        self.cart_service.add_item(cart_id, product_id, quantity)
        return self.cart_service.get_cart_view(cart_id, menu.products)

    async def set_item_quantity(self, cart_id: str, product_id: str, quantity: int) -> CartView:
        menu = await self._require_menu()
        self.cart_service.set_item_quantity(cart_id, product_id, quantity)
        return self.cart_service.get_cart_view(cart_id, menu.products)

    async def remove_item(self, cart_id: str, product_id: str) -> CartView:
        menu = await self._require_menu()
        self.cart_service.remove_item(cart_id, product_id)
        return self.cart_service.get_cart_view(cart_id, menu.products)

    async def clear_cart(self, cart_id: str) -> CartView:
        self.cart_service.clear(cart_id)
        return CartView(cart_id=cart_id)

    async def checkout(self, cart_id: str, order: OrderRequest) -> WhatsAppMessage:
        """Build the WhatsApp hand-off for a cart.

        The cart is kept so the visitor can resend the order.

        Raises:
            ValueError: If the customer name is blank or the cart has no items
        """
        if not order.customer_name.strip():
            raise ValueError("Informe o nome do cliente para continuar.")

        menu = await self._require_menu()
        cart = self.cart_service.get_cart(cart_id)
        line_items = build_cart_line_items(cart.items, menu.products)
        if not line_items:
            raise ValueError("O carrinho está vazio.")

        message = build_whatsapp_message(
            line_items,
            menu.config,
            order.customer_name,
            order.consumption_type,
            order.notes,
        )

        CHECKOUTS_TOTAL.labels(consumption_type=order.consumption_type.value).inc()
        CHECKOUT_ITEMS.observe(sum(item.quantity for item in line_items))
        logger.info(
            f"[MenuHandler] Checkout cart={cart_id} items={len(line_items)} "
            f"mode={order.consumption_type.value}"
        )
        return message
