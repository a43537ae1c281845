"""Cart operations backed by Redis."""
import logging
from datetime import datetime
from typing import Callable

from app.dao import RedisMenuDAO
from app.models import (
    Cart,
    CartItem,
    CartLineItem,
    CartTotals,
    CartView,
    Product,
)

logger = logging.getLogger(__name__)


def build_cart_line_items(items: list[CartItem], products: list[Product]) -> list[CartLineItem]:
    """Resolve cart items against the menu.

    Items whose product is no longer on the menu are left out.
    """
    product_map = {product.id: product for product in products}
    line_items: list[CartLineItem] = []
    for item in items:
        product = product_map.get(item.product_id)
        if product is None:
            continue
        line_items.append(
            CartLineItem(
                product=product,
                quantity=item.quantity,
                line_total=product.price * item.quantity,
            )
        )
    return line_items


def calculate_cart_totals(line_items: list[CartLineItem]) -> CartTotals:
    return CartTotals(
        total_quantity=sum(item.quantity for item in line_items),
        subtotal=sum(item.line_total for item in line_items),
    )


class CartService:
    """Persisted cart map keyed by cart ID.

    Mirrors the client-side cart store: adding merges quantities, setting a
    quantity of zero or less removes the line.
    """

    def __init__(self, menu_dao: RedisMenuDAO):
        """Initialize cart service.

        Args:
            menu_dao: Redis DAO used for cart persistence
        """
        self.menu_dao = menu_dao

    def get_cart(self, cart_id: str) -> Cart:
        """Return the stored cart, or an empty one."""
        return self.menu_dao.get_cart(cart_id) or Cart(cart_id=cart_id)

    def _update_items(self, cart_id: str, change: Callable[[list[CartItem]], list[CartItem]]) -> Cart:
        """Apply change to the stored items in one Redis transaction."""
        def mutate(cart: Cart) -> Cart:
            items = change(list(cart.items))
            return cart.model_copy(update={"items": items, "updated_at": datetime.utcnow()})

        return self.menu_dao.update_cart(cart_id, mutate)

    def add_item(self, cart_id: str, product_id: str, quantity: int = 1) -> Cart:
        """Add quantity of a product. Non-positive quantities are ignored."""
        if quantity <= 0:
            return self.get_cart(cart_id)

        def change(items: list[CartItem]) -> list[CartItem]:
            for index, item in enumerate(items):
                if item.product_id == product_id:
                    items[index] = CartItem(product_id=product_id, quantity=item.quantity + quantity)
                    break
            else:
                items.append(CartItem(product_id=product_id, quantity=quantity))
            return items

        logger.debug(f"[CartService] cart={cart_id} +{quantity} {product_id}")
        return self._update_items(cart_id, change)

    def set_item_quantity(self, cart_id: str, product_id: str, quantity: int) -> Cart:
        """Overwrite a line's quantity; zero or less removes the line.

        Setting the quantity of a product that is not in the cart is a no-op.
        """
        if quantity <= 0:
            return self.remove_item(cart_id, product_id)

        return self._update_items(
            cart_id,
            lambda items: [
                CartItem(product_id=item.product_id, quantity=quantity)
                if item.product_id == product_id
                else item
                for item in items
            ],
        )

    def remove_item(self, cart_id: str, product_id: str) -> Cart:
        return self._update_items(
            cart_id, lambda items: [item for item in items if item.product_id != product_id]
        )

    def clear(self, cart_id: str) -> Cart:
        self.menu_dao.delete_cart(cart_id)
        return Cart(cart_id=cart_id)

    def get_item_quantity(self, cart_id: str, product_id: str) -> int:
        for item in self.get_cart(cart_id).items:
            if item.product_id == product_id:
                return item.quantity
        return 0

    def get_cart_view(self, cart_id: str, products: list[Product]) -> CartView:
        """Cart with resolved line items and totals."""
        cart = self.get_cart(cart_id)
        line_items = build_cart_line_items(cart.items, products)
        return CartView(
            cart_id=cart_id,
            items=cart.items,
            line_items=line_items,
            totals=calculate_cart_totals(line_items),
        )
