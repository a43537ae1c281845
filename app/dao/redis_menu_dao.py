"""Redis-based Data Access Object for the cached menu and visitor carts."""
import logging
from typing import Callable, Optional
import redis

from app.db.redis_client import RedisClient
from app.models import MenuData, Cart

logger = logging.getLogger(__name__)

MENU_DATA_KEY = "menu_data_v1"
CART_KEY_FORMAT = "cart_v1:{}"

# Abandoned carts expire after a week
DEFAULT_CART_TTL_SECONDS = 7 * 24 * 60 * 60


class RedisMenuDAO:
    """Data Access Object for menu and cart persistence using Redis."""

    def __init__(self, client: RedisClient, cart_ttl_seconds: int = DEFAULT_CART_TTL_SECONDS):
        """Initialize RedisMenuDAO.

        Args:
            client: RedisClient instance
            cart_ttl_seconds: Expiration applied on every cart write
        """
        self.client = client
        self.cart_ttl_seconds = cart_ttl_seconds

    def set_menu_data(self, menu: MenuData) -> None:
        """Cache the full menu loaded from the spreadsheet.

        Args:
            menu: MenuData object
        """
        self.client.set(MENU_DATA_KEY, menu.model_dump_json(by_alias=True))
        logger.debug(
            f"[RedisMenuDAO] Cached menu with {len(menu.products)} products "
            f"and {len(menu.opening_hours)} opening hour rows"
        )

    def get_menu_data(self) -> Optional[MenuData]:
        """Retrieve the cached menu.

        Returns:
            MenuData or None if nothing is cached
        """
        try:
            json_str = self.client.get(MENU_DATA_KEY)
            if json_str is None:
                return None
            return MenuData.model_validate_json(json_str)
        except redis.RedisError as e:
            logger.error(f"Failed to get menu data from Redis: {e}")
            return None

    def update_cart(self, cart_id: str, mutate: Callable[[Cart], Optional[Cart]]) -> Cart:
        """Atomically read, change and write back a cart.

        The cart key is WATCHed; if another writer touches it before the
        write commits, the read and mutate are retried.

        Args:
            cart_id: Cart identifier
            mutate: Receives the stored cart (or an empty one) and returns
                the cart to store, or None to leave storage untouched

        Returns:
            The stored cart after the update
        """
        key = CART_KEY_FORMAT.format(cart_id)

        def apply(pipe) -> Cart:
            json_str = pipe.get(key)
            cart = Cart.model_validate_json(json_str) if json_str else Cart(cart_id=cart_id)
            updated = mutate(cart)
            if updated is None:
                return cart
            pipe.multi()
            pipe.setex(key, self.cart_ttl_seconds, updated.model_dump_json(by_alias=True))
            return updated

        return self.client.transaction(apply, key)


    def get_cart(self, cart_id: str) -> Optional[Cart]:
        """Retrieve a cart by its ID.

        Args:
            cart_id: Cart identifier

        Returns:
            Cart or None if not found
        """
        key = CART_KEY_FORMAT.format(cart_id)
        try:
            json_str = self.client.get(key)
            if json_str is None:
                return None
            return Cart.model_validate_json(json_str)
        except redis.RedisError as e:
            logger.error(f"Failed to get cart {cart_id} from Redis: {e}")
            return None

    def delete_cart(self, cart_id: str) -> None:
        """Delete a cart.

        Args:
            cart_id: Cart identifier
        """
        self.client.del_(CART_KEY_FORMAT.format(cart_id))
        logger.debug(f"[RedisMenuDAO] Deleted cart {cart_id}")
