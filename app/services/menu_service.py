"""Menu loading from the spreadsheet with a Redis-backed cache."""
import asyncio
import logging
from typing import Optional

from app.api import GoogleSheetsClient
from app.dao import RedisMenuDAO
from app.models import MenuData
from app.services.sheet_parser import (
    parse_categories,
    parse_products,
    parse_opening_hours,
    parse_config,
)
from app.services.opening_hours import DEFAULT_TIMEZONE
from app.metrics import (
    SHEET_RANGE_READ_RESULTS,
    MENU_CATEGORIES_TOTAL,
    MENU_PRODUCTS_TOTAL,
    MENU_OPENING_HOUR_ENTRIES,
)

logger = logging.getLogger(__name__)

# Candidate ranges per sheet, tried in order; the first one with rows wins.
# Owners name their tabs differently, with or without accents.
DEFAULT_SHEET_RANGES = {
    "categories": [
        "categorias!A2:D",
        "Categorias!A2:D",
        "categorias!A2:A",
        "Categorias!A2:A",
    ],
    "products": [
        "produtos!A2:I",
        "Produtos!A2:I",
        "Itens!A2:J",
        "Itens!A2:G",
    ],
    "opening_hours": [
        "horarios!A2:H",
        "Horarios!A2:H",
        "Horários!A2:H",
        "Horarios!A2:C",
        "Horários!A2:C",
    ],
    "config": [
        "configuracao!A2:B",
        "Configuracao!A2:B",
        "Configurações!A2:B",
        "Config!A2:B",
    ],
}


def build_range_preferences(overrides: Optional[dict[str, str]] = None) -> dict[str, list[str]]:
    """Prepend configured ranges (when set) to the default candidates."""
    overrides = overrides or {}
    preferences = {}
    for sheet, ranges in DEFAULT_SHEET_RANGES.items():
        override = (overrides.get(sheet) or "").strip()
        preferences[sheet] = ([override] if override else []) + list(ranges)
    return preferences


class MenuService:
    """Loads the menu from Google Sheets and keeps it cached in Redis."""

    def __init__(
        self,
        menu_dao: RedisMenuDAO,
        sheets_client: Optional[GoogleSheetsClient] = None,
        range_preferences: Optional[dict[str, list[str]]] = None,
        default_timezone: str = DEFAULT_TIMEZONE,
    ):
        """Initialize menu service.

        Args:
            menu_dao: Redis DAO for the menu cache
            sheets_client: Google Sheets client (None when credentials are missing)
            range_preferences: Candidate ranges per sheet, see build_range_preferences
            default_timezone: Timezone used when the config sheet has none
        """
        self.menu_dao = menu_dao
        self.sheets_client = sheets_client
        self.range_preferences = range_preferences or build_range_preferences()
        self.default_timezone = default_timezone
        self._refresh_lock = asyncio.Lock()

    async def read_first_available(self, sheet: str) -> list[list[str]]:
        """Return rows from the first candidate range that has any.

        Read errors (missing tab, bad range) are logged and the next
        candidate is tried. Returns [] when none has rows.
        """
        for range_a1 in self.range_preferences.get(sheet, []):
            try:
                values = await self.sheets_client.read_range(range_a1)
            except Exception as e:
                SHEET_RANGE_READ_RESULTS.labels(sheet=sheet, result="error").inc()
                logger.warning(f"[MenuService] Failed to read sheet range \"{range_a1}\": {e}")
                continue

            if values:
                SHEET_RANGE_READ_RESULTS.labels(sheet=sheet, result="rows").inc()
                logger.debug(f"[MenuService] Using range {range_a1} for {sheet} ({len(values)} rows)")
                return values
            SHEET_RANGE_READ_RESULTS.labels(sheet=sheet, result="empty").inc()

        logger.warning(f"[MenuService] No rows found for sheet '{sheet}'")
        return []

    async def load_menu(self) -> MenuData:
        """Read all four sheets concurrently and parse them.

        Raises:
            RuntimeError: If no Google Sheets client is configured
        """
        if self.sheets_client is None:
            raise RuntimeError("Google Sheets client not configured")

        category_rows, product_rows, opening_rows, config_rows = await asyncio.gather(
            self.read_first_available("categories"),
            self.read_first_available("products"),
            self.read_first_available("opening_hours"),
            self.read_first_available("config"),
        )

        return MenuData(
            categories=parse_categories(category_rows),
            products=parse_products(product_rows),
            opening_hours=parse_opening_hours(opening_rows),
            config=parse_config(config_rows, self.default_timezone),
        )

    async def refresh_menu(self) -> MenuData:
        """Reload the menu from the spreadsheet and replace the cache."""
        logger.info("[MenuService] Refreshing menu from spreadsheet")
        menu = await self.load_menu()
        self.menu_dao.set_menu_data(menu)
        self.update_menu_metrics(menu)
        logger.info(
            f"[MenuService] Menu refreshed: {len(menu.categories)} categories, "
            f"{len(menu.products)} products, {len(menu.opening_hours)} opening hour rows"
        )
        return menu

    async def get_menu(self) -> Optional[MenuData]:
        """Cached menu, loading it on a cache miss.

        Concurrent misses share a single spreadsheet load.

        Returns:
            MenuData, or None when nothing is cached and loading fails
        """
        cached = self.menu_dao.get_menu_data()
        if cached is not None:
            return cached

        async with self._refresh_lock:
            cached = self.menu_dao.get_menu_data()
            if cached is not None:
                return cached
            try:
                return await self.refresh_menu()
            except Exception as e:
                logger.error(f"[MenuService] Failed to load menu data: {e}")
                return None

    def update_menu_metrics(self, menu: MenuData) -> None:
        available = sum(1 for product in menu.products if product.available)
        MENU_CATEGORIES_TOTAL.set(len(menu.categories))
        MENU_PRODUCTS_TOTAL.labels(available="true").set(available)
        MENU_PRODUCTS_TOTAL.labels(available="false").set(len(menu.products) - available)
        MENU_OPENING_HOUR_ENTRIES.set(len(menu.opening_hours))
