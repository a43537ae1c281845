"""Dependency injection container for application components."""
import logging

import redis

from app.config import Settings
from app.db import RedisClient
from app.dao import RedisMenuDAO
from app.api import GoogleSheetsClient
from app.services import MenuService, CartService
from app.services.menu_service import build_range_preferences
from app.handlers import MenuHandler

logger = logging.getLogger(__name__)


class Container:
    """Dependency injection container.

    Initializes and wires up all application dependencies. The Google Sheets
    client is owned here and closed in shutdown().
    """

    def __init__(self, settings: Settings):
        """Initialize container with all dependencies.

        Args:
            settings: Application settings
        """
        logger.info("[Container] Initializing container")
        self.settings = settings

        # Initialize Redis client
        logger.info(
            f"[Container] Connecting to Redis at {settings.redis_host}:{settings.redis_port}"
        )
        redis_internal_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password or None,
            db=settings.redis_db,
            decode_responses=True,
        )

        # Test Redis connection
        try:
            redis_internal_client.ping()
            logger.info("[Container] Redis connection successful")
        except Exception as e:
            logger.error(f"[Container] Failed to connect to Redis: {e}")
            raise

        # Initialize Redis client wrapper
        self.redis_client = RedisClient(redis_internal_client)

        # Initialize Redis Menu DAO
        self.redis_menu_dao = RedisMenuDAO(
            self.redis_client,
            cart_ttl_seconds=settings.cart_ttl_seconds,
        )

        # Initialize Google Sheets client
        self.google_sheets_client = None
        if settings.google_sheets_configured:
            self.google_sheets_client = GoogleSheetsClient(
                service_account_email=settings.google_service_account_email,
                private_key=settings.google_service_account_private_key,
                spreadsheet_id=settings.google_sheets_id,
            )
            logger.info("[Container] Google Sheets client initialized")
        else:
            logger.warning(
                "[Container] Google Sheets credentials not configured "
                "(GOOGLE_SERVICE_ACCOUNT_EMAIL, GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY, "
                "GOOGLE_SHEETS_ID). Menu will only be served from cache."
            )

        # Initialize services
        self.menu_service = MenuService(
            self.redis_menu_dao,
            sheets_client=self.google_sheets_client,
            range_preferences=build_range_preferences(settings.sheet_range_overrides),
            default_timezone=settings.menu_timezone,
        )
        self.cart_service = CartService(self.redis_menu_dao)

        # Initialize handlers
        self.menu_handler = MenuHandler(
            self.menu_service,
            self.cart_service,
            default_timezone=settings.menu_timezone,
        )

        logger.info("[Container] Container initialized successfully")

    async def shutdown(self):
        """Clean up resources on shutdown."""
        logger.info("[Container] Shutting down container")
        if self.google_sheets_client:
            try:
                await self.google_sheets_client.close()
                logger.info("[Container] Google Sheets client closed")
            except Exception as e:
                logger.error(f"[Container] Error closing Google Sheets client: {e}")
