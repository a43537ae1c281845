"""FastAPI routes for menu and opening-hours endpoints."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from app.handlers import MenuUnavailableError
from app.models import MenuData, RestaurantStatusResponse

logger = logging.getLogger(__name__)

# Create router at module level
router = APIRouter(tags=["menu"])

# Global handler reference - set during startup
_menu_handler = None


def set_menu_handler(handler):
    """Set the menu handler instance (called during startup)."""
    global _menu_handler
    _menu_handler = handler
    logger.info("[MenuRouter] Handler injected successfully")


def get_handler():
    """Get the menu handler, raising error if not initialized."""
    if _menu_handler is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _menu_handler


@router.get(
    "/v1/menu",
    response_model=MenuData,
    summary="Get menu",
    description="Categories, products, opening hours and restaurant settings",
)
async def get_menu() -> MenuData:
    """Get the cached menu."""
    try:
        handler = get_handler()
        return await handler.get_menu()
    except HTTPException:
        raise
    except MenuUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.error(f"[MenuRouter] Error in get_menu: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post(
    "/v1/menu/refresh",
    response_model=MenuData,
    summary="Refresh menu",
    description="Reload the menu from the spreadsheet and replace the cache",
)
async def refresh_menu() -> MenuData:
    """Force a reload from Google Sheets."""
    try:
        handler = get_handler()
        return await handler.refresh_menu()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[MenuRouter] Error in refresh_menu: {e}")
        raise HTTPException(status_code=502, detail="Failed to reload menu from spreadsheet")


@router.get(
    "/v1/status",
    response_model=RestaurantStatusResponse,
    summary="Get open/closed status",
    description="Whether the restaurant is open now, when it closes or when it next opens",
)
async def get_status(
    at: Optional[datetime] = Query(
        None,
        description="ISO-8601 instant to evaluate instead of now (naive values are UTC)",
    ),
) -> RestaurantStatusResponse:
    """Evaluate the opening hours."""
    try:
        handler = get_handler()
        return await handler.get_status(at)
    except HTTPException:
        raise
    except MenuUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.error(f"[MenuRouter] Error in get_status: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/ping",
    summary="Health check",
    description="Health check endpoint",
)
def ping() -> dict[str, str]:
    """Health check endpoint."""
    handler = get_handler()
    return handler.ping()
