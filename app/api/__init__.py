"""External API clients package."""
from app.api.google_sheets_client import GoogleSheetsClient

__all__ = ["GoogleSheetsClient"]
