"""Configuration management using Pydantic BaseSettings with JSON file support."""
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


def flatten_json_config(config: dict[str, Any]) -> dict[str, Any]:
    """Flatten nested JSON config into flat key-value pairs.

    Sections only group related keys:
    {
        "redis": {"redis_host": "localhost", "cart_ttl_seconds": 86400},
        "menu": {"menu_timezone": "America/Recife", "menu_refresh_minutes": 10}
    }

    Becomes:
    {"redis_host": "localhost", "cart_ttl_seconds": 86400,
     "menu_timezone": "America/Recife", "menu_refresh_minutes": 10}

    Keys starting with "_" (like "_comment") are skipped.
    """
    result = {}

    for key, value in config.items():
        # Skip comment keys
        if key.startswith("_"):
            continue

        if isinstance(value, dict):
            # Recursively flatten nested dicts
            nested = flatten_json_config(value)
            result.update(nested)
        else:
            result[key] = value

    return result


def load_json_config(config_file: Optional[str] = None) -> dict[str, Any]:
    """Load configuration from a JSON file.

    Supports both flat and nested JSON structures. Nested structures are
    automatically flattened. Keys starting with "_" are treated as comments
    and ignored.

    Args:
        config_file: Path to JSON config file. If None, checks CONFIG_FILE env var.

    Returns:
        Dictionary of configuration values (flattened), or empty dict if no file found.
    """
    file_path = config_file or os.getenv("CONFIG_FILE")

    if not file_path:
        return {}

    path = Path(file_path)
    if not path.exists():
        logger.warning(f"Config file not found: {file_path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
            logger.info(f"Loaded configuration from: {file_path}")
            # Flatten nested structure
            return flatten_json_config(config)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file {file_path}: {e}")
        return {}
    except Exception as e:
        logger.error(f"Error reading config file {file_path}: {e}")
        return {}


class Settings(BaseSettings):
    """Application configuration with JSON file and environment variable support.

    Configuration priority (highest to lowest):
    1. Environment variables
    2. JSON config file (specified via CONFIG_FILE env var)
    3. Default values
    """

    # Redis Configuration
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0

    # Carts expire after this many seconds without changes (7 days)
    cart_ttl_seconds: int = 604800

    # Google Sheets Configuration
    # Without these three values the menu cannot be loaded from the spreadsheet
    google_service_account_email: str = ""
    google_service_account_private_key: str = ""
    google_sheets_id: str = ""

    # Optional explicit ranges, tried before the built-in candidates
    google_sheets_range_categories: str = ""
    google_sheets_range_products: str = ""
    google_sheets_range_opening_hours: str = ""
    google_sheets_range_config: str = ""

    # Menu Configuration
    # Used when the config sheet has no timezone entry
    menu_timezone: str = "America/Sao_Paulo"
    menu_refresh_minutes: int = 5

    # Server Configuration
    server_port: int = 8080
    log_level: str = "INFO"

    # Startup Configuration
    # If False, skip the initial menu load on startup (only schedule jobs)
    refresh_on_startup: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def __init__(self, **kwargs):
        """Initialize settings from JSON file and environment variables.

        Priority: env vars > JSON config > defaults
        """
        # Load JSON config first (if CONFIG_FILE is set)
        json_config = load_json_config()

        # Merge: kwargs override JSON config
        merged_kwargs = {**json_config, **kwargs}

        super().__init__(**merged_kwargs)

    @property
    def google_sheets_configured(self) -> bool:
        """True when service account credentials and sheet ID are all set."""
        return bool(
            self.google_service_account_email.strip()
            and self.google_service_account_private_key.strip()
            and self.google_sheets_id.strip()
        )

    @property
    def sheet_range_overrides(self) -> dict[str, str]:
        """Explicit ranges keyed by sheet name."""
        return {
            "categories": self.google_sheets_range_categories,
            "products": self.google_sheets_range_products,
            "opening_hours": self.google_sheets_range_opening_hours,
            "config": self.google_sheets_range_config,
        }

    @property
    def redis_address(self) -> str:
        """Get Redis connection address in host:port format."""
        return f"{self.redis_host}:{self.redis_port}"


# Global settings instance
settings = Settings()
