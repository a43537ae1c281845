"""Unit tests for settings loading."""
import json
import pytest

from app.config import Settings, flatten_json_config, load_json_config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "_comment": "menu server",
                "redis": {"redis_host": "cache", "redis_port": 6380},
                "google": {
                    "google_service_account_email": "menu@project.iam.gserviceaccount.com",
                    "google_service_account_private_key": "key",
                    "google_sheets_id": "sheet-123",
                    "google_sheets_range_products": "Menu!A2:I",
                },
                "menu": {"menu_timezone": "America/Recife", "menu_refresh_minutes": 10},
            }
        ),
        encoding="utf-8",
    )
    return path


class TestJsonConfig:
    """Test JSON config file loading."""

    def test_flatten_skips_comments(self):
        result = flatten_json_config({"_comment": "x", "a": {"b": 1, "_note": "y"}, "c": 2})

        assert result == {"b": 1, "c": 2}

    def test_load_json_config(self, config_file):
        result = load_json_config(str(config_file))

        assert result["redis_host"] == "cache"
        assert result["menu_refresh_minutes"] == 10
        assert "_comment" not in result

    def test_missing_file_returns_empty(self, tmp_path):
        assert load_json_config(str(tmp_path / "nope.json")) == {}

    def test_invalid_json_returns_empty(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_json_config(str(path)) == {}


class TestSettings:
    """Test Settings priority and derived properties."""

    def test_json_config_applied(self, config_file, monkeypatch):
        monkeypatch.setenv("CONFIG_FILE", str(config_file))
        monkeypatch.delenv("REDIS_HOST", raising=False)

        settings = Settings()

        assert settings.redis_host == "cache"
        assert settings.redis_port == 6380
        assert settings.menu_timezone == "America/Recife"
        assert settings.google_sheets_configured is True
        assert settings.sheet_range_overrides["products"] == "Menu!A2:I"
        assert settings.redis_address == "cache:6380"

    def test_kwargs_override_json(self, config_file, monkeypatch):
        monkeypatch.setenv("CONFIG_FILE", str(config_file))

        settings = Settings(menu_refresh_minutes=1)

        assert settings.menu_refresh_minutes == 1

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CONFIG_FILE", raising=False)
        for name in (
            "GOOGLE_SERVICE_ACCOUNT_EMAIL",
            "GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY",
            "GOOGLE_SHEETS_ID",
            "MENU_TIMEZONE",
            "CART_TTL_SECONDS",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.menu_timezone == "America/Sao_Paulo"
        assert settings.cart_ttl_seconds == 604800
        assert settings.google_sheets_configured is False
