"""Unit tests for dependency wiring and startup."""
import pytest
from unittest.mock import AsyncMock, Mock, patch

import main
from app.config import Settings
from app.container import Container


def make_settings(**overrides) -> Settings:
    values = {"redis_host": "localhost", "menu_timezone": "America/Recife"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def mock_redis():
    with patch("app.container.redis.Redis") as redis_cls:
        redis_cls.return_value = Mock()
        yield redis_cls


class TestContainer:
    """Test Container wiring."""

    def test_without_google_credentials(self, mock_redis):
        container = Container(
            make_settings(
                google_service_account_email="",
                google_service_account_private_key="",
                google_sheets_id="",
            )
        )

        assert container.google_sheets_client is None
        assert container.menu_service.sheets_client is None
        assert container.menu_handler.default_timezone == "America/Recife"
        mock_redis.assert_called_once()

    @pytest.mark.asyncio
    async def test_with_google_credentials_owns_client(self, mock_redis):
        container = Container(
            make_settings(
                google_service_account_email="menu@project.iam.gserviceaccount.com",
                google_service_account_private_key="key",
                google_sheets_id="sheet-123",
                google_sheets_range_products="Menu!A2:I",
            )
        )

        assert container.google_sheets_client is not None
        assert container.menu_service.range_preferences["products"][0] == "Menu!A2:I"

        container.google_sheets_client.close = AsyncMock()
        await container.shutdown()
        container.google_sheets_client.close.assert_awaited_once()

    def test_redis_unreachable_raises(self, mock_redis):
        mock_redis.return_value.ping.side_effect = ConnectionError("refused")

        with pytest.raises(ConnectionError):
            Container(make_settings())


class TestStartupSequence:
    """Test the startup flow in main."""

    @pytest.mark.asyncio
    async def test_skips_jobs_without_sheets_client(self):
        container = Mock(google_sheets_client=None)

        with patch("main.Container", return_value=container), patch(
            "main.start_background_jobs"
        ) as start_jobs, patch("main.set_menu_handler") as set_handler:
            await main.startup_sequence(make_settings())

        set_handler.assert_called_once_with(container.menu_handler)
        start_jobs.assert_not_called()

    @pytest.mark.asyncio
    async def test_initial_load_failure_still_starts_jobs(self):
        container = Mock()
        container.menu_service.refresh_menu = AsyncMock(side_effect=RuntimeError("sheets down"))

        with patch("main.Container", return_value=container), patch(
            "main.start_background_jobs"
        ) as start_jobs, patch("main.set_menu_handler"):
            await main.startup_sequence(make_settings(refresh_on_startup=True))

        container.menu_service.refresh_menu.assert_awaited_once()
        start_jobs.assert_called_once()

    @pytest.mark.asyncio
    async def test_refresh_job_failure_does_not_raise(self):
        container = Mock()
        container.menu_service.refresh_menu = AsyncMock(side_effect=RuntimeError("boom"))

        with patch("main.container", container):
            await main.run_menu_refresh_job()

        container.menu_service.refresh_menu.assert_awaited_once()
