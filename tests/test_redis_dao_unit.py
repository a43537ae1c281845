"""Unit tests for Redis DAO (mocked, no real Redis needed)."""
import json
import pytest
from unittest.mock import Mock

import redis

from app.dao import RedisMenuDAO
from app.models import CartItem, Category, MenuData, OpeningHour, OpeningHourWindow


class TestRedisMenuDAOUnit:
    """Unit tests for RedisMenuDAO with mocked Redis client."""

    @pytest.fixture
    def mock_redis_client(self):
        """Create a mock Redis client."""
        return Mock()

    @pytest.fixture
    def menu_dao(self, mock_redis_client):
        """Create RedisMenuDAO with mocked client."""
        return RedisMenuDAO(mock_redis_client, cart_ttl_seconds=3600)

    @pytest.fixture
    def mock_pipe(self, mock_redis_client):
        """Pipeline handed to the transaction callback."""
        pipe = Mock()
        pipe.get.return_value = None
        mock_redis_client.transaction.side_effect = lambda func, *watches: func(pipe)
        return pipe

    def test_set_menu_data_uses_camel_case_json(self, menu_dao, mock_redis_client):
        """Test the menu is stored under menu_data_v1 with aliased keys."""
        menu = MenuData(
            categories=[Category(id="lanches", name="Lanches", slug="lanches")],
            opening_hours=[
                OpeningHour(
                    day_of_week=1,
                    windows=[OpeningHourWindow(opens_at="11:00", closes_at="15:00")],
                )
            ],
        )

        menu_dao.set_menu_data(menu)

        mock_redis_client.set.assert_called_once()
        key, value = mock_redis_client.set.call_args[0]
        assert key == "menu_data_v1"
        data = json.loads(value)
        assert data["openingHours"][0]["dayOfWeek"] == 1
        assert data["openingHours"][0]["windows"][0] == {"opensAt": "11:00", "closesAt": "15:00"}
        assert "loadedAt" in data

    def test_get_menu_data_deserializes(self, menu_dao, mock_redis_client):
        mock_redis_client.get.return_value = MenuData(
            categories=[Category(id="bebidas", name="Bebidas", slug="bebidas")]
        ).model_dump_json(by_alias=True)

        menu = menu_dao.get_menu_data()

        assert menu.categories[0].id == "bebidas"
        mock_redis_client.get.assert_called_once_with("menu_data_v1")

    def test_get_menu_data_missing(self, menu_dao, mock_redis_client):
        mock_redis_client.get.return_value = None

        assert menu_dao.get_menu_data() is None

    def test_get_menu_data_redis_error_returns_none(self, menu_dao, mock_redis_client):
        mock_redis_client.get.side_effect = redis.ConnectionError("down")

        assert menu_dao.get_menu_data() is None

    def test_update_cart_watches_key_and_writes_with_ttl(self, menu_dao, mock_redis_client, mock_pipe):
        """Test carts are written under cart_v1:{cart_id} inside MULTI with the configured TTL."""
        cart = menu_dao.update_cart(
            "abc",
            lambda current: current.model_copy(
                update={"items": [CartItem(product_id="suco", quantity=2)]}
            ),
        )

        assert mock_redis_client.transaction.call_args[0][1:] == ("cart_v1:abc",)
        mock_pipe.get.assert_called_once_with("cart_v1:abc")
        mock_pipe.multi.assert_called_once()
        key, ttl, value = mock_pipe.setex.call_args[0]
        assert key == "cart_v1:abc"
        assert ttl == 3600
        assert json.loads(value)["items"] == [{"productId": "suco", "quantity": 2}]
        assert cart.items == [CartItem(product_id="suco", quantity=2)]

    def test_update_cart_passes_stored_cart_to_mutate(self, menu_dao, mock_pipe):
        mock_pipe.get.return_value = '{"cartId": "abc", "items": [{"productId": "suco", "quantity": 2}]}'
        mutate = Mock(side_effect=lambda current: current)

        menu_dao.update_cart("abc", mutate)

        assert mutate.call_args[0][0].items == [CartItem(product_id="suco", quantity=2)]

    def test_update_cart_skips_write_when_mutate_returns_none(self, menu_dao, mock_pipe):
        cart = menu_dao.update_cart("abc", lambda current: None)

        assert cart.cart_id == "abc"
        mock_pipe.multi.assert_not_called()
        mock_pipe.setex.assert_not_called()

    def test_get_cart_deserializes(self, menu_dao, mock_redis_client):
        mock_redis_client.get.return_value = (
            '{"cartId": "abc", "items": [{"productId": "suco", "quantity": 2}], '
            '"updatedAt": "2024-06-05T12:00:00"}'
        )

        cart = menu_dao.get_cart("abc")

        assert cart.cart_id == "abc"
        assert cart.items == [CartItem(product_id="suco", quantity=2)]
        mock_redis_client.get.assert_called_once_with("cart_v1:abc")

    def test_get_cart_missing(self, menu_dao, mock_redis_client):
        mock_redis_client.get.return_value = None

        assert menu_dao.get_cart("nope") is None

    def test_delete_cart_uses_correct_key(self, menu_dao, mock_redis_client):
        menu_dao.delete_cart("abc")

        mock_redis_client.del_.assert_called_once_with("cart_v1:abc")

    def test_default_cart_ttl_is_one_week(self, mock_redis_client):
        dao = RedisMenuDAO(mock_redis_client)

        assert dao.cart_ttl_seconds == 604800
