"""Unit tests for the Prometheus middleware."""
import pytest
from unittest.mock import Mock
from fastapi import FastAPI
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from app.middleware import PrometheusMiddleware, _observe_size


@pytest.fixture
def middleware():
    return PrometheusMiddleware(app=FastAPI())


class TestEndpointNormalization:
    """Test path parameter collapsing for metric labels."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/v1/menu", "/v1/menu"),
            ("/v1/carts/abc123", "/v1/carts/{cart_id}"),
            ("/v1/carts/abc123/items", "/v1/carts/{cart_id}/items"),
            ("/v1/carts/abc/items/x-burger", "/v1/carts/{cart_id}/items/{product_id}"),
            ("/v1/carts/abc/checkout", "/v1/carts/{cart_id}/checkout"),
            ("/", "/"),
        ],
    )
    def test_normalize_endpoint(self, middleware, path, expected):
        assert middleware._normalize_endpoint(path) == expected


class TestRequestMetrics:
    """Test metrics are recorded per normalized endpoint."""

    def test_request_is_counted(self):
        app = FastAPI()
        app.add_middleware(PrometheusMiddleware)

        @app.get("/v1/carts/{cart_id}")
        def cart(cart_id: str):
            return {"cartId": cart_id}

        labels = {"method": "GET", "endpoint": "/v1/carts/{cart_id}", "status_code": "200"}
        before = REGISTRY.get_sample_value("http_requests_total", labels) or 0

        TestClient(app).get("/v1/carts/xyz")

        assert REGISTRY.get_sample_value("http_requests_total", labels) == before + 1

    def test_excluded_paths_are_not_counted(self):
        app = FastAPI()
        app.add_middleware(PrometheusMiddleware)

        @app.get("/health")
        def health():
            return {"status": "healthy"}

        labels = {"method": "GET", "endpoint": "/health", "status_code": "200"}
        TestClient(app).get("/health")

        assert REGISTRY.get_sample_value("http_requests_total", labels) is None


class TestObserveSize:
    """Test Content-Length parsing for the size histograms."""

    @pytest.mark.parametrize("raw_length", [None, "", "abc", "-1", "²", "1²"])
    def test_invalid_lengths_are_skipped(self, raw_length):
        histogram = Mock()

        _observe_size(histogram, "GET", "/v1/menu", raw_length)

        histogram.labels.assert_not_called()

    def test_valid_length_is_observed(self):
        histogram = Mock()

        _observe_size(histogram, "POST", "/v1/carts/{cart_id}/items", "42")

        histogram.labels.assert_called_once_with(method="POST", endpoint="/v1/carts/{cart_id}/items")
        histogram.labels.return_value.observe.assert_called_once_with(42)
