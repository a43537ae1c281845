"""FastAPI middleware for Prometheus metrics instrumentation."""
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.metrics import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION_SECONDS,
    HTTP_REQUESTS_IN_PROGRESS,
    HTTP_REQUEST_SIZE_BYTES,
    HTTP_RESPONSE_SIZE_BYTES,
)


def _observe_size(histogram, method: str, endpoint: str, raw_length) -> None:
    if not raw_length or not (raw_length.isascii() and raw_length.isdigit()):
        return
    histogram.labels(method=method, endpoint=endpoint).observe(int(raw_length))


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics for Prometheus."""

    # Endpoints to exclude from metrics (like /metrics itself)
    EXCLUDE_PATHS = {"/metrics", "/health", "/ping"}

    # Path segments followed by an identifier
    PARAM_SEGMENTS = {"carts": "{cart_id}", "items": "{product_id}"}

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request and collect metrics."""
        path = request.url.path
        if path in self.EXCLUDE_PATHS:
            return await call_next(request)

        method = request.method
        endpoint = self._normalize_endpoint(path)

        _observe_size(
            HTTP_REQUEST_SIZE_BYTES, method, endpoint, request.headers.get("content-length")
        )
        in_progress = HTTP_REQUESTS_IN_PROGRESS.labels(method=method, endpoint=endpoint)
        in_progress.inc()
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            HTTP_REQUEST_DURATION_SECONDS.labels(method=method, endpoint=endpoint).observe(
                time.perf_counter() - start_time
            )
            in_progress.dec()
            HTTP_REQUESTS_TOTAL.labels(
                method=method, endpoint=endpoint, status_code=str(status_code)
            ).inc()

        _observe_size(
            HTTP_RESPONSE_SIZE_BYTES, method, endpoint, response.headers.get("content-length")
        )
        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize URL path to avoid high cardinality from path parameters.

        Converts paths like /v1/carts/abc123/items/x-burger to
        /v1/carts/{cart_id}/items/{product_id}
        """
        segments = path.strip("/").split("/")

        normalized = []
        for i, segment in enumerate(segments):
            previous = segments[i - 1] if i > 0 else ""
            if previous in self.PARAM_SEGMENTS:
                normalized.append(self.PARAM_SEGMENTS[previous])
            else:
                normalized.append(segment)

        return "/" + "/".join(normalized) if normalized else "/"
