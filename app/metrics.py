"""Prometheus metrics definitions for cardapio-server.

Exposes metrics for:
1. HTTP API metrics (requests, latency, errors)
2. Google Sheets API client metrics (calls, latency, errors)
3. Background job metrics (runs, duration, errors)
4. Menu and order metrics (catalog size, open status, checkouts)
"""
from prometheus_client import Counter, Histogram, Gauge, Info

# =============================================================================
# HTTP API METRICS
# =============================================================================

# Request counter with method, endpoint, and status labels
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Request latency histogram
HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Active requests gauge
HTTP_REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
)

# Request size histogram
HTTP_REQUEST_SIZE_BYTES = Histogram(
    "http_request_size_bytes",
    "HTTP request body size in bytes",
    ["method", "endpoint"],
    buckets=(100, 500, 1000, 5000, 10000, 50000, 100000),
)

# Response size histogram
HTTP_RESPONSE_SIZE_BYTES = Histogram(
    "http_response_size_bytes",
    "HTTP response body size in bytes",
    ["method", "endpoint"],
    buckets=(100, 500, 1000, 5000, 10000, 50000, 100000, 500000),
)

# =============================================================================
# GOOGLE SHEETS API CLIENT METRICS
# =============================================================================

# API call counter
GOOGLE_SHEETS_API_CALLS_TOTAL = Counter(
    "google_sheets_api_calls_total",
    "Total number of Google Sheets API calls",
    ["endpoint", "status"],  # status: success, error
)

# API call latency
GOOGLE_SHEETS_API_CALL_DURATION_SECONDS = Histogram(
    "google_sheets_api_call_duration_seconds",
    "Google Sheets API call latency in seconds",
    ["endpoint"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# API error counter by error type
GOOGLE_SHEETS_API_ERRORS_TOTAL = Counter(
    "google_sheets_api_errors_total",
    "Total number of Google Sheets API errors",
    ["endpoint", "error_type"],  # error_type: http_error, connection_error, auth_error
)

# Range fallback results while loading the menu
SHEET_RANGE_READ_RESULTS = Counter(
    "sheet_range_read_results_total",
    "Results of reading each candidate spreadsheet range",
    ["sheet", "result"],  # result: rows, empty, error
)

# =============================================================================
# BACKGROUND JOB METRICS
# =============================================================================

# Job run counter
BACKGROUND_JOB_RUNS_TOTAL = Counter(
    "background_job_runs_total",
    "Total number of background job runs",
    ["job_name", "status"],  # status: success, error
)

# Job duration
BACKGROUND_JOB_DURATION_SECONDS = Histogram(
    "background_job_duration_seconds",
    "Background job execution duration in seconds",
    ["job_name"],
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

# Last job run timestamp
BACKGROUND_JOB_LAST_RUN_TIMESTAMP = Gauge(
    "background_job_last_run_timestamp_seconds",
    "Unix timestamp of the last successful job run",
    ["job_name"],
)

# =============================================================================
# MENU METRICS
# =============================================================================

# Catalog size after the last load
MENU_CATEGORIES_TOTAL = Gauge(
    "menu_categories_total",
    "Number of categories in the cached menu",
)

MENU_PRODUCTS_TOTAL = Gauge(
    "menu_products_total",
    "Number of products in the cached menu",
    ["available"],  # available: true, false
)

MENU_OPENING_HOUR_ENTRIES = Gauge(
    "menu_opening_hour_entries",
    "Number of opening hour rows in the cached menu",
)

# 1 when the last status evaluation said open, 0 otherwise
RESTAURANT_OPEN = Gauge(
    "restaurant_open",
    "Whether the restaurant was open at the last status evaluation",
)

# =============================================================================
# ORDER METRICS
# =============================================================================

CHECKOUTS_TOTAL = Counter(
    "checkouts_total",
    "Total number of WhatsApp order hand-offs generated",
    ["consumption_type"],
)

CHECKOUT_ITEMS = Histogram(
    "checkout_items",
    "Number of items per checkout",
    buckets=(1, 2, 3, 5, 8, 13, 21),
)

# =============================================================================
# APPLICATION INFO
# =============================================================================

APP_INFO = Info(
    "cardapio",
    "Cardapio-Server application information",
)

# Set application info at module load
APP_INFO.info({
    "version": "1.0.0",
    "description": "Digital restaurant menu with opening hours and WhatsApp ordering",
})
