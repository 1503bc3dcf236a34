"""Prometheus metrics for the ATS API.

Every metric the service records is declared here, in one inventory.
Other modules import a metric and increment or observe it where the
behavior happens; /metrics (app/api/metrics_endpoint.py) exposes them.

  COUNTER    only goes up; graph it with rate()
  GAUGE      current value, goes up and down
  HISTOGRAM  observations grouped in buckets; percentiles come from
             histogram_quantile() on the Prometheus side
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Registration requests are dominated by the password hash
    # (tens to hundreds of ms); reads should land in the low buckets.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Application-specific metrics
# ---------------------------------------------------------------------------

USER_REGISTRATIONS = Counter(
    "user_registrations_total",
    "User registration attempts by outcome",
    ["outcome"],  # "created" or the AppError code that rejected it
)

PASSWORD_HASH_DURATION = Histogram(
    "password_hash_duration_seconds",
    "Time spent computing a password hash",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)
