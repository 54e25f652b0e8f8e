"""Application metrics using the Prometheus client library.

All metrics live here so there is a single inventory of what the service
measures. Other modules import a metric and increment/observe it at the
point of action.

  COUNTER   - only goes up (requests served, tokens issued)
  GAUGE     - goes up and down (in-flight requests)
  HISTOGRAM - bucketed observations (request latency), from which
              Prometheus derives percentiles with histogram_quantile()

Prometheus scrapes GET /metrics (see app/api/metrics_endpoint.py).
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
    # Token signing is the only real work; anything past 100ms is suspect.
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# OAuth metrics
# ---------------------------------------------------------------------------

TOKENS_ISSUED = Counter(
    "oauth_tokens_issued_total",
    "Access/refresh token pairs issued by the token endpoint",
)

OAUTH_ERRORS = Counter(
    "oauth_errors_total",
    "OAuth requests rejected, by error class",
    ["error"],  # MissingParameter, InvalidClient, ... IssuanceError
)
