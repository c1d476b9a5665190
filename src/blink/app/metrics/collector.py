"""Prometheus metrics definitions."""

from prometheus_client import Counter, Histogram

# =============================================================================
# Histogram Buckets
# =============================================================================
# Scale: logarithmic with SLO boundaries (200ms, 1s)

# FAST: redirects, DB lookups (0.5ms ~ 5s)
_BUCKETS_FAST = (
    0.0005, 0.001, 0.002, 0.005, 0.01,
    0.02, 0.05, 0.1, 0.2, 0.5,
    1, 2, 5,
)  # 13 buckets

# =============================================================================
# HTTP Metrics
# =============================================================================
# endpoint label is normalized by LoggingMiddleware (cardinality control)

HTTP_REQUESTS_TOTAL = Counter(
    "blink_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "blink_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "endpoint"],
    buckets=_BUCKETS_FAST,
)

# =============================================================================
# Auth Metrics
# =============================================================================

AUTH_EVENTS_TOTAL = Counter(
    "blink_auth_events_total",
    "Authentication events",
    ["event"],  # login_succeeded, login_failed, token_refreshed, token_rejected, session_revoked
)

# =============================================================================
# Redirect Metrics
# =============================================================================

REDIRECTS_TOTAL = Counter(
    "blink_redirects_total",
    "Public redirect lookups",
    ["result"],  # found, not_found
)

REDIRECT_ID_COLLISIONS_TOTAL = Counter(
    "blink_redirect_id_collisions_total",
    "Generated redirect ids that were already taken",
)
