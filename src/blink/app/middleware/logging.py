"""Request logging middleware.

Provides canonical log line per request with trace ID propagation.
"""

import logging
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from blink.app.config import get_settings
from blink.app.logging import clear_trace_context, set_trace_id
from blink.app.metrics.collector import HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL
from blink.core.logging_schema import LogEvent

logger = logging.getLogger(__name__)
_logging_config = get_settings().logging

_SKIP_PATHS = ("/health", "/metrics")

# Ids are replaced by placeholders, most specific first
_PATH_PATTERNS = [
    (re.compile(r"^/workspaces/[^/]+/members/[^/]+$"), "/workspaces/:id/members/:id"),
    (re.compile(r"^/workspaces/[^/]+/blinks/[^/]+$"), "/workspaces/:id/blinks/:id"),
    (re.compile(r"^/workspaces/[^/]+/(members|blinks)$"), r"/workspaces/:id/\1"),
    (re.compile(r"^/workspaces/[^/]+$"), "/workspaces/:id"),
    (re.compile(r"^/users/(?!me$)[^/]+$"), "/users/:id"),
]

# Whitelist of known endpoints for metrics (cardinality control)
_KNOWN_ENDPOINTS = frozenset({
    # Auth
    "/auth/login",
    "/auth/refresh",
    "/auth/logout",
    # Users
    "/users",
    "/users/me",
    "/users/:id",
    # Workspaces
    "/workspaces",
    "/workspaces/:id",
    "/workspaces/:id/members",
    "/workspaces/:id/members/:id",
    "/workspaces/:id/blinks",
    "/workspaces/:id/blinks/:id",
})

_REDIRECT_PATH = re.compile(r"^/[^/]+$")


def _normalize_path(path: str) -> str:
    """Normalize path and apply whitelist for cardinality control."""
    for pattern, replacement in _PATH_PATTERNS:
        normalized = pattern.sub(replacement, path)
        if normalized != path:
            path = normalized
            break
    if path in _KNOWN_ENDPOINTS:
        return path
    # Anything else at the top level is a short link
    return "/:redirect_id" if _REDIRECT_PATH.match(path) else "other"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging with trace ID propagation.

    - Sets trace_id from X-Trace-ID header or generates a new one
    - Logs one canonical line per request (status, duration, path)
    - Warns on requests slower than LOGGING_SLOW_THRESHOLD_MS
    - Adds X-Trace-ID header to the response

    Usage:
        app.add_middleware(LoggingMiddleware)
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        trace_id = set_trace_id(request.headers.get("x-trace-id"))
        path = request.url.path

        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "Request failed",
                extra={
                    "event": LogEvent.REQUEST_FAILED,
                    "method": request.method,
                    "path": path,
                    "duration_ms": (time.monotonic() - start) * 1000,
                    "trace_id": trace_id,
                },
            )
            clear_trace_context()
            raise

        duration_seconds = time.monotonic() - start
        duration_ms = duration_seconds * 1000

        if path not in _SKIP_PATHS:
            endpoint = _normalize_path(path)
            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                endpoint=endpoint,
                status=str(response.status_code),
            ).inc()
            HTTP_REQUEST_DURATION.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(duration_seconds)

            logger.info(
                "Request completed",
                extra={
                    "event": LogEvent.REQUEST_COMPLETE,
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": duration_ms,
                    "trace_id": trace_id,
                },
            )

            if duration_ms > _logging_config.slow_threshold_ms:
                logger.warning(
                    "Slow request detected",
                    extra={
                        "event": LogEvent.REQUEST_SLOW,
                        "method": request.method,
                        "path": path,
                        "status": response.status_code,
                        "duration_ms": duration_ms,
                        "threshold_ms": _logging_config.slow_threshold_ms,
                        "trace_id": trace_id,
                    },
                )

        clear_trace_context()
        response.headers["X-Trace-ID"] = trace_id
        return response
