"""JSON logging configuration with request tracing and rate limiting."""

import logging
import sys
import time
from collections import defaultdict
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pythonjsonlogger import jsonlogger

from blink.app.config import get_settings

trace_id_ctx: ContextVar[str | None] = ContextVar("trace_id", default=None)
# Authenticated caller of the current request, set by require_authenticated
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)


def get_trace_id() -> str | None:
    """Get current trace_id from context."""
    return trace_id_ctx.get()


def set_trace_id(trace_id: str | None = None) -> str:
    """Set trace_id in context, generating one if not provided.

    Returns:
        The trace ID that was set.
    """
    tid = trace_id or str(uuid4())
    trace_id_ctx.set(tid)
    return tid


def get_user_id() -> str | None:
    return user_id_ctx.get()


def set_user_id(user_id: str) -> None:
    user_id_ctx.set(user_id)


def clear_trace_context() -> None:
    trace_id_ctx.set(None)
    user_id_ctx.set(None)


class RateLimitFilter(logging.Filter):
    """Rate limit filter to prevent log storms.

    Limits identical log messages (same logger, line and message) to
    rate_per_minute. ERROR logs bypass rate limiting and are always logged.
    A repeated failed login from one script, for example, stops flooding
    the log after the limit and shows a single [RATE LIMITED] marker.
    """

    def __init__(self, rate_per_minute: int = 100) -> None:
        super().__init__()
        self.rate_per_minute = rate_per_minute
        self._counts: dict[str, list[float]] = defaultdict(list)
        self._warned: set[str] = set()

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.ERROR:
            return True

        key = f"{record.name}:{record.lineno}:{record.msg}"
        now = time.time()
        self._counts[key] = [t for t in self._counts[key] if now - t < 60]

        if len(self._counts[key]) >= self.rate_per_minute:
            if key not in self._warned:
                self._warned.add(key)
                record.msg = f"[RATE LIMITED] {record.msg} (max {self.rate_per_minute}/min)"
                self._counts[key].append(now)
                return True
            return False

        # Back under half the limit: allow a new marker next time
        if key in self._warned and len(self._counts[key]) < self.rate_per_minute // 2:
            self._warned.discard(key)

        self._counts[key].append(now)
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding schema version, service and request identity.

    Fields on every record: timestamp (ISO 8601, UTC), level, logger,
    pid, schema_version, service and environment. Inside a request the
    trace_id is added, and user_id once the caller is authenticated.
    Explicit extra fields win over the context values.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        settings = get_settings()
        self._schema_version = settings.logging.schema_version
        self._service = settings.logging.service_name
        self._environment = settings.app.environment

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(
            record.created, tz=timezone.utc
        ).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["pid"] = record.process

        log_record["schema_version"] = self._schema_version
        log_record["service"] = self._service
        log_record["environment"] = self._environment

        if "trace_id" not in log_record and (trace_id := get_trace_id()):
            log_record["trace_id"] = trace_id
        if "user_id" not in log_record and (user_id := get_user_id()):
            log_record["user_id"] = user_id

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        log_record.pop("color_message", None)


def setup_logging(level: int | None = None) -> None:
    """Configure JSON logging for the application.

    Args:
        level: Log level. If None, uses LOGGING_LEVEL from settings.
    """
    settings = get_settings()

    if level is None:
        level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter())
    handler.addFilter(RateLimitFilter(settings.logging.rate_limit_per_minute))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in ("uvicorn", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = False
        uv_logger.addHandler(handler)

    # LoggingMiddleware writes the per-request line
    logging.getLogger("uvicorn.access").disabled = True

    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
