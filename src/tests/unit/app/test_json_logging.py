"""Tests for the JSON log formatter, rate limiting and trace context."""

import json
import logging

from blink.app.config import get_settings
from blink.app.logging import (
    CustomJsonFormatter,
    RateLimitFilter,
    clear_trace_context,
    get_trace_id,
    get_user_id,
    set_trace_id,
    set_user_id,
)


def _record(msg: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("blink.test", level, __file__, 10, msg, None, None)


class TestRateLimitFilter:
    def test_limits_identical_messages(self) -> None:
        limiter = RateLimitFilter(rate_per_minute=3)

        results = [limiter.filter(_record()) for _ in range(6)]

        # Three pass, the fourth carries the marker, the rest are dropped
        assert results == [True, True, True, True, False, False]

    def test_marker_text(self) -> None:
        limiter = RateLimitFilter(rate_per_minute=1)
        limiter.filter(_record())
        marked = _record()

        limiter.filter(marked)

        assert marked.msg.startswith("[RATE LIMITED] hello")

    def test_errors_bypass(self) -> None:
        limiter = RateLimitFilter(rate_per_minute=1)

        results = [limiter.filter(_record(level=logging.ERROR)) for _ in range(5)]

        assert all(results)

    def test_distinct_messages_counted_separately(self) -> None:
        limiter = RateLimitFilter(rate_per_minute=1)

        assert limiter.filter(_record("one"))
        assert limiter.filter(_record("two"))


class TestTraceContext:
    def test_set_and_clear(self) -> None:
        assert set_trace_id("abc") == "abc"
        assert get_trace_id() == "abc"

        clear_trace_context()

        assert get_trace_id() is None

    def test_clear_drops_user_id(self) -> None:
        set_user_id("user-1")

        clear_trace_context()

        assert get_user_id() is None

    def test_generates_id(self) -> None:
        tid = set_trace_id()
        try:
            assert tid
            assert get_trace_id() == tid
        finally:
            clear_trace_context()


class TestCustomJsonFormatter:
    def test_standard_fields(self) -> None:
        formatter = CustomJsonFormatter()
        set_trace_id("trace-1")
        try:
            line = formatter.format(_record())
        finally:
            clear_trace_context()

        data = json.loads(line)
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["logger"] == "blink.test"
        assert data["service"] == "blink-api"
        assert data["schema_version"] == "1.0"
        assert data["trace_id"] == "trace-1"
        assert "timestamp" in data
        assert data["environment"] == get_settings().app.environment
        assert "user_id" not in data

    def test_authenticated_user_id(self) -> None:
        formatter = CustomJsonFormatter()
        set_user_id("user-1")
        try:
            data = json.loads(formatter.format(_record()))
        finally:
            clear_trace_context()

        assert data["user_id"] == "user-1"

    def test_explicit_user_id_wins(self) -> None:
        formatter = CustomJsonFormatter()
        record = _record()
        record.user_id = "explicit"
        set_user_id("from-context")
        try:
            data = json.loads(formatter.format(record))
        finally:
            clear_trace_context()

        assert data["user_id"] == "explicit"
