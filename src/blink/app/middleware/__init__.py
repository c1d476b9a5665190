"""HTTP middleware."""

from blink.app.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
