"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from blink import __version__
from blink.app.api import (
    auth_router,
    blinks_router,
    members_router,
    redirects_router,
    users_router,
    workspaces_router,
)
from blink.app.config import get_settings
from blink.app.logging import setup_logging
from blink.app.metrics import get_metrics_response
from blink.app.middleware import LoggingMiddleware
from blink.core.errors import BlinkError, InternalError, ValidationFailedError
from blink.core.logging_schema import LogEvent
from blink.infra import close_db, get_engine, init_db

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    await init_db()
    logger.info(
        "Starting application",
        extra={
            "event": LogEvent.APP_STARTED,
            "environment": get_settings().app.environment,
        },
    )

    yield

    logger.info("Shutting down application", extra={"event": LogEvent.APP_STOPPED})
    await close_db()


app = FastAPI(title="Blink", version=__version__, lifespan=lifespan)
app.add_middleware(LoggingMiddleware)


def _error_response(exc: BlinkError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(exclude_none=True),
    )


@app.exception_handler(BlinkError)
async def blink_error_handler(request: Request, exc: BlinkError) -> JSONResponse:
    """Handle BlinkError exceptions."""
    if exc.status_code >= 500:
        logger.error(
            exc.message,
            extra={
                "event": LogEvent.UNHANDLED_ERROR,
                "code": exc.code.value,
                "path": request.url.path,
            },
        )
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed input as 400 VALIDATION_FAILED with per-field issues."""
    return _error_response(ValidationFailedError.from_pydantic(list(exc.errors())))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log with traceback and mask as UNKNOWN."""
    logger.exception(
        "Unhandled error",
        extra={
            "event": LogEvent.UNHANDLED_ERROR,
            "error_type": type(exc).__name__,
            "path": request.url.path,
        },
    )
    return _error_response(InternalError())


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(workspaces_router)
app.include_router(members_router)
app.include_router(blinks_router)


@app.get("/health")
async def health():
    try:
        async with get_engine().begin() as conn:
            await conn.execute(text("SELECT 1"))
        database = "connected"
    except RuntimeError:
        database = "not initialized"
    except Exception as e:
        database = f"error: {e}"

    return {
        "status": "ok" if database == "connected" else "degraded",
        "version": __version__,
        "services": {"database": database},
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    if not get_settings().metrics.enabled:
        return JSONResponse(status_code=404, content={"detail": "Not Found"})
    return get_metrics_response()


# Catch-all /{redirect_id}: must stay last
app.include_router(redirects_router)
