"""Exception handlers translating the error taxonomy into HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.custody.exceptions import InternalError, WalletSyncError, status_code_for

logger = logging.getLogger(__name__)


async def wallet_sync_error_handler(request: Request, exc: WalletSyncError) -> JSONResponse:
    """Render any taxonomy error using the central status table."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(
            f"{type(exc).__name__} on {request.url.path}",
            extra={
                "path": request.url.path,
                "stage": getattr(exc, "stage", None),
                "subject_id": getattr(exc, "subject_id", None),
            },
        )
    return JSONResponse(status_code=status_code, content=exc.to_body())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors with the same ``{"error": ...}`` shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log with traceback, return a generic body."""
    logger.error(
        f"Unhandled error on {request.url.path}: {exc}",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(status_code=500, content=InternalError().to_body())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the application."""
    app.add_exception_handler(WalletSyncError, wallet_sync_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
