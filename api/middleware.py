"""
Consolidated middleware for the PlatePlan API
"""

import time
import logging
from datetime import datetime, timezone
from uuid import uuid4
from decimal import Decimal

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.config import settings
from app.exceptions import AppError, UnauthorizedError

logger = logging.getLogger("plateplan.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    elif isinstance(obj, Exception):
        return str(obj)
    return obj


def error_response(status_code: int, error: dict, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        headers=headers,
    )


def field_errors(errors) -> list:
    """Flatten pydantic errors into ``{field, message, type}`` entries"""
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        details.append(
            {
                "field": ".".join(loc),
                "message": err.get("msg"),
                "type": err.get("type"),
            }
        )
    return make_serializable(details)


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with an id and log one line when it finishes.

    A caller-supplied ``X-Request-ID`` is reused so ids can be followed
    across services. Health checks are logged at DEBUG.
    """

    quiet_paths = ("/health-check",)

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id

        path = request.url.path
        level = (
            logging.DEBUG if path.endswith(self.quiet_paths) else logging.INFO
        )
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": path,
            "client": request.client.host if request.client else None,
        }
        started = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception as exc:
            elapsed = time.perf_counter() - started
            logger.error(
                f"{request.method} {path} failed after {elapsed:.4f}s",
                extra={**context, "error": str(exc)},
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - started
        logger.log(
            level,
            f"{request.method} {path} -> {response.status_code} in {elapsed:.4f}s",
            extra={**context, "status_code": response.status_code},
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    return error_response(
        status.HTTP_400_BAD_REQUEST,
        {
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": field_errors(exc.errors()),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return error_response(
        exc.status_code,
        {"code": f"HTTP_{exc.status_code}", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def app_exception_handler(request: Request, exc: AppError):
    """Handle application errors using the status each error carries"""
    if exc.http_status >= 500:
        logger.error(f"{exc.code} on {request.url}: {exc.message}")
    else:
        logger.warning(f"{exc.code} on {request.url}: {exc.message}")

    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}

    return error_response(exc.http_status, exc.to_dict(), headers=headers)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    message = (
        "An unexpected error occurred" if settings.is_production() else str(exc)
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"code": "INTERNAL_SERVER_ERROR", "message": message},
    )
