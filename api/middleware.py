"""
Request logging middleware and exception handlers for the SchoolMeals API.

Every error leaves the API in the same envelope:
{"success": false, "error": {"code", "message", "field", "details"}, "timestamp"}
"""

import time
import logging
from datetime import date, datetime
from uuid import uuid4
from decimal import Decimal
from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from api.responses import error_response
from app.exceptions import ServiceError

logger = logging.getLogger("schoolmeals.middleware")

REQUEST_ID_HEADER = "X-Request-ID"


def make_serializable(obj: Any) -> Any:
    """Turn error details (Decimals, dates, exception objects) into plain JSON values"""
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {str(k): make_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [make_serializable(item) for item in obj]
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


def _error_json(status_code: int, code: str, message: str, details: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, details=make_serializable(details) if details else None),
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log each request with a request id and its duration.

    The id is taken from an incoming X-Request-ID header when the caller
    (console or gateway) sends one, so a save can be traced end to end.
    It is stored on ``request.state`` for the request context dependency.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        log_extra = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        logger.info("%s %s started", request.method, request.url.path, extra=log_extra)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - started
            logger.error(
                "%s %s failed after %.4fs",
                request.method,
                request.url.path,
                elapsed,
                extra=log_extra,
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - started
        logger.info(
            "%s %s -> %d in %.4fs",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
            extra={**log_extra, "status_code": response.status_code},
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed payloads and query parameters -> 422"""
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    return _error_json(
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        {"errors": exc.errors()},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Routing errors (unknown path, wrong method)"""
    logger.warning("HTTP %d on %s: %s", exc.status_code, request.url.path, exc.detail)
    return _error_json(exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail))


async def service_exception_handler(request: Request, exc: ServiceError):
    """Plan build, price validation, not found and version conflicts"""
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return _error_json(
        exc.http_status, exc.code, exc.message, dict(exc.details) if exc.details else None
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Anything else: log the traceback, hide the details from the client"""
    logger.exception("Unexpected error on %s", request.url.path)
    return _error_json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )
