"""
Response Envelope for the Vite & Gourmand API
==============================================

Every JSON route under /api answers with the same envelope so that clients
can unwrap responses uniformly:

    {
        "success": true,
        "statusCode": 200,
        "message": "Menus retrieved",
        "data": {...},
        "path": "/api/menus",
        "timestamp": "2026-06-15T10:00:00+00:00"
    }

Errors use the same shape with ``success: false`` and no ``data``. Routes keep
raising ``HTTPException``; the handlers registered here convert them.
Request validation failures are reported as 400 Bad Request and rate limit
hits as 429 Too Many Requests.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def envelope(
    request: Request,
    data: Any = None,
    message: str = "Success",
    status_code: int = 200,
) -> Dict[str, Any]:
    """Wrap a successful payload in the standard envelope."""
    return {
        "success": True,
        "statusCode": status_code,
        "message": message,
        "data": jsonable_encoder(data),
        "path": request.url.path,
        "timestamp": _timestamp(),
    }


def error_body(
    request: Request,
    status_code: int,
    message: str,
    errors: Optional[list] = None,
) -> Dict[str, Any]:
    body = {
        "success": False,
        "statusCode": status_code,
        "message": message,
        "path": request.url.path,
        "timestamp": _timestamp(),
    }
    if errors:
        body["errors"] = errors
    return body


def _format_validation_errors(exc: RequestValidationError) -> list:
    formatted = []
    for err in exc.errors():
        # Drop the leading "body"/"query" segment
        location = ".".join(str(part) for part in err.get("loc", ())[1:])
        formatted.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return formatted


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing error handlers on ``app``."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, exc.status_code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = _format_validation_errors(exc)
        logger.debug("Validation failed on %s: %s", request.url.path, errors)
        return JSONResponse(
            status_code=400,
            content=error_body(request, 400, "Validation failed", errors),
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
        logger.warning("Rate limit hit on %s from %s: %s", request.url.path, get_remote_address(request), exc.detail)
        response = JSONResponse(
            status_code=429,
            content=error_body(request, 429, f"Rate limit exceeded: {exc.detail}"),
        )
        view_rate_limit = getattr(request.state, "view_rate_limit", None)
        if view_rate_limit is not None:
            response = request.app.state.limiter._inject_headers(response, view_rate_limit)
        return response
