"""
Application factory for the Vite & Gourmand API.

Builds the FastAPI application: middleware, rate limiting, envelope error
handlers and the /api routers. Tests create their own app with
``create_app(init_database=False)`` and override ``get_db``.
"""

import logging
import uuid

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from . import config
from .db import init_db
from .logging_config import request_id_var
from .responses import register_exception_handlers
from .routes import (
    admin_router,
    ai_agent_router,
    contact_router,
    limiter,
    menus_router,
    orders_router,
)
from .services.ai_agent import get_status

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each request.
    The ID is available in request.state.request_id, tagged on log lines and
    returned in the X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response


def create_app(init_database: bool = True) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        init_database: Create missing tables on the configured engine at
            startup. Disabled by tests, which bring their own engine.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Vite & Gourmand API",
        description="Catering menus, orders, contact tickets and the custom menu assistant",
        version="1.0.0",
    )

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Configure rate limiting
    app.state.limiter = limiter

    register_exception_handlers(app)

    api = APIRouter(prefix="/api")
    api.include_router(menus_router)
    api.include_router(orders_router)
    api.include_router(contact_router)
    api.include_router(ai_agent_router)
    api.include_router(admin_router)
    app.include_router(api)

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy",
            "assistant": get_status()["model"],
        }

    if init_database:
        @app.on_event("startup")
        def create_tables() -> None:
            init_db()
            logger.info("Database tables ready")

    logger.info("Application created (CORS origins: %s)", ", ".join(config.CORS_ORIGINS))
    return app
