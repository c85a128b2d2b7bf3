# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the Dillar Academy API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from academy.api.middleware.auth import AuthMiddleware
from academy.api.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from academy.api.routers import router as api_router
from academy.api.routes import health
from academy.core.config import get_settings
from academy.domains.membership import ConsistencyGapError
from academy.infrastructure.database.connection import DatabaseError, db_connector
from academy.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging and opens the database connection on startup;
    disposes of the connection on shutdown. A database that is down at
    startup is retried lazily by the first request that needs it.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting Dillar Academy API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    try:
        await db_connector.connect(settings.database)
        logger.info("Database connection initialized")
    except DatabaseError as e:
        logger.warning("Failed to initialize database connection: %s", e)

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    await db_connector.close()
    logger.info("Shutting down Dillar Academy API")


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or str(loc[0])


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Respond 400 naming the missing or invalid fields."""
    fields = sorted({_field_name(tuple(error["loc"])) for error in exc.errors()})
    logger.debug("Rejected %s %s: invalid fields %s", request.method, request.url.path, fields)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": f"Missing or invalid fields: {', '.join(fields)}",
            "fields": fields,
        },
    )


async def database_exception_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error("Database failure on %s %s: %s", request.method, request.url.path, exc)
    detail = "Database connection failed" if not db_connector.is_initialized else "Database error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": detail},
    )


async def consistency_gap_handler(request: Request, exc: ConsistencyGapError) -> JSONResponse:
    """Respond 500 when one side of an enrollment pair was written and the other was not."""
    logger.error(
        "Consistency gap on %s %s (user=%s, class=%s, failed=%s): %s",
        request.method,
        request.url.path,
        exc.user_id,
        exc.class_id,
        exc.failed_ids,
        exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "failedIds": exc.failed_ids},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Dillar Academy API",
        description="Enrollment, roster and catalog backend for Dillar Academy",
        version="1.0.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Disable automatic redirects from /path to /path/
        # This prevents 307 redirects that lose Authorization headers
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.limiter = limiter

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DatabaseError, database_exception_handler)
    app.add_exception_handler(ConsistencyGapError, consistency_gap_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    # General rate limit for every route
    app.add_middleware(SlowAPIMiddleware)

    # Auth middleware - verifies session tokens
    app.add_middleware(AuthMiddleware)

    # CORS middleware (added last so it runs first, before auth and limits)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=False,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(api_router)

    return app
