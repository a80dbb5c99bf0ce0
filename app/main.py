# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
import os
import subprocess
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.api.api import api_router
from app.core.config import settings
from app.core.exceptions import (
    RequestValidationError,
    StarletteHTTPException,
    http_exception_handler,
    python_exception_handler,
    store_exception_handler,
    validation_exception_handler,
)
from app.core.logging import set_request_id, setup_logging
from app.core.security import get_username_from_request
from app.db.session import engine
from app.models import *  # noqa: F401,F403

# Initialize logging at module level for use in lifespan
setup_logging(settings.LOG_LEVEL)
_logger = logging.getLogger(__name__)


def run_migrations() -> None:
    """Upgrade the database schema to the latest Alembic revision."""
    project_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    _logger.info("Executing Alembic upgrade to head...")
    try:
        # Run Alembic as subprocess to avoid output buffering issues
        subprocess.run(
            ["alembic", "upgrade", "head"],
            cwd=project_dir,
            capture_output=False,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        _logger.error(f"Error running Alembic migrations: {e}")
        raise
    _logger.info("Alembic migrations completed successfully")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.
    Handles startup and shutdown events.
    """
    # ==================== STARTUP ====================
    if settings.ENVIRONMENT == "development" and settings.DB_AUTO_MIGRATE:
        _logger.info("Running database migrations automatically (development mode)...")
        run_migrations()
    elif settings.ENVIRONMENT == "production":
        _logger.warning(
            "Running in production mode. Database migrations must be run manually. "
            "Please execute 'alembic upgrade head' to apply pending migrations."
        )

    _logger.info(
        "%s %s started (environment=%s)",
        settings.PROJECT_NAME,
        settings.VERSION,
        settings.ENVIRONMENT,
    )

    yield

    # ==================== SHUTDOWN ====================
    engine.dispose()
    _logger.info("Database connections closed, shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=(
            f"{settings.API_PREFIX}/openapi.json" if settings.ENABLE_API_DOCS else None
        ),
        docs_url=f"{settings.API_PREFIX}/docs" if settings.ENABLE_API_DOCS else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    logger = logging.getLogger("app.requests")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Skip logging for probe requests on the root path
        if request.url.path == "/":
            return await call_next(request)

        # Use first 8 characters of UUID as request ID
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        set_request_id(request_id)

        start_time = time.time()
        username = get_username_from_request(request)
        client_ip = request.client.host if request.client else "Unknown"

        logger.info(
            f"request : {request.method} {request.url.path} {request.query_params} {request_id} {client_ip} [{username}]"
        )

        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000

        logger.info(
            f"response: {request.method} {request.url.path} {request.query_params} {request_id} {client_ip} [{username}] {response.status_code} {process_time:.2f}ms"
        )

        # Add request ID to response headers for client-side tracking
        response.headers["X-Request-ID"] = request_id
        return response

    # Setup CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Register exception handlers
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
    app.add_exception_handler(Exception, python_exception_handler)

    # Include API routes
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        """
        Root path, returns API information
        """
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "api_prefix": settings.API_PREFIX,
            "docs_url": (
                f"{settings.API_PREFIX}/docs" if settings.ENABLE_API_DOCS else None
            ),
        }

    return app


app = create_app()
