"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings)

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    # Create FastAPI app
    app = FastAPI(
        title="FitTrack Cascade API",
        description="Duplicate, delete, count and reorder program subtrees",
        version="1.0.0",
    )

    # Configure CORS middleware
    _configure_cors(app, settings)

    # Include API routers
    _include_routers(app)

    # Log feature flags status
    _log_feature_flags(settings)

    return app


def _configure_logging(settings: Settings) -> None:
    """Set the root log level; handlers are left to the runtime."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(settings.log_level)


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            profiles_sample_rate=0.1,
        )
        logger.info("Sentry initialized for cascade-api")


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    trusted_origins = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]
    trusted_origins.extend(settings.cors_origins_list)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=trusted_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import health_router, subtrees_router

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    # Program subtree operations (prefix /programs)
    app.include_router(subtrees_router)


def _log_feature_flags(settings: Settings) -> None:
    """Log the status of feature flags at startup."""
    logger.info(
        "Document store: %s (write batch limit %d)",
        settings.document_store_backend,
        settings.write_batch_limit,
    )
    if not settings.duplication_audit_log_enabled:
        logger.info("Duplication audit log is disabled")
    if settings.require_owner_field:
        logger.info("REQUIRE_OWNER_FIELD is active: sources without userId cannot be duplicated")
    if settings.verify_owner_on_delete:
        logger.info("VERIFY_OWNER_ON_DELETE is active")


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
