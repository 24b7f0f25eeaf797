"""
FastAPI application entry point.

This is the main entry point for the Decollage API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.middleware import setup_exception_handlers
from api.routers import (
    auth_router,
    base_images_router,
    catalog_router,
    design_data_router,
    health_router,
    images_router,
    projects_router,
    public_shares_router,
    shares_router,
    tokens_router,
    user_router,
    variants_router,
)
from core.config import get_settings
from core.redis import close_redis, init_redis
from database import close_database, init_database

# Configure logging
_settings = get_settings()
logging.basicConfig(
    level=getattr(logging, _settings.log_level.upper(), logging.INFO),
    format=_settings.log_format,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()

    # ============ Startup ============
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    # Redis only backs cooldowns, so a failure is not fatal
    try:
        await init_redis()
    except Exception as e:
        logger.error(f"Failed to initialize Redis, cooldowns disabled: {e}")

    if settings.is_database_configured:
        try:
            await init_database()
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
    else:
        logger.warning("Database not configured, data endpoints will return 503")

    logger.info("Application startup complete")

    yield

    # ============ Shutdown ============
    logger.info("Shutting down application...")

    await close_redis()
    await close_database()

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Virtual staging API: projects, AI room variants, tokens and share links",
        version=settings.app_version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # ============ Middleware ============

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # ============ Exception Handlers ============
    setup_exception_handlers(app)

    # ============ Routers ============

    # Health checks
    app.include_router(health_router, prefix="/api")

    # Magic link auth and profile
    app.include_router(auth_router, prefix="/api")

    # Design catalog
    app.include_router(design_data_router, prefix="/api")
    app.include_router(catalog_router, prefix="/api")

    # Token ledger
    app.include_router(tokens_router, prefix="/api")

    # Projects, base image uploads and image management
    app.include_router(projects_router, prefix="/api")
    app.include_router(images_router, prefix="/api")

    # Galleries across projects
    app.include_router(user_router, prefix="/api")

    # Variant generation
    app.include_router(base_images_router, prefix="/api")
    app.include_router(variants_router, prefix="/api")

    # Share links
    app.include_router(shares_router, prefix="/api")
    app.include_router(public_shares_router, prefix="/api")

    # Locally stored images
    if settings.storage_backend == "local" and not settings.storage_public_url:
        app.mount(
            "/uploads",
            StaticFiles(directory=settings.storage_local_path, check_dir=False),
            name="uploads",
        )

    # ============ Root Endpoint ============

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs" if not settings.is_production else None,
            "health": "/api/health",
        }

    return app


# Create application instance
app = create_app()
