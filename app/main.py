"""
Tinvest FastAPI application entry point.

Serves authentication (password and Google sign-in) and per-user watchlists
to the browser client.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.config import get_settings
from app.db.session import check_db_connection, engine

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("Tinvest API starting")
    try:
        settings = get_settings()
        settings.validate_secret_key()
        if not settings.google_client_id:
            logger.warning("GOOGLE_CLIENT_ID is not set; Google sign-in will be rejected")

        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise

        yield
    finally:
        logger.info("Tinvest API shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    from app.api.errors import register_exception_handlers

    register_exception_handlers(app)

    # Mount API routes
    from app.api.auth import router as auth_router
    from app.api.watchlist import router as watchlist_router

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(watchlist_router, prefix="/api/watchlist", tags=["watchlist"])

    @app.get("/api/health")
    def health() -> dict:
        """Health check endpoint."""
        return {
            "status": "ok",
            "message": f"{settings.app_name} API is running",
            "version": __version__,
        }

    return app


app = create_app()
