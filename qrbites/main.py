"""FastAPI application: main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from qrbites.application.services.health_service import APP_VERSION
from qrbites.config import get_settings
from qrbites.core.exceptions import register_exception_handlers
from qrbites.core.logging import configure_logging
from qrbites.core.middleware import setup_middleware
from qrbites.infrastructure.database import init_db

# Import all models so SQLAlchemy knows about them
from qrbites.domain.models.federated_credential import FederatedCredential  # noqa: F401
from qrbites.domain.models.menu import Menu  # noqa: F401
from qrbites.domain.models.menu_item import MenuItem  # noqa: F401
from qrbites.domain.models.restaurant import Restaurant  # noqa: F401
from qrbites.domain.models.user import User  # noqa: F401

from qrbites.interfaces.api.auth import router as auth_router
from qrbites.interfaces.api.health import router as health_router
from qrbites.interfaces.api.menu_items import router as menu_items_router
from qrbites.interfaces.api.menus import router as menus_router
from qrbites.interfaces.api.public import redirect_router
from qrbites.interfaces.api.public import router as public_router
from qrbites.interfaces.api.restaurants import router as restaurants_router
from qrbites.interfaces.api.users import router as users_router

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    settings = get_settings()
    logger.info("Starting QRBites API", env=settings.ENVIRONMENT, port=settings.PORT)

    # Create DB tables (no migrations yet)
    init_db()
    logger.info("Database tables created/verified")

    yield

    logger.info("QRBites API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="QRBites API",
        description="Restaurants, menus and menu items behind QR codes",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    setup_middleware(app)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(restaurants_router)
    app.include_router(menus_router)
    app.include_router(menu_items_router)
    app.include_router(public_router)
    app.include_router(redirect_router)

    @app.get("/")
    def root():
        return {
            "name": "QRBites API",
            "version": APP_VERSION,
            "status": "running",
            "docs": "/docs",
        }

    return app


app = create_app()
