from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace_service.app.api.v1.admins import router as admin_router
from marketplace_service.app.api.v1.auth import router as auth_router
from marketplace_service.app.api.v1.bookings import router as booking_router
from marketplace_service.app.api.v1.categories import router as category_router
from marketplace_service.app.api.v1.health import router as health_router
from marketplace_service.app.api.v1.items import router as item_router
from marketplace_service.app.api.v1.vendors import router as vendor_router
from marketplace_service.app.core.database import database_manager
from marketplace_service.app.core.settings import get_settings
from marketplace_service.app.middleware.auth.auth_middleware import (
    setup_marketplace_auth_middleware,
)
from marketplace_service.app.middleware.auth.role_middleware import (
    setup_marketplace_role_authorization_middleware,
)
from marketplace_service.app.middleware.error.error_handler import (
    setup_marketplace_error_handling,
)
from marketplace_service.app.middleware.logging.request_logging import (
    setup_marketplace_request_logging,
)
from marketplace_service.app.utils.logging import setup_marketplace_logging

settings = get_settings()
enable_file_logging = settings.ENVIRONMENT.lower() in ["production", "staging"]

logger = setup_marketplace_logging(
    "marketplace_service",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=enable_file_logging,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager for startup and shutdown."""

    try:
        await _initialize_services()
    except Exception as e:
        logger.error(
            "Failed to start marketplace service",
            exc_info=True,
            extra={"error_type": type(e).__name__},
        )
        raise

    yield
    await _shutdown_services()


async def _initialize_services() -> None:
    """Connect to the database; an unreachable database aborts startup."""

    logger.info(
        "Starting marketplace service initialization",
        extra={
            "environment": settings.ENVIRONMENT,
            "debug_mode": settings.DEBUG,
            "file_logging_enabled": enable_file_logging,
            "service_version": settings.APP_VERSION,
        },
    )

    await database_manager.ping()
    await database_manager.create_tables()

    logger.info("Marketplace service started successfully")


async def _shutdown_services() -> None:
    logger.info("Starting marketplace service shutdown")
    await database_manager.close()
    logger.info("Marketplace service shutdown completed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    _setup_middleware(app)
    _setup_cors(app)
    _setup_routers(app)

    return app


def _setup_middleware(app: FastAPI) -> None:
    """Configure middleware; the last one added runs first."""

    logger.info(
        "Configuring FastAPI application",
        extra={
            "app_name": settings.APP_NAME,
            "app_version": settings.APP_VERSION,
            "debug_mode": settings.DEBUG,
        },
    )

    setup_marketplace_role_authorization_middleware(app)
    setup_marketplace_auth_middleware(app)
    if settings.ENABLE_ACCESS_LOGS:
        setup_marketplace_request_logging(app)
    setup_marketplace_error_handling(app)


def _setup_cors(app: FastAPI) -> None:
    """Configure CORS for the admin frontend."""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )

    logger.info(
        "CORS middleware configured",
        extra={
            "allowed_origins": settings.CORS_ORIGINS,
            "credentials_allowed": settings.CORS_CREDENTIALS,
        },
    )


def _setup_routers(app: FastAPI) -> None:
    """Configure all application routers."""

    routers_info: list[dict[str, Any]] = []
    for router, tag in (
        (health_router, "Health"),
        (auth_router, "Authentication"),
        (admin_router, "Admin Management"),
        (category_router, "Categories"),
        (item_router, "Items"),
        (vendor_router, "Vendors"),
        (booking_router, "Bookings"),
    ):
        app.include_router(router, prefix="/api", tags=[tag])
        routers_info.append({"router": tag, "prefix": f"/api{router.prefix}"})

    logger.info(
        "API routes configured",
        extra={"total_routers": len(routers_info), "routers": routers_info},
    )


app = create_app()
