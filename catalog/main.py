"""Catalog API - FastAPI Application Factory."""

from collections.abc import AsyncGenerator, Iterable
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.api.errors import register_error_handlers
from catalog.api.router import api_router
from catalog.core import get_settings, setup_logging
from catalog.core.config import Settings
from catalog.core.logging import get_logger
from catalog.middleware import (
    PROTECTED_ROUTES,
    BearerAuthMiddleware,
    ProtectedRoute,
    RequestLoggingMiddleware,
)
from catalog.services.login import CoinFlipVerifier, CredentialVerifier
from catalog.services.products import ProductRepository
from catalog.services.tokens import TokenService

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings
    setup_logging(level=settings.log_level, format_type=settings.log_format)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    for warning in settings.check_security_configuration():
        logger.warning(f"Security configuration: {warning}")

    yield

    logger.info("Shutting down...")


def build_token_service(settings: Settings) -> TokenService:
    """Create the token service from settings. The secret is fixed from here on."""
    return TokenService(
        settings.effective_jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        access_ttl=timedelta(minutes=settings.jwt_access_token_expire_minutes),
        refresh_ttl=timedelta(hours=settings.jwt_refresh_token_expire_hours),
    )


def create_app(
    settings: Settings | None = None,
    *,
    repository: ProductRepository | None = None,
    token_service: TokenService | None = None,
    credential_verifier: CredentialVerifier | None = None,
    protected_routes: Iterable[ProtectedRoute] = PROTECTED_ROUTES,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Every collaborator can be injected; anything left out is built from
    ``settings``. Each application owns its own repository and secret.
    """
    settings = settings or get_settings()
    token_service = token_service or build_token_service(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Product catalog with JWT bearer authentication",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    app.state.settings = settings
    app.state.product_repository = repository if repository is not None else ProductRepository()
    app.state.token_service = token_service
    app.state.credential_verifier = credential_verifier or CoinFlipVerifier()

    register_error_handlers(app)

    # Starlette runs middleware in reverse order of registration:
    # Request -> CORS -> Logging -> Auth -> route handler
    app.add_middleware(
        BearerAuthMiddleware,
        token_service=token_service,
        protected_routes=protected_routes,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
    )

    if settings.enable_metrics:
        from prometheus_fastapi_instrumentator import Instrumentator

        Instrumentator(
            excluded_handlers=["/health", "/metrics"],
        ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    app.include_router(api_router)

    return app


# Application instance
app = create_app()


def run() -> None:
    """Run the API with uvicorn using the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "catalog.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
