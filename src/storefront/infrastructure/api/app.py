"""Storefront FastAPI application.

Usage:
    uvicorn --factory storefront.infrastructure.api.app:build_app --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.application.refresh_catalog import RefreshCatalogHandler
from storefront.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    ExternalServiceError,
    ValidationError,
)
from storefront.infrastructure.api.routes import (
    balance_router,
    cart_router,
    catalog_router,
    order_router,
    webhook_router,
)
from storefront.infrastructure.bootstrap import Container, container
from storefront.infrastructure.logging import configure_logging

logger = structlog.get_logger(__name__)


def create_app(app_container: Container | None = None, refresh_on_startup: bool = True) -> FastAPI:
    c = app_container or container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if refresh_on_startup:
            result = await RefreshCatalogHandler(c.catalog_repo, c.supplier, c.timeout).handle()
            logger.info("Startup catalog load", services=len(result.services), error=result.error)
        yield

    app = FastAPI(
        title="Storefront API",
        description="Social-media engagement storefront with Pix checkout",
        lifespan=lifespan,
    )
    app.state.container = c

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if isinstance(exc, ValidationError):
            status_code, retryable = 422, False
        elif isinstance(exc, EntityNotFoundError):
            status_code, retryable = 404, False
        elif isinstance(exc, ExternalServiceError):
            status_code, retryable = 502, True
        else:
            status_code, retryable = 400, False
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "retryable": retryable},
        )

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok", "services": len(c.catalog_repo.list_all())}

    app.include_router(catalog_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(balance_router)
    app.include_router(webhook_router)
    return app


def build_app() -> FastAPI:
    """Uvicorn factory: configures logging from settings first."""
    settings = container().settings
    configure_logging(settings.log_level, settings.json_logs)
    return create_app()
