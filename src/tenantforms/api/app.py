"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from tenantforms.api.routes import classifications, health, tenants
from tenantforms.core.config import AppSettings
from tenantforms.core.logging import configure_logging
from tenantforms.resolver.registry import build_default_registry


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build settings and the tenant registry once for the process."""
    settings = AppSettings()
    configure_logging(settings)
    app.state.settings = settings
    app.state.registry = build_default_registry(settings)
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="TenantForms Configuration Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(tenants.router, prefix="/tenants")
    app.include_router(classifications.router, prefix="/classifications")
    return app
