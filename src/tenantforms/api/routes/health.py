"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(request: Request) -> dict[str, str]:
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        return {"status": "starting"}
    return {"status": "ready", "default_tenant": registry.default_tenant}
