"""Health check endpoints — Service and per-source health monitoring."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from eventscout import __version__
from eventscout.adapters.base.adapter import AdapterHealth
from eventscout.api.deps import get_engine
from eventscout.core.engine import EventSearchEngine

router = APIRouter()


# ── Response models ──────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="EventScout server version")
    service: str = Field(description="Service name ('eventscout')")
    external_provider: bool = Field(description="Whether the external provider contributes to searches")


class SourceHealthResponse(BaseModel):
    """Per-source health check response."""

    sources: dict[str, AdapterHealth] = Field(description="Map of source name to its health status")


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service Health Check",
)
async def health_check(
    engine: EventSearchEngine = Depends(get_engine),
) -> HealthResponse:
    """Basic liveness check with provider availability."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="eventscout",
        external_provider=engine.provider.available,
    )


@router.get(
    "/health/sources",
    response_model=SourceHealthResponse,
    summary="Source Health Check",
    description="Ping the local store and the external provider and report per-source status.",
)
async def source_health(
    engine: EventSearchEngine = Depends(get_engine),
) -> SourceHealthResponse:
    """Check health of both event sources."""
    return SourceHealthResponse(sources=await engine.health())
