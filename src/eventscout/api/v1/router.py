"""API v1 Router — Event search, event lookup and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from eventscout.api.v1.endpoints.events import router as events_router
from eventscout.api.v1.endpoints.health import router as health_router

router = APIRouter(tags=["v1"])
router.include_router(events_router)
router.include_router(health_router)
