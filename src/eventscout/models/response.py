"""Result and response models for federated event search."""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

from eventscout.models.event import CanonicalEvent


class SourceResult(BaseModel):
    """One window of results from a single event source.

    ``total`` is whatever the source reports for the whole result set: an
    exact count for the local store, a provider estimate for the external one.
    """

    total: int = Field(default=0, ge=0, description="Total matches reported by the source")
    items: list[CanonicalEvent] = Field(default_factory=list, description="Events in the requested window")

    @classmethod
    def empty(cls) -> SourceResult:
        return cls(total=0, items=[])


class PaginationEnvelope(BaseModel):
    """Combined pagination metadata across both sources."""

    total: int = Field(ge=0, description="Local count plus provider-reported count")
    pages: int = Field(ge=0, description="ceil(total / limit)")
    page: int = Field(ge=1, description="Requested page (one-indexed)")
    limit: int = Field(ge=1, description="Requested page size")

    @classmethod
    def from_total(cls, total: int, page: int, limit: int) -> PaginationEnvelope:
        return cls(total=total, pages=math.ceil(total / limit), page=page, limit=limit)


class EventPage(BaseModel):
    """Response body of ``GET /v1/events``."""

    docs: list[CanonicalEvent] = Field(default_factory=list, description="Local events first, then external ones")
    pagination: PaginationEnvelope = Field(description="Combined pagination envelope")


class EventResponse(BaseModel):
    """Response body of ``GET /v1/events/{event_id}``."""

    doc: CanonicalEvent = Field(description="The requested event")
