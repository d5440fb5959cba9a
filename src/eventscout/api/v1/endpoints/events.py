"""Event endpoints — federated search and single-event lookup.

``GET /events`` accepts raw string parameters on purpose: malformed
``page``/``limit`` values are defaulted by the filter normalizer rather than
rejected by request validation.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from eventscout.adapters.base.exceptions import AdapterError
from eventscout.api.deps import get_engine
from eventscout.core.engine import EventSearchEngine
from eventscout.core.filters import InvalidFilterError, normalize
from eventscout.models.response import EventPage, EventResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/events",
    response_model=EventPage,
    summary="Search Events",
    description=(
        "Search local events and top the page up with events from the external "
        "provider.\n\n"
        "Local events come first. The provider is only queried for the part of "
        "the page the local store could not fill, and its failures never fail "
        "the request. `pagination.total` is the local count plus the "
        "provider-reported count."
    ),
    responses={
        400: {"description": "Unparseable `dateFrom` / `dateTo`"},
        500: {"description": "Local event store unavailable"},
    },
)
async def search_events(
    search: str | None = Query(default=None, description="Event identifier or title substring"),
    city: str | None = Query(default=None),
    state: str | None = Query(default=None),
    country: str | None = Query(default=None),
    address: str | None = Query(default=None),
    date_from: str | None = Query(default=None, alias="dateFrom", description="Inclusive lower bound (any parseable date)"),
    date_to: str | None = Query(default=None, alias="dateTo", description="Inclusive upper bound (any parseable date)"),
    category: str | None = Query(default=None),
    format: str | None = Query(default=None),
    language: str | None = Query(default=None),
    page: str | None = Query(default=None, description="One-indexed page (default 1)"),
    limit: str | None = Query(default=None, description="Page size (default 30)"),
    ticket_master: str | None = Query(
        default=None,
        alias="ticketMaster",
        description='"false" disables external results',
    ),
    engine: EventSearchEngine = Depends(get_engine),
) -> EventPage:
    """Execute a federated event search."""
    raw_params = {
        "search": search,
        "city": city,
        "state": state,
        "country": country,
        "address": address,
        "dateFrom": date_from,
        "dateTo": date_to,
        "category": category,
        "format": format,
        "language": language,
        "page": page,
        "limit": limit,
        "ticketMaster": ticket_master,
    }

    try:
        search_filter = normalize(
            raw_params,
            reject_invalid_dates=engine.settings.search.reject_invalid_dates,
        )
    except InvalidFilterError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        return await engine.search(search_filter)
    except AdapterError as e:
        logger.error("Event search failed: %s", e, exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Event search failed: {e!s}",
        ) from e


@router.get(
    "/events/{event_id}",
    response_model=EventResponse,
    summary="Get Event",
    description=(
        "Fetch one event. Local identifiers are looked up in the local store; "
        "anything else (or a local miss) is looked up at the external provider."
    ),
    responses={
        404: {"description": "Event not found in either source"},
        500: {"description": "Local event store unavailable"},
    },
)
async def get_event(
    event_id: str,
    engine: EventSearchEngine = Depends(get_engine),
) -> EventResponse:
    """Fetch a single event by identifier."""
    try:
        event = await engine.get_event(event_id)
    except AdapterError as e:
        logger.error("Event lookup failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Event lookup failed: {e!s}") from e

    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return EventResponse(doc=event)
