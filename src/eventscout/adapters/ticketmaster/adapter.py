"""Ticketmaster adapter — external events from the Discovery API v2.

Talks to the provider's REST API with ``httpx``. The provider is a best-effort
source: a network error, timeout, non-2xx response or malformed payload
yields an empty result instead of an exception, so a slow or broken provider
shrinks the page but never fails the search. Each call is a single attempt
bounded by the configured timeout.

Usage::

    source = TicketmasterEventSource(api_key="...", country_code="US")
    await source.initialize()
    result = await source.query(search_filter, page=1, size=25)

API Reference: https://developer.ticketmaster.com/products-and-docs/apis/discovery-api/v2/
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

import httpx

from eventscout.adapters.base.adapter import AdapterHealth, EventSource
from eventscout.adapters.base.exceptions import (
    ConfigurationError,
    ConnectionError,
    DocumentNotFoundError,
    QueryError,
)
from eventscout.core.taxonomy import to_external_taxonomy
from eventscout.models.event import (
    CanonicalEvent,
    Contact,
    EventCategory,
    EventFormat,
    EventLanguage,
    Location,
)
from eventscout.models.query import SearchFilter
from eventscout.models.response import SourceResult

logger = logging.getLogger(__name__)

DEFAULT_ORGANIZER = "Ticketmaster"


def _first(items: Any) -> dict[str, Any]:
    """First element of a provider list, or an empty dict."""
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _name(obj: Any) -> str:
    if isinstance(obj, dict):
        return obj.get("name") or ""
    return ""


class MalformedPayloadError(QueryError):
    """Raised when the provider answers with something that is not an event listing."""


class TicketmasterEventSource(EventSource):
    """Event source for the Ticketmaster Discovery API.

    Args:
        api_key: Ticketmaster consumer key.
        base_url: Discovery API base URL.
        country_code: Region constant sent with every search.
        sort: Provider sort order (ascending date by default).
        timeout: HTTP request timeout in seconds.
        **kwargs: Extra keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "https://app.ticketmaster.com/discovery/v2",
        country_code: str = "US",
        sort: str = "date,asc",
        timeout: float = 10.0,
        **kwargs: Any,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._country_code = country_code
        self._sort = sort
        self._timeout = timeout
        self._client_kwargs = kwargs
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "ticketmaster"

    async def initialize(self) -> None:
        """Create the ``httpx.AsyncClient``.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if not self._api_key:
            raise ConfigurationError("Ticketmaster API key is not configured.")

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers={"Accept": "application/json"},
            **self._client_kwargs,
        )
        logger.info(
            "Ticketmaster source initialized (base_url=%s, country=%s)",
            self._base_url,
            self._country_code,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Query ────────────────────────────────────────────────────────────

    def build_params(self, search_filter: SearchFilter, page: int, size: int) -> dict[str, Any]:
        """Build the provider query string for one window.

        The provider's pages are zero-indexed, ours are one-indexed.
        """
        params: dict[str, Any] = {
            "apikey": self._api_key,
            "countryCode": self._country_code,
            "sort": self._sort,
            "page": page - 1,
            "size": size,
        }
        if search_filter.search is not None:
            params["keyword"] = search_filter.search.value
        if search_filter.location.city:
            params["city"] = search_filter.location.city
        classification = to_external_taxonomy(search_filter.category)
        if classification:
            params["classificationName"] = classification
        return params

    async def query(self, search_filter: SearchFilter, page: int, size: int) -> SourceResult:
        """Fetch one window of provider events.

        Never raises for provider-side failures; those degrade to
        ``SourceResult.empty()``.
        """
        if self._client is None:
            logger.warning("Ticketmaster source not initialized; skipping external results")
            return SourceResult.empty()

        params = self.build_params(search_filter, page, size)
        try:
            start = time.monotonic()
            resp = await self._client.get("/events.json", params=params)
            resp.raise_for_status()
            result = self._parse_listing(resp.json())
            took_ms = int((time.monotonic() - start) * 1000)
        except (httpx.HTTPError, ValueError, TypeError, AttributeError, QueryError) as e:
            # ValueError covers undecodable JSON and pydantic validation errors,
            # TypeError/AttributeError records whose nested parts have the wrong shape.
            logger.warning("Ticketmaster search failed, continuing without external results: %s", e)
            return SourceResult.empty()

        logger.debug(
            "Ticketmaster query: total=%d, returned=%d, page=%d, size=%d, took=%dms",
            result.total,
            len(result.items),
            page - 1,
            size,
            took_ms,
        )
        return result

    def _parse_listing(self, data: Any) -> SourceResult:
        if not isinstance(data, dict):
            raise MalformedPayloadError(f"Expected a JSON object, got {type(data).__name__}")

        page_info = data.get("page")
        total = 0
        if isinstance(page_info, dict):
            total = int(page_info.get("totalElements") or 0)

        embedded = data.get("_embedded") or {}
        events = embedded.get("events", []) if isinstance(embedded, dict) else None
        if not isinstance(events, list):
            raise MalformedPayloadError("'_embedded.events' is not a list")

        items = []
        for ev in events:
            if not isinstance(ev, dict) or "id" not in ev:
                raise MalformedPayloadError("Event record without an identifier")
            items.append(self.map_to_canonical(ev))
        return SourceResult(total=max(total, 0), items=items)

    async def fetch_event(self, event_id: str) -> CanonicalEvent:
        """Retrieve a single provider event by its identifier.

        Raises:
            ConnectionError: If the source was never initialized.
            DocumentNotFoundError: If the provider does not know the event.
            QueryError: On any other provider failure.
        """
        if self._client is None:
            raise ConnectionError("Ticketmaster source not initialized.")

        try:
            resp = await self._client.get(f"/events/{event_id}.json", params={"apikey": self._api_key})
            if resp.status_code == 404:
                raise DocumentNotFoundError(f"Event '{event_id}' not found.")
            resp.raise_for_status()
            data = resp.json()
        except DocumentNotFoundError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            raise QueryError(f"Failed to fetch event from Ticketmaster: {e}") from e

        if not isinstance(data, dict) or data.get("errors") or "id" not in data:
            raise DocumentNotFoundError(f"Event '{event_id}' not found.")
        try:
            return self.map_to_canonical(data)
        except (ValueError, TypeError, AttributeError) as e:
            raise QueryError(f"Malformed Ticketmaster event '{event_id}': {e}") from e

    # ── Schema mapping ───────────────────────────────────────────────────

    def map_to_canonical(self, raw: dict[str, Any]) -> CanonicalEvent:
        """Map a Discovery API event record to ``CanonicalEvent``.

        Absent venue parts become empty strings, absent coordinates ``(0, 0)``
        and an unclassified event falls into ``Other``.
        """
        venues = (raw.get("_embedded") or {}).get("venues") or []
        venue = _first(venues)
        lat, lng = self._coordinates(venues)

        start = (raw.get("dates") or {}).get("start") or {}
        segment = self._segment(raw.get("classifications"))

        return CanonicalEvent(
            id=str(raw["id"]),
            title=raw.get("name") or "",
            description=raw.get("info") or "",
            location=Location(
                address=(venue.get("address") or {}).get("line1") or "",
                city=_name(venue.get("city")),
                state=_name(venue.get("state")),
                country=_name(venue.get("country")),
                lat=lat,
                lng=lng,
            ),
            date=start.get("localDate") or "",
            time=start.get("localTime") or "00:00",
            category=segment or EventCategory.OTHER,
            format=EventFormat.OFFLINE,
            language=EventLanguage.ENGLISH,
            image=_first(raw.get("images")).get("url"),
            contact=Contact(email="", phone=0),
            organizer=_name(raw.get("promoter")) or DEFAULT_ORGANIZER,
            external=True,
            url=raw.get("url"),
        )

    @staticmethod
    def _coordinates(venues: list[Any]) -> tuple[float, float]:
        """First venue coordinate pair that parses, else ``(0, 0)``."""
        for venue in venues:
            if not isinstance(venue, dict):
                continue
            loc = venue.get("location") or {}
            try:
                return float(loc["latitude"]), float(loc["longitude"])
            except (KeyError, TypeError, ValueError):
                continue
        return 0.0, 0.0

    @staticmethod
    def _segment(classifications: Any) -> str:
        """Name of the first classification segment, or ``""``."""
        if not isinstance(classifications, list):
            return ""
        for classification in classifications:
            if isinstance(classification, dict):
                name = _name(classification.get("segment"))
                if name:
                    return name
        return ""

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Issue a one-event search to check provider reachability."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = await self._client.get(
                "/events.json",
                params={"apikey": self._api_key, "size": 1, "countryCode": self._country_code},
            )
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                return AdapterHealth(
                    status="healthy",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"Discovery API OK ({self._country_code})",
                )
            return AdapterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Ticketmaster returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))
