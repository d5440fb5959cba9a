"""EventScout Engine — Orchestrator for federated event search.

The engine manages the request lifecycle:
  1. Local Query: count + window from the authoritative local store
  2. Composition: decide how many external events are still needed
  3. External Query: top up the page from the provider (optional)
  4. Merge: one page, one pagination envelope

It also owns the adapters' startup/shutdown and single-event lookups that
fall through from the local store to the provider.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from eventscout.adapters.base.adapter import AdapterHealth, EventSource
from eventscout.adapters.base.exceptions import AdapterError, DocumentNotFoundError
from eventscout.adapters.mongodb.adapter import MongoEventSource
from eventscout.adapters.ticketmaster.adapter import TicketmasterEventSource
from eventscout.core.composer import PageComposer, ProviderConfig
from eventscout.core.filters import is_identifier
from eventscout.models.event import CanonicalEvent
from eventscout.models.query import SearchFilter
from eventscout.models.response import EventPage, SourceResult

if TYPE_CHECKING:
    from eventscout.config.settings import Settings

logger = logging.getLogger(__name__)


class EventSearchEngine:
    """Core orchestrator for federated event search.

    Pipeline:
      SearchFilter → [Local source] → exact total + window
                   → [Composer] → external window size
                   → [External source] → provider total + top-up (optional)
                   → [Composer] → EventPage

    Attributes:
        settings: Application configuration.
        local_source: The authoritative event store.
        external_source: The external discovery provider.
        composer: Page composition policy, bound to the provider config.
    """

    def __init__(
        self,
        settings: Settings,
        local_source: EventSource | None = None,
        external_source: EventSource | None = None,
    ) -> None:
        self.settings = settings
        self.local_source = local_source or MongoEventSource(
            uri=settings.mongodb.uri,
            database=settings.mongodb.database,
            events_collection=settings.mongodb.events_collection,
            users_collection=settings.mongodb.users_collection,
            server_selection_timeout_ms=settings.mongodb.server_selection_timeout_ms,
        )
        tm = settings.ticketmaster
        self.external_source = external_source or TicketmasterEventSource(
            api_key=tm.api_key,
            base_url=tm.base_url,
            country_code=tm.country_code,
            sort=tm.sort,
            timeout=tm.timeout,
        )
        self.composer = PageComposer(ProviderConfig(enabled=tm.enabled, api_key=tm.api_key))

    @property
    def provider(self) -> ProviderConfig:
        return self.composer.provider

    async def initialize(self) -> None:
        """Initialize both sources.

        The local source must come up; a provider that fails to initialize is
        logged and treated as unconfigured for the lifetime of the process.
        """
        await self.local_source.initialize()

        if not self.provider.available:
            logger.info("External provider disabled or unconfigured; serving local events only")
        else:
            try:
                await self.external_source.initialize()
            except AdapterError:
                logger.warning(
                    "Failed to initialise external source '%s'; serving local events only",
                    self.external_source.name,
                    exc_info=True,
                )
                self.composer = PageComposer(ProviderConfig(enabled=False, api_key=self.provider.api_key))

        logger.info("EventScout engine initialized")

    async def shutdown(self) -> None:
        """Gracefully shut down both sources."""
        for source in (self.local_source, self.external_source):
            try:
                await source.shutdown()
            except Exception:
                logger.warning("Error shutting down source: %s", source.name, exc_info=True)
        logger.info("EventScout engine shut down")

    # ──────────────────────────────────────────────────────────────────────
    # Search
    # ──────────────────────────────────────────────────────────────────────

    async def search(self, search_filter: SearchFilter) -> EventPage:
        """Run one federated search.

        Args:
            search_filter: The normalized filter.

        Returns:
            Local events followed by external ones, with a combined envelope.

        Raises:
            AdapterError: If the local store fails (no degraded mode).
        """
        start_time = time.monotonic()

        local = await self.local_source.query(search_filter, search_filter.page, search_filter.limit)

        async def fetch_external(size: int) -> SourceResult:
            return await self.external_source.query(search_filter, search_filter.page, size)

        page = await self.composer.compose(search_filter, local, fetch_external)

        logger.info(
            "Search complete: %d docs, total=%d, pages=%d in %d ms",
            len(page.docs),
            page.pagination.total,
            page.pagination.pages,
            int((time.monotonic() - start_time) * 1000),
        )
        return page

    # ──────────────────────────────────────────────────────────────────────
    # Single-event lookup
    # ──────────────────────────────────────────────────────────────────────

    async def get_event(self, event_id: str) -> CanonicalEvent | None:
        """Look an event up locally, then at the provider.

        Identifier-shaped ids are tried against the local store first; a miss,
        or an id in the provider's format, falls through to the provider when
        it is available. Provider errors count as "not found".

        Raises:
            AdapterError: If the local store fails.
        """
        if is_identifier(event_id):
            try:
                return await self.local_source.fetch_event(event_id)
            except DocumentNotFoundError:
                logger.debug("Event %s not in local store", event_id)

        if not self.provider.available:
            return None

        try:
            return await self.external_source.fetch_event(event_id)
        except AdapterError as e:
            logger.info("External lookup for %s failed: %s", event_id, e)
            return None

    # ──────────────────────────────────────────────────────────────────────
    # Health
    # ──────────────────────────────────────────────────────────────────────

    async def health(self) -> dict[str, AdapterHealth]:
        """Health of every source; the provider reports ``disabled`` when off."""
        results: dict[str, AdapterHealth] = {}
        for source in (self.local_source, self.external_source):
            if source is self.external_source and not self.provider.available:
                results[source.name] = AdapterHealth(status="disabled", message="External provider not configured")
                continue
            try:
                results[source.name] = await source.health_check()
            except Exception as e:
                results[source.name] = AdapterHealth(status="unhealthy", message=str(e))
        return results
