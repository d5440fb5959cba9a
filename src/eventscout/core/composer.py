"""Page Composer — blends a realized local page with an external top-up.

Composition rules:
  - The external window is whatever the local page left unfilled:
    ``max(0, limit - len(local.items))``. It depends on the local items
    actually returned, so the local query must complete first.
  - A full local page, a disabled or unconfigured provider, or a filter with
    ``include_external=False`` means no external call at all.
  - Local events always come first; sources are concatenated, never
    interleaved or re-sorted.
  - ``total`` is the local exact count plus the provider-reported count;
    ``pages = ceil(total / limit)``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel, Field

from eventscout.models.query import SearchFilter
from eventscout.models.response import EventPage, PaginationEnvelope, SourceResult

logger = logging.getLogger(__name__)

FetchExternal = Callable[[int], Awaitable[SourceResult]]
"""Callback that fetches ``size`` external events for the current filter."""


class ProviderConfig(BaseModel):
    """Process-wide availability of the external provider.

    Built once at startup from settings and never mutated; the composer
    consults it instead of reading configuration at request time.
    """

    enabled: bool = Field(default=True, description="External augmentation allowed by configuration")
    api_key: str = Field(default="", description="Provider credentials (empty = unconfigured)")

    @property
    def available(self) -> bool:
        return self.enabled and bool(self.api_key)


class PageComposer:
    """Computes the external window and merges both sources into one page.

    Args:
        provider: Availability of the external provider.
    """

    def __init__(self, provider: ProviderConfig) -> None:
        self.provider = provider

    @staticmethod
    def external_window(search_filter: SearchFilter, local: SourceResult) -> int:
        """Number of external events needed to fill the requested page."""
        return max(0, search_filter.limit - len(local.items))

    def should_fetch_external(self, search_filter: SearchFilter, window: int) -> bool:
        return window > 0 and search_filter.include_external and self.provider.available

    async def compose(
        self,
        search_filter: SearchFilter,
        local: SourceResult,
        fetch_external: FetchExternal,
    ) -> EventPage:
        """Merge *local* with an external top-up into one ``EventPage``.

        Args:
            search_filter: The normalized filter (supplies page and limit).
            local: The already-realized local window.
            fetch_external: Called at most once, with the external window size.

        Returns:
            The combined page and its pagination envelope.
        """
        window = self.external_window(search_filter, local)

        if self.should_fetch_external(search_filter, window):
            external = await fetch_external(window)
        else:
            external = SourceResult.empty()

        # A provider that ignores ``size`` must not overflow the page.
        external_items = external.items[:window]
        local_items = local.items[: search_filter.limit]

        total = local.total + external.total
        logger.info(
            "Composed page %d: local=%d/%d, external=%d/%d (window=%d)",
            search_filter.page,
            len(local_items),
            local.total,
            len(external_items),
            external.total,
            window,
        )

        return EventPage(
            docs=[*local_items, *external_items],
            pagination=PaginationEnvelope.from_total(total, search_filter.page, search_filter.limit),
        )
