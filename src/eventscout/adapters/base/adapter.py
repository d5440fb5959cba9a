"""Base event source — Abstract interface for every place events come from.

Every source must implement this interface to take part in federated search.
The adapter is responsible for:
  1. Executing a ``SearchFilter`` against its backend for one page window
  2. Fetching a single event by identifier
  3. Mapping raw backend records to ``CanonicalEvent``
  4. Reporting health status
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from eventscout.models.event import CanonicalEvent
from eventscout.models.query import SearchFilter
from eventscout.models.response import SourceResult


class AdapterHealth(BaseModel):
    """Health status of an event source."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy, disabled")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class EventSource(ABC):
    """Abstract base class for event source adapters.

    All adapters must implement:
      - query(): Run a filter for one page window and return total + items
      - fetch_event(): Retrieve a single event by ID
      - map_to_canonical(): Normalize one raw record to CanonicalEvent
      - health_check(): Report adapter health status

    Adapters hold their own client (connection pool, HTTP session) created in
    ``initialize`` and are shared across requests; they keep no per-request
    state.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique source name (e.g., 'mongodb', 'ticketmaster')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create clients and verify connectivity. Called once at startup."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Close clients and release resources."""

    @abstractmethod
    async def query(self, search_filter: SearchFilter, page: int, size: int) -> SourceResult:
        """Execute *search_filter* against the source.

        Args:
            search_filter: The normalized filter.
            page: One-indexed page number.
            size: Number of events to return for that page.

        Returns:
            The source's total match count and the events in the window.
        """

    @abstractmethod
    async def fetch_event(self, event_id: str) -> CanonicalEvent:
        """Retrieve a single event by its identifier.

        Raises:
            DocumentNotFoundError: If the event does not exist.
        """

    @abstractmethod
    def map_to_canonical(self, raw: dict[str, Any]) -> CanonicalEvent:
        """Map one raw backend record to the canonical event schema."""

    @abstractmethod
    async def health_check(self) -> AdapterHealth:
        """Check the health of the source backend."""
