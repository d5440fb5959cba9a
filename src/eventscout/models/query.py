"""Search filter models — the canonical, already-normalized form of a query."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 30


class SearchTermKind(StrEnum):
    """How a search term is matched against the local store."""

    IDENTIFIER = "identifier"
    TEXT = "text"


class SearchTerm(BaseModel):
    value: str = Field(min_length=1, description="The raw search value")
    kind: SearchTermKind = Field(description="Exact identifier lookup or title substring match")


class LocationFilter(BaseModel):
    """Per-field location matchers; all present fields must match."""

    city: str | None = Field(default=None, description="Case-insensitive city substring")
    state: str | None = Field(default=None, description="Case-insensitive state substring")
    country: str | None = Field(default=None, description="Case-insensitive country substring")
    address: str | None = Field(default=None, description="Case-insensitive address substring")

    def present(self) -> dict[str, str]:
        """Return only the fields that constrain the query."""
        return {k: v for k, v in self.model_dump().items() if v}


class SearchFilter(BaseModel):
    """Canonical search filter, built by ``eventscout.core.filters.normalize``.

    ``page`` and ``limit`` are always positive; ``has_invalid_dates`` is only
    ever set in lenient date mode, where it makes the local query match
    nothing.
    """

    search: SearchTerm | None = Field(default=None, description="Disambiguated search term")
    location: LocationFilter = Field(default_factory=LocationFilter, description="Location matchers")
    date_from: datetime | None = Field(default=None, description="Inclusive lower date bound")
    date_to: datetime | None = Field(default=None, description="Inclusive upper date bound")
    has_invalid_dates: bool = Field(default=False, description="A date bound failed to parse")
    category: str | None = Field(default=None, description="Exact category match")
    format: str | None = Field(default=None, description="Exact format match")
    language: str | None = Field(default=None, description="Exact language match")
    page: int = Field(default=DEFAULT_PAGE, ge=1, description="One-indexed page number")
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, description="Page size")
    include_external: bool = Field(default=True, description="Allow the external provider to top up the page")
