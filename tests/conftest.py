"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from eventscout.adapters.base.adapter import AdapterHealth, EventSource
from eventscout.config.settings import Settings
from eventscout.models.event import CanonicalEvent, Location
from eventscout.models.query import SearchFilter
from eventscout.models.response import SourceResult

EVENT_ID = "65f1c2a9b4d3e8f7a6b5c4d3"
ORGANIZER_ID = "65f1c2a9b4d3e8f7a6b5c4ff"


@pytest.fixture
def settings() -> Settings:
    """Settings with the external provider configured."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        ticketmaster={"api_key": "tm-test-key"},
    )


@pytest.fixture
def local_only_settings() -> Settings:
    """Settings without provider credentials."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        ticketmaster={"api_key": ""},
    )


# ── Canonical event builders ─────────────────────────────────────────────────


def make_local_event(n: int) -> CanonicalEvent:
    return CanonicalEvent(
        id=f"{n:024x}",
        title=f"Local Event {n}",
        description="A locally organized event.",
        location=Location(address="1 Main St", city="Austin", state="Texas", country="USA", lat=30.2, lng=-97.7),
        date="2030-06-01T00:00:00",
        time="18:00",
        category="Music",
        format="Offline",
        language="English",
        external=False,
    )


def make_external_event(n: int) -> CanonicalEvent:
    return CanonicalEvent(
        id=f"vvG1{n}",
        title=f"External Event {n}",
        date="2030-06-02",
        time="20:00",
        category="Music",
        organizer="Live Nation",
        external=True,
        url=f"https://www.ticketmaster.com/event/vvG1{n}",
    )


def _local_result(count: int, total: int | None = None) -> SourceResult:
    return SourceResult(
        total=count if total is None else total,
        items=[make_local_event(i) for i in range(count)],
    )


def _external_result(count: int, total: int | None = None) -> SourceResult:
    return SourceResult(
        total=count if total is None else total,
        items=[make_external_event(i) for i in range(count)],
    )


class StubSource(EventSource):
    """In-memory ``EventSource`` whose ``query`` is an ``AsyncMock``."""

    def __init__(self, name: str, result: SourceResult | None = None) -> None:
        self._name = name
        self.query = AsyncMock(return_value=result or SourceResult.empty())  # type: ignore[method-assign]
        self.fetch_event = AsyncMock()  # type: ignore[method-assign]
        self.initialize = AsyncMock()  # type: ignore[method-assign]
        self.shutdown = AsyncMock()  # type: ignore[method-assign]
        self.health_check = AsyncMock(return_value=AdapterHealth(status="healthy"))  # type: ignore[method-assign]

    @property
    def name(self) -> str:
        return self._name

    async def initialize(self) -> None: ...

    async def shutdown(self) -> None: ...

    async def query(self, search_filter: SearchFilter, page: int, size: int) -> SourceResult: ...

    async def fetch_event(self, event_id: str) -> CanonicalEvent: ...

    def map_to_canonical(self, raw: dict[str, Any]) -> CanonicalEvent:
        return CanonicalEvent(**raw)

    async def health_check(self) -> AdapterHealth: ...


@pytest.fixture
def local_result() -> Callable[..., SourceResult]:
    """Factory: ``local_result(count, total=None)``."""
    return _local_result


@pytest.fixture
def external_result() -> Callable[..., SourceResult]:
    """Factory: ``external_result(count, total=None)``."""
    return _external_result


@pytest.fixture
def stub_source() -> type[StubSource]:
    return StubSource


# ── Raw backend records ──────────────────────────────────────────────────────


@pytest.fixture
def local_doc() -> dict[str, Any]:
    """Stored event document as returned by pymongo (organizer already expanded)."""
    return {
        "_id": ObjectId(EVENT_ID),
        "title": "Birthday Party",
        "description": "Cake, music and friends.",
        "location": {
            "address": "12 Oak Ave",
            "city": "Lawrence",
            "state": "Kansas",
            "country": "USA",
            "lat": 38.97,
            "lng": -95.23,
        },
        "date": datetime(2030, 5, 17, 0, 0),
        "time": "19:30",
        "duration": 120,
        "category": "Community",
        "format": "Offline",
        "language": "English",
        "capacity": 40,
        "registrationDeadline": datetime(2030, 5, 10, 0, 0),
        "image": "https://cdn.example.com/party.png",
        "agenda": [{"_id": ObjectId(), "time": "19:30", "activity": "Welcome"}],
        "email": "host@example.com",
        "phone": 5551234567,
        "organizer": {"_id": ObjectId(ORGANIZER_ID), "name": "Jamie"},
    }


@pytest.fixture
def tm_event() -> dict[str, Any]:
    """A Discovery API event record."""
    return {
        "name": "Jazz Night",
        "type": "event",
        "id": "vvG1fZ9pKzJ7aB",
        "url": "https://www.ticketmaster.com/jazz-night/event/vvG1fZ9pKzJ7aB",
        "info": "An evening of live jazz.",
        "images": [
            {"ratio": "16_9", "url": "https://s1.ticketm.net/img/jazz.jpg", "width": 640},
            {"ratio": "3_2", "url": "https://s1.ticketm.net/img/jazz-small.jpg", "width": 305},
        ],
        "dates": {"start": {"localDate": "2030-07-04", "localTime": "20:00:00"}},
        "classifications": [
            {"primary": True, "segment": {"id": "KZFzniwnSyZfZ7v7nJ", "name": "Music"}, "genre": {"name": "Jazz"}},
        ],
        "promoter": {"id": "494", "name": "Live Nation"},
        "_embedded": {
            "venues": [
                {
                    "name": "Blue Room",
                    "city": {"name": "Kansas City"},
                    "state": {"name": "Missouri", "stateCode": "MO"},
                    "country": {"name": "United States Of America", "countryCode": "US"},
                    "address": {"line1": "1600 E 18th St"},
                    "location": {"longitude": "-94.5600", "latitude": "39.0910"},
                },
            ],
        },
    }


@pytest.fixture
def tm_listing(tm_event: dict[str, Any]) -> dict[str, Any]:
    """A Discovery API search response with one event."""
    return {
        "_embedded": {"events": [tm_event]},
        "page": {"size": 25, "totalElements": 270, "totalPages": 11, "number": 0},
    }
