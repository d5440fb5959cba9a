"""MongoDB adapter — the application's own, authoritative event store.

Uses pymongo's native asyncio client. Counts are exact and windows are
classic ``skip``/``limit``. Any datastore error is fatal for the request:
there is no fallback for the authoritative source.

Usage::

    source = MongoEventSource(uri="mongodb://localhost:27017", database="events")
    await source.initialize()
    result = await source.query(search_filter, page=1, size=30)
"""

from __future__ import annotations

import logging
import re
import time
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from pydantic import ValidationError
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from eventscout.adapters.base.adapter import AdapterHealth, EventSource
from eventscout.adapters.base.exceptions import (
    ConnectionError,
    DocumentNotFoundError,
    QueryError,
)
from eventscout.core.filters import is_identifier
from eventscout.models.event import (
    AgendaItem,
    CanonicalEvent,
    Contact,
    EventCategory,
    EventFormat,
    EventLanguage,
    Location,
    OrganizerSummary,
)
from eventscout.models.query import SearchFilter, SearchTermKind
from eventscout.models.response import SourceResult

logger = logging.getLogger(__name__)

# A condition no document satisfies; used for bounds that failed to parse.
_MATCH_NOTHING: dict[str, Any] = {"$in": []}


def _contains(value: str) -> dict[str, str]:
    """Case-insensitive substring matcher (the value is matched literally)."""
    return {"$regex": re.escape(value), "$options": "i"}


def _iso(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value) if value else ""


def build_query(search_filter: SearchFilter) -> dict[str, Any]:
    """Translate a ``SearchFilter`` into a conjunctive MongoDB filter document."""
    query: dict[str, Any] = {}

    term = search_filter.search
    if term is not None:
        if term.kind is SearchTermKind.IDENTIFIER:
            query["_id"] = ObjectId(term.value)
        else:
            query["title"] = _contains(term.value)

    for field, value in search_filter.location.present().items():
        query[f"location.{field}"] = _contains(value)

    if search_filter.has_invalid_dates:
        query["date"] = _MATCH_NOTHING
    elif search_filter.date_from or search_filter.date_to:
        bounds: dict[str, datetime] = {}
        if search_filter.date_from:
            bounds["$gte"] = search_filter.date_from
        if search_filter.date_to:
            bounds["$lte"] = search_filter.date_to
        query["date"] = bounds

    if search_filter.category:
        query["category"] = search_filter.category
    if search_filter.format:
        query["format"] = search_filter.format
    if search_filter.language:
        query["language"] = search_filter.language

    return query


class MongoEventSource(EventSource):
    """Event source backed by a MongoDB collection.

    Args:
        uri: MongoDB connection URI.
        database: Database name.
        events_collection: Collection holding event documents.
        users_collection: Collection used to expand organizer names.
        server_selection_timeout_ms: Fail fast when no server is reachable.
        client: Pre-built ``AsyncMongoClient`` (tests, shared pools).
    """

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        database: str = "events",
        events_collection: str = "events",
        users_collection: str = "users",
        server_selection_timeout_ms: int = 5000,
        client: AsyncMongoClient | None = None,
    ) -> None:
        self._uri = uri
        self._database = database
        self._events_name = events_collection
        self._users_name = users_collection
        self._timeout_ms = server_selection_timeout_ms
        self._client: Any = client
        self._events: Any = None
        self._users: Any = None

    @property
    def name(self) -> str:
        return "mongodb"

    async def initialize(self) -> None:
        """Create the client (unless injected) and bind the collections."""
        if self._client is None:
            self._client = AsyncMongoClient(self._uri, serverSelectionTimeoutMS=self._timeout_ms)
        db = self._client[self._database]
        self._events = db[self._events_name]
        self._users = db[self._users_name]
        logger.info(
            "MongoDB source initialized (database=%s, collection=%s)",
            self._database,
            self._events_name,
        )

    async def shutdown(self) -> None:
        if self._client is not None:
            await self._client.close()
        self._client = None
        self._events = None
        self._users = None

    # ── Query ────────────────────────────────────────────────────────────

    async def query(self, search_filter: SearchFilter, page: int, size: int) -> SourceResult:
        """Count all matches, then read the ``(page - 1) * size`` window.

        Windows past the last match are answered from the count alone, so
        arbitrarily large ``page``/``size`` values never reach the driver.

        Raises:
            ConnectionError: If the source was never initialized.
            QueryError: On any datastore failure or an unmappable document.
        """
        if self._events is None:
            raise ConnectionError("MongoDB source not initialized.")

        query = build_query(search_filter)
        skip = (page - 1) * size

        try:
            start = time.monotonic()
            total = await self._events.count_documents(query)
            docs: list[dict[str, Any]] = []
            if skip < total:
                # BSON ints are 8 bytes; the remaining count always fits.
                window = min(size, total - skip)
                docs = await self._events.find(query).skip(skip).limit(window).to_list(length=None)
                await self._expand_organizers(docs)
            items = [self.map_to_canonical(doc) for doc in docs]
            took_ms = int((time.monotonic() - start) * 1000)
        except PyMongoError as e:
            logger.error("Local event query failed: %s", e, exc_info=True)
            raise QueryError(f"Local event query failed: {e}") from e
        except ValidationError as e:
            logger.error("Stored event does not match the event schema: %s", e, exc_info=True)
            raise QueryError(f"Malformed stored event: {e}") from e

        logger.debug("Local query: total=%d, returned=%d, skip=%d, took=%dms", total, len(items), skip, took_ms)
        return SourceResult(total=total, items=items)

    async def fetch_event(self, event_id: str) -> CanonicalEvent:
        if self._events is None:
            raise ConnectionError("MongoDB source not initialized.")
        if not is_identifier(event_id):
            raise DocumentNotFoundError(f"Event '{event_id}' not found.")

        try:
            doc = await self._events.find_one({"_id": ObjectId(event_id)})
            if doc is not None:
                await self._expand_organizers([doc])
        except PyMongoError as e:
            raise QueryError(f"Failed to fetch event '{event_id}': {e}") from e

        if doc is None:
            raise DocumentNotFoundError(f"Event '{event_id}' not found.")
        try:
            return self.map_to_canonical(doc)
        except ValidationError as e:
            raise QueryError(f"Malformed stored event '{event_id}': {e}") from e

    async def _expand_organizers(self, docs: list[dict[str, Any]]) -> None:
        """Replace organizer references with ``{_id, name}`` user projections."""
        ids = {doc["organizer"] for doc in docs if isinstance(doc.get("organizer"), ObjectId)}
        if not ids:
            return
        users = await self._users.find({"_id": {"$in": list(ids)}}, {"name": 1}).to_list(length=None)
        by_id = {user["_id"]: user for user in users}
        for doc in docs:
            ref = doc.get("organizer")
            if isinstance(ref, ObjectId):
                doc["organizer"] = by_id.get(ref, {"_id": ref, "name": ""})

    # ── Schema mapping ───────────────────────────────────────────────────

    def map_to_canonical(self, raw: dict[str, Any]) -> CanonicalEvent:
        """Map a stored event document to ``CanonicalEvent``."""
        location = raw.get("location") or {}
        contact = raw.get("contact") or {"email": raw.get("email"), "phone": raw.get("phone")}

        organizer: OrganizerSummary | None = None
        ref = raw.get("organizer")
        if isinstance(ref, dict):
            organizer = OrganizerSummary(id=str(ref.get("_id", "")), name=ref.get("name") or "")
        elif ref is not None:
            organizer = OrganizerSummary(id=str(ref))

        deadline = raw.get("registrationDeadline")

        return CanonicalEvent(
            id=str(raw["_id"]),
            title=raw.get("title", ""),
            description=raw.get("description") or "",
            location=Location(
                address=location.get("address") or "",
                city=location.get("city") or "",
                state=location.get("state") or "",
                country=location.get("country") or "",
                lat=location.get("lat") or 0.0,
                lng=location.get("lng") or 0.0,
            ),
            date=_iso(raw.get("date")),
            time=raw.get("time") or "00:00",
            duration=raw.get("duration"),
            capacity=raw.get("capacity"),
            registration_deadline=_iso(deadline) if deadline else None,
            category=raw.get("category") or EventCategory.OTHER,
            format=raw.get("format") or EventFormat.OFFLINE,
            language=raw.get("language") or EventLanguage.ENGLISH,
            image=raw.get("image"),
            agenda=[AgendaItem(**item) for item in raw.get("agenda") or []],
            contact=Contact(email=contact.get("email") or "", phone=contact.get("phone") or 0),
            organizer=organizer,
            external=False,
        )

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        if self._client is None:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            await self._client.admin.command("ping")
            latency_ms = int((time.monotonic() - start) * 1000)
            return AdapterHealth(
                status="healthy",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Database: {self._database}, collection: {self._events_name}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))
