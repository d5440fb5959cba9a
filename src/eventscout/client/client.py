"""EventScout Python SDK — Async and sync clients for the EventScout REST API.

Usage::

    # Async
    async with AsyncEventScoutClient("http://localhost:8080") as client:
        page = await client.search_events(search="jazz", city="Austin")

    # Sync (wraps async client internally)
    client = EventScoutClient("http://localhost:8080")
    page = client.search_events(search="jazz", limit=10)
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar, cast

import httpx

_T = TypeVar("_T")

# ═══════════════════════════════════════════════════════════════════════════════
# Response types (plain dicts, decoupled from the server models)
# ═══════════════════════════════════════════════════════════════════════════════

EventPageResult = dict[str, Any]
"""Search response dict with ``docs`` and ``pagination`` keys."""

EventResult = dict[str, Any]
"""A single canonical event dict."""

# Python keyword -> query parameter name expected by the server.
_PARAM_NAMES = {
    "date_from": "dateFrom",
    "date_to": "dateTo",
}


def _query_params(filters: dict[str, Any], include_external: bool) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in filters.items():
        if value is None:
            continue
        params[_PARAM_NAMES.get(key, key)] = str(value)
    if not include_external:
        params["ticketMaster"] = "false"
    return params


# ═══════════════════════════════════════════════════════════════════════════════
# Async client
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncEventScoutClient:
    """Async Python client for the EventScout API.

    Args:
        base_url: EventScout server URL, e.g. ``"http://localhost:8080"``.
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            **httpx_kwargs,
        )

    async def __aenter__(self) -> AsyncEventScoutClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ── Health ──

    async def health(self) -> dict[str, Any]:
        resp = await self._client.get("/v1/health")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def source_health(self) -> dict[str, Any]:
        resp = await self._client.get("/v1/health/sources")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    # ── Events ──

    async def search_events(
        self,
        search: str | None = None,
        *,
        page: int = 1,
        limit: int = 30,
        include_external: bool = True,
        **filters: Any,
    ) -> EventPageResult:
        """Run a federated event search.

        Args:
            search: Event identifier or title substring.
            page: One-indexed page number.
            limit: Page size.
            include_external: Set False to get local events only.
            **filters: ``city``, ``state``, ``country``, ``address``,
                ``date_from``, ``date_to``, ``category``, ``format``,
                ``language``.

        Returns:
            Response dict with ``docs`` and ``pagination``.
        """
        params = _query_params({"search": search, "page": page, "limit": limit, **filters}, include_external)
        resp = await self._client.get("/v1/events", params=params)
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def get_event(self, event_id: str) -> EventResult | None:
        """Fetch one event, or ``None`` if neither source knows it."""
        resp = await self._client.get(f"/v1/events/{event_id}")
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json()["doc"])


# ═══════════════════════════════════════════════════════════════════════════════
# Sync client (wraps AsyncEventScoutClient)
# ═══════════════════════════════════════════════════════════════════════════════


class EventScoutClient:
    """Synchronous Python client for the EventScout API.

    Wraps :class:`AsyncEventScoutClient` using ``asyncio.run``; each call
    opens and closes its own connection pool.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._httpx_kwargs = httpx_kwargs

    def _run(self, coro: Coroutine[Any, Any, _T]) -> _T:
        """Run an async coroutine synchronously."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            # Already inside an event loop (e.g. Jupyter): run in a worker thread
            import concurrent.futures

            with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
                return pool.submit(asyncio.run, coro).result()
        return asyncio.run(coro)

    def _make_client(self) -> AsyncEventScoutClient:
        return AsyncEventScoutClient(self._base_url, timeout=self._timeout, **self._httpx_kwargs)

    def health(self) -> dict[str, Any]:
        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.health()

        return self._run(_call())

    def source_health(self) -> dict[str, Any]:
        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.source_health()

        return self._run(_call())

    def search_events(
        self,
        search: str | None = None,
        *,
        page: int = 1,
        limit: int = 30,
        include_external: bool = True,
        **filters: Any,
    ) -> EventPageResult:
        """Run a federated event search (see ``AsyncEventScoutClient.search_events``)."""

        async def _call() -> EventPageResult:
            async with self._make_client() as c:
                return await c.search_events(
                    search,
                    page=page,
                    limit=limit,
                    include_external=include_external,
                    **filters,
                )

        return self._run(_call())

    def get_event(self, event_id: str) -> EventResult | None:
        async def _call() -> EventResult | None:
            async with self._make_client() as c:
                return await c.get_event(event_id)

        return self._run(_call())
