"""API dependencies — the shared search engine for request handlers."""

from __future__ import annotations

from eventscout.core.engine import EventSearchEngine

# Bound by the application lifespan; tests bind their own.
_engine: EventSearchEngine | None = None


def set_engine(engine: EventSearchEngine | None) -> None:
    global _engine
    _engine = engine


def get_engine() -> EventSearchEngine:
    """FastAPI dependency returning the process-wide engine.

    Raises:
        RuntimeError: If no engine has been bound yet.
    """
    if _engine is None:
        raise RuntimeError("EventScout engine not initialized. Is the server running?")
    return _engine
