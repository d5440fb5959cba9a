"""Event source exceptions.

The local store raises these to fail a request; the external provider only
raises them from ``initialize`` and ``fetch_event`` since its searches degrade
to an empty result instead.
"""


class AdapterError(Exception):
    """Base exception for event source errors."""


class ConnectionError(AdapterError):
    """The source's backend is unreachable or the source was never initialized."""


class DocumentNotFoundError(AdapterError):
    """No event with the requested identifier exists in this source."""


class QueryError(AdapterError):
    """The backend rejected or failed a query."""


class ConfigurationError(AdapterError):
    """The source cannot start with the given settings (e.g. missing API key)."""
