"""Base adapter interface — Abstract classes for event source connectors."""

from eventscout.adapters.base.adapter import AdapterHealth, EventSource

__all__ = ["AdapterHealth", "EventSource"]
