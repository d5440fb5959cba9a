"""Event source adapters — one connector per place events come from.

Built-in sources:
  - mongodb: the application's own event store (authoritative, exact counts)
  - ticketmaster: Ticketmaster Discovery API v2 (external, best effort)

Implement ``EventSource`` to federate another provider.
"""
