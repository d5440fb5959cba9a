"""EventScout Python SDK — Client library for the EventScout API.

Quick start::

    from eventscout.client import EventScoutClient

    client = EventScoutClient("http://localhost:8080")
    page = client.search_events(search="jazz", city="Austin")
    for event in page["docs"]:
        print(event["title"], event["external"])
"""

from eventscout.client.client import AsyncEventScoutClient, EventScoutClient

__all__ = ["AsyncEventScoutClient", "EventScoutClient"]
