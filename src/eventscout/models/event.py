"""Canonical event model — the one schema both event sources are mapped into.

Local records and provider records reach the API only as ``CanonicalEvent``.
Each source adapter owns exactly one mapping function into this shape
(``EventSource.map_to_canonical``), so every vocabulary and defaulting
decision for a source lives in one place.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class EventCategory(StrEnum):
    """Local category vocabulary."""

    MUSIC = "Music"
    SPORTS = "Sports"
    ARTS = "Arts"
    SCIENCE = "Science"
    FOOD_DRINK = "Food & Drink"
    CHARITY = "Charity"
    SCIENCE_TECH = "Science & Tech"
    COMMUNITY = "Community"
    FASHION = "Fashion"
    GOVERNMENT = "Government"
    FITNESS = "Fitness"
    HOLIDAYS = "Holidays"
    ANY = "any"
    OTHER = "Other"


class EventFormat(StrEnum):
    ONLINE = "Online"
    OFFLINE = "Offline"
    HYBRID = "Hybrid"


class EventLanguage(StrEnum):
    ENGLISH = "English"
    SPANISH = "Spanish"
    FRENCH = "French"
    GERMAN = "German"
    ITALIAN = "Italian"
    DUTCH = "Dutch"
    PORTUGESE = "Portugese"
    SWEDISH = "Swedish"
    HINDI = "Hindi"


class Location(BaseModel):
    """Structured event location. Missing parts are empty strings, never null."""

    address: str = Field(default="", description="Street address")
    city: str = Field(default="", description="City name")
    state: str = Field(default="", description="State / province name")
    country: str = Field(default="", description="Country name")
    lat: float = Field(default=0.0, description="Latitude (0 when unknown)")
    lng: float = Field(default=0.0, description="Longitude (0 when unknown)")


class Contact(BaseModel):
    email: str = Field(default="", description="Contact email")
    phone: int = Field(default=0, description="Contact phone number (0 when unknown)")


class AgendaItem(BaseModel):
    time: str = Field(description="Agenda slot start time")
    activity: str = Field(description="What happens in this slot")


class OrganizerSummary(BaseModel):
    """Name-only projection of a local organizer account."""

    id: str = Field(description="Organizer user identifier")
    name: str = Field(default="", description="Organizer display name")


class CanonicalEvent(BaseModel):
    """Unified event shape returned by every search and lookup.

    ``external`` tells the caller which source produced the record; ``url`` is
    only set for external events and points at the provider's listing page,
    which doubles as the registration link.
    """

    id: str = Field(description="Source-scoped event identifier")
    title: str = Field(description="Event title")
    description: str = Field(default="", description="Event description")
    location: Location = Field(default_factory=Location, description="Where the event takes place")
    date: str = Field(default="", description="Event date (ISO 8601)")
    time: str = Field(default="00:00", description="Start time (HH:MM)")
    duration: int | None = Field(default=None, description="Duration in minutes")
    capacity: int | None = Field(default=None, description="Maximum attendees")
    registration_deadline: str | None = Field(default=None, description="Registration deadline (ISO 8601)")
    category: str = Field(default=EventCategory.OTHER, description="Event category")
    format: str = Field(default=EventFormat.OFFLINE, description="Online / Offline / Hybrid")
    language: str = Field(default=EventLanguage.ENGLISH, description="Event language")
    image: str | None = Field(default=None, description="Cover image URL")
    agenda: list[AgendaItem] = Field(default_factory=list, description="Agenda items")
    contact: Contact = Field(default_factory=Contact, description="Contact information")
    organizer: OrganizerSummary | str | None = Field(
        default=None,
        description="Local organizer summary, or the external organizer name as plain text",
    )
    external: bool = Field(default=False, description="True when the event comes from the external provider")
    url: str | None = Field(default=None, description="Provider listing URL (external events only)")
