"""Category Translator — local category vocabulary <-> provider classifications.

The provider only has a handful of top-level classification segments, so
most local categories collapse into its "Miscellaneous" bucket. This table is
the single place where that tie-break is decided; keep it explicit.
"""

from __future__ import annotations

from eventscout.models.event import EventCategory

MISCELLANEOUS = "Miscellaneous"

CATEGORY_TO_CLASSIFICATION: dict[EventCategory, str] = {
    EventCategory.MUSIC: "Music",
    EventCategory.SPORTS: "Sports",
    EventCategory.ARTS: "Arts & Theatre",
    EventCategory.SCIENCE: MISCELLANEOUS,
    EventCategory.FOOD_DRINK: MISCELLANEOUS,
    EventCategory.CHARITY: MISCELLANEOUS,
    EventCategory.SCIENCE_TECH: MISCELLANEOUS,
    EventCategory.COMMUNITY: MISCELLANEOUS,
    EventCategory.FASHION: MISCELLANEOUS,
    EventCategory.GOVERNMENT: MISCELLANEOUS,
    EventCategory.FITNESS: MISCELLANEOUS,
    EventCategory.HOLIDAYS: MISCELLANEOUS,
}


def to_external_taxonomy(category: str | None) -> str:
    """Translate a local category into the provider's classification name.

    Returns an empty string for absent or unmapped categories, meaning
    "don't filter the provider by category".
    """
    if not category:
        return ""
    try:
        return CATEGORY_TO_CLASSIFICATION.get(EventCategory(category), "")
    except ValueError:
        return ""


def local_categories_for(classification: str | None) -> list[EventCategory]:
    """Return every local category that maps onto *classification*.

    Matching is case-insensitive; unknown classifications map to nothing.
    """
    if not classification:
        return []
    wanted = classification.strip().lower()
    return [cat for cat, term in CATEGORY_TO_CLASSIFICATION.items() if term.lower() == wanted]
