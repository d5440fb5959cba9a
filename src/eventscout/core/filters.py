"""Filter Normalizer — turns raw query parameters into a ``SearchFilter``.

Pure functions, no I/O. The only failure mode is ``InvalidFilterError`` for
unparseable date bounds when strict date handling is on; every other
malformed value is replaced by its default.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime, time

from dateutil import parser as date_parser

from eventscout.models.event import EventCategory
from eventscout.models.query import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    LocationFilter,
    SearchFilter,
    SearchTerm,
    SearchTermKind,
)

# MongoDB ObjectId rendered as hex: 12 bytes -> 24 hex characters.
_IDENTIFIER_RE = re.compile(r"[0-9a-fA-F]{24}")
_DATE_ONLY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


class InvalidFilterError(ValueError):
    """Raised when a query parameter cannot be turned into a filter value."""


def is_identifier(value: str | None) -> bool:
    """Return True if *value* has the local store's identifier format."""
    return bool(value) and _IDENTIFIER_RE.fullmatch(value) is not None


def parse_search_term(raw: str | None) -> SearchTerm | None:
    """Disambiguate the polymorphic ``search`` parameter.

    Identifier-shaped values become an exact identifier lookup, anything else
    a case-insensitive title substring. Blank values mean "no search".
    """
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None
    kind = SearchTermKind.IDENTIFIER if is_identifier(value) else SearchTermKind.TEXT
    return SearchTerm(value=value, kind=kind)


def parse_positive_int(raw: str | None, default: int) -> int:
    """Parse a positive integer, falling back to *default* on anything else."""
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value >= 1 else default


def parse_date_bound(raw: str | None, *, upper: bool = False) -> datetime | None:
    """Parse a date bound written in any format ``dateutil`` understands.

    ISO-8601 is tried first; anything else (``"March 5, 2025"``,
    ``"2025/03/05"``, ``"03/05/2025"``) goes through the general parser,
    which reads slash dates month first. A bound without a time of day is
    widened to the end of that day when it is an upper bound, so it stays
    inclusive for events stored with a time component.

    Raises:
        InvalidFilterError: If no parser accepts *raw*.
    """
    if raw is None or not raw.strip():
        return None
    text = raw.strip()

    try:
        parsed = date_parser.isoparse(text)
    except ValueError:
        parsed = None
    if parsed is not None:
        if upper and _DATE_ONLY_RE.fullmatch(text):
            return datetime.combine(parsed.date(), time.max, tzinfo=parsed.tzinfo)
        return parsed

    start_of_today = datetime.combine(date.today(), time.min)
    try:
        parsed = date_parser.parse(text, default=start_of_today)
        if upper:
            # Fields missing from *text* come from the default, so a time of
            # day that follows the default was never written.
            end_filled = date_parser.parse(text, default=datetime.combine(date.today(), time.max))
            if end_filled.time() == time.max:
                return datetime.combine(parsed.date(), time.max, tzinfo=parsed.tzinfo)
    except (ValueError, OverflowError) as e:
        raise InvalidFilterError(f"Invalid date: {raw!r}") from e
    return parsed


def _clean(raw: str | None) -> str | None:
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def normalize(raw_params: Mapping[str, str | None], *, reject_invalid_dates: bool = True) -> SearchFilter:
    """Build the canonical ``SearchFilter`` for one request.

    Args:
        raw_params: Query parameters as received (``search``, ``city``,
            ``state``, ``country``, ``address``, ``dateFrom``, ``dateTo``,
            ``category``, ``format``, ``language``, ``page``, ``limit``,
            ``ticketMaster``).
        reject_invalid_dates: Raise on unparseable date bounds instead of
            flagging the filter as matching nothing.

    Returns:
        The normalized filter.

    Raises:
        InvalidFilterError: On an unparseable date bound in strict mode.
    """
    date_from = date_to = None
    has_invalid_dates = False
    try:
        date_from = parse_date_bound(raw_params.get("dateFrom"))
    except InvalidFilterError:
        if reject_invalid_dates:
            raise
        has_invalid_dates = True
    try:
        date_to = parse_date_bound(raw_params.get("dateTo"), upper=True)
    except InvalidFilterError:
        if reject_invalid_dates:
            raise
        has_invalid_dates = True

    category = _clean(raw_params.get("category"))
    if category == EventCategory.ANY:
        category = None

    external_flag = _clean(raw_params.get("ticketMaster"))

    return SearchFilter(
        search=parse_search_term(raw_params.get("search")),
        location=LocationFilter(
            city=_clean(raw_params.get("city")),
            state=_clean(raw_params.get("state")),
            country=_clean(raw_params.get("country")),
            address=_clean(raw_params.get("address")),
        ),
        date_from=date_from,
        date_to=date_to,
        has_invalid_dates=has_invalid_dates,
        category=category,
        format=_clean(raw_params.get("format")),
        language=_clean(raw_params.get("language")),
        page=parse_positive_int(raw_params.get("page"), DEFAULT_PAGE),
        limit=parse_positive_int(raw_params.get("limit"), DEFAULT_LIMIT),
        include_external=(external_flag or "").lower() != "false",
    )
