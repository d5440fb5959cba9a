"""Tests for the filter normalizer."""

from __future__ import annotations

from datetime import UTC, datetime, time

import pytest

from eventscout.core.filters import (
    InvalidFilterError,
    is_identifier,
    normalize,
    parse_date_bound,
    parse_positive_int,
    parse_search_term,
)
from eventscout.models.query import DEFAULT_LIMIT, DEFAULT_PAGE, SearchTermKind

# ── Search term ──────────────────────────────────────────────────────────────


class TestSearchTerm:
    def test_identifier_shaped_value(self) -> None:
        term = parse_search_term("65f1c2a9b4d3e8f7a6b5c4d3")
        assert term is not None
        assert term.kind is SearchTermKind.IDENTIFIER
        assert term.value == "65f1c2a9b4d3e8f7a6b5c4d3"

    def test_uppercase_hex_is_identifier(self) -> None:
        term = parse_search_term("65F1C2A9B4D3E8F7A6B5C4D3")
        assert term is not None
        assert term.kind is SearchTermKind.IDENTIFIER

    def test_free_text(self) -> None:
        term = parse_search_term("Birthday Party")
        assert term is not None
        assert term.kind is SearchTermKind.TEXT
        assert term.value == "Birthday Party"

    def test_surrounding_whitespace_is_stripped(self) -> None:
        term = parse_search_term("  jazz  ")
        assert term is not None
        assert term.value == "jazz"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_means_no_search(self, raw: str | None) -> None:
        assert parse_search_term(raw) is None

    @pytest.mark.parametrize(
        "value",
        [
            "65f1c2a9b4d3e8f7a6b5c4d",  # 23 chars
            "65f1c2a9b4d3e8f7a6b5c4d3a",  # 25 chars
            "zzf1c2a9b4d3e8f7a6b5c4d3",  # non-hex
            "",
        ],
    )
    def test_not_identifiers(self, value: str) -> None:
        assert is_identifier(value) is False

    def test_none_is_not_identifier(self) -> None:
        assert is_identifier(None) is False


# ── Page / limit ─────────────────────────────────────────────────────────────


class TestPositiveInt:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2", 2),
            (" 5 ", 5),
            (None, 7),
            ("", 7),
            ("0", 7),
            ("-3", 7),
            ("abc", 7),
            ("2.5", 7),
        ],
    )
    def test_parse(self, raw: str | None, expected: int) -> None:
        assert parse_positive_int(raw, 7) == expected


# ── Dates ────────────────────────────────────────────────────────────────────


class TestDateBounds:
    def test_date_only_lower_bound_is_start_of_day(self) -> None:
        assert parse_date_bound("2030-05-17") == datetime(2030, 5, 17)

    def test_date_only_upper_bound_covers_whole_day(self) -> None:
        assert parse_date_bound("2030-05-17", upper=True) == datetime.combine(datetime(2030, 5, 17).date(), time.max)

    def test_datetime_upper_bound_is_kept(self) -> None:
        assert parse_date_bound("2030-05-17T12:30:00", upper=True) == datetime(2030, 5, 17, 12, 30)

    def test_zulu_suffix(self) -> None:
        assert parse_date_bound("2030-05-17T12:30:00Z") == datetime(2030, 5, 17, 12, 30, tzinfo=UTC)

    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_absent(self, raw: str | None) -> None:
        assert parse_date_bound(raw) is None

    def test_garbage_raises(self) -> None:
        with pytest.raises(InvalidFilterError, match="not-a-date"):
            parse_date_bound("not-a-date")

    @pytest.mark.parametrize("raw", ["March 5, 2025", "2025/03/05", "03/05/2025", "2025-3-5"])
    def test_non_iso_forms(self, raw: str) -> None:
        assert parse_date_bound(raw) == datetime(2025, 3, 5)

    def test_non_iso_upper_bound_covers_whole_day(self) -> None:
        assert parse_date_bound("March 5, 2025", upper=True) == datetime.combine(datetime(2025, 3, 5).date(), time.max)

    def test_non_iso_upper_bound_with_time_is_kept(self) -> None:
        assert parse_date_bound("March 5, 2025 10:30", upper=True) == datetime(2025, 3, 5, 10, 30)

    def test_impossible_calendar_date_raises(self) -> None:
        with pytest.raises(InvalidFilterError):
            parse_date_bound("2030-02-30")


# ── normalize ────────────────────────────────────────────────────────────────


class TestNormalize:
    def test_empty_params(self) -> None:
        f = normalize({})
        assert f.search is None
        assert f.location.present() == {}
        assert f.date_from is None
        assert f.date_to is None
        assert f.has_invalid_dates is False
        assert f.category is None
        assert f.page == DEFAULT_PAGE
        assert f.limit == DEFAULT_LIMIT
        assert f.include_external is True

    def test_all_params(self) -> None:
        f = normalize(
            {
                "search": "jazz",
                "city": "Austin",
                "state": "Texas",
                "country": "USA",
                "address": "Main",
                "dateFrom": "2030-01-01",
                "dateTo": "2030-12-31",
                "category": "Music",
                "format": "Offline",
                "language": "English",
                "page": "3",
                "limit": "10",
            }
        )
        assert f.search is not None
        assert f.search.kind is SearchTermKind.TEXT
        assert f.location.present() == {"city": "Austin", "state": "Texas", "country": "USA", "address": "Main"}
        assert f.date_from == datetime(2030, 1, 1)
        assert f.date_to is not None and f.date_to.date() == datetime(2030, 12, 31).date()
        assert f.category == "Music"
        assert f.format == "Offline"
        assert f.language == "English"
        assert f.page == 3
        assert f.limit == 10

    def test_malformed_page_and_limit_fall_back(self) -> None:
        f = normalize({"page": "zero", "limit": "-1"})
        assert f.page == DEFAULT_PAGE
        assert f.limit == DEFAULT_LIMIT

    def test_blank_location_fields_are_dropped(self) -> None:
        f = normalize({"city": "  ", "state": "Kansas"})
        assert f.location.present() == {"state": "Kansas"}

    def test_any_category_is_no_constraint(self) -> None:
        assert normalize({"category": "any"}).category is None

    def test_invalid_date_rejected_by_default(self) -> None:
        with pytest.raises(InvalidFilterError):
            normalize({"dateTo": "2030-13-45"})

    def test_written_out_date_accepted(self) -> None:
        f = normalize({"dateFrom": "March 5, 2025"})
        assert f.date_from == datetime(2025, 3, 5)
        assert f.has_invalid_dates is False

    def test_invalid_date_lenient_mode(self) -> None:
        f = normalize({"dateFrom": "yesterday", "dateTo": "2030-12-31"}, reject_invalid_dates=False)
        assert f.has_invalid_dates is True
        assert f.date_from is None
        assert f.date_to is not None

    @pytest.mark.parametrize("flag", ["false", "False", "FALSE"])
    def test_external_opt_out(self, flag: str) -> None:
        assert normalize({"ticketMaster": flag}).include_external is False

    @pytest.mark.parametrize("flag", [None, "true", "yes", ""])
    def test_external_default_on(self, flag: str | None) -> None:
        assert normalize({"ticketMaster": flag}).include_external is True

    def test_idempotent(self) -> None:
        params = {"search": "Birthday Party", "city": "Lawrence", "page": "2", "limit": "5"}
        assert normalize(params) == normalize(params)
