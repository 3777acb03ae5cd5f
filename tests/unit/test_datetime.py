# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for timestamp helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from curriculum_catalog.utils.datetime import (
    EPOCH_DATE,
    date_sort_key,
    ensure_utc,
    format_iso_date,
    parse_iso,
    utc_now,
)


class TestEnsureUtc:
    """Tests for ensure_utc."""

    def test_naive_is_assumed_utc(self) -> None:
        """Test that naive datetimes get a UTC tzinfo."""
        result = ensure_utc(datetime(2024, 1, 1, 12, 0))

        assert result.tzinfo == timezone.utc
        assert result.hour == 12

    def test_aware_is_converted(self) -> None:
        """Test that aware datetimes are converted to UTC."""
        plus_three = timezone(timedelta(hours=3))

        result = ensure_utc(datetime(2024, 1, 1, 2, 0, tzinfo=plus_three))

        assert result == datetime(2023, 12, 31, 23, 0, tzinfo=timezone.utc)

    def test_utc_now_is_aware(self) -> None:
        """Test that utc_now returns an aware datetime."""
        assert utc_now().tzinfo is not None


class TestParseIso:
    """Tests for parse_iso."""

    def test_z_suffix(self) -> None:
        """Test ISO string with Z suffix."""
        result = parse_iso("2024-03-15T10:30:00Z")

        assert result == datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)

    def test_epoch_milliseconds(self) -> None:
        """Test epoch milliseconds."""
        result = parse_iso(0)

        assert result == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_date_object(self) -> None:
        """Test plain date objects."""
        assert parse_iso(date(2024, 5, 1)) == datetime(2024, 5, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", True, {"a": 1}, [1]])
    def test_unparseable_returns_none(self, value: object) -> None:
        """Test that unparseable values yield None."""
        assert parse_iso(value) is None


class TestFormatIsoDate:
    """Tests for format_iso_date."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2024-03-15T10:30:00Z", "2024-03-15"),
            ("2024-03-15", "2024-03-15"),
            ("2024-03-15T23:30:00-02:00", "2024-03-16"),
            (1718000000000, "2024-06-10"),
        ],
    )
    def test_formats_supported_inputs(self, value: object, expected: str) -> None:
        """Test that supported inputs reduce to a calendar date."""
        assert format_iso_date(value) == expected

    def test_malformed_returns_none(self) -> None:
        """Test that malformed input yields None."""
        assert format_iso_date("15/03/2024") is None


class TestDateSortKey:
    """Tests for date_sort_key."""

    def test_parses_iso_date(self) -> None:
        """Test ISO dates become date objects."""
        assert date_sort_key("2024-03-15") == date(2024, 3, 15)

    @pytest.mark.parametrize("value", [None, "", "garbage"])
    def test_missing_sorts_as_epoch(self, value: str | None) -> None:
        """Test that missing or malformed dates sort as the epoch."""
        assert date_sort_key(value) == EPOCH_DATE
