# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the curriculum catalog engine.

The backend serializes timestamps inconsistently (ISO date-times with and
without offsets, bare dates, epoch milliseconds). The engine only ever
needs the calendar date, so every timestamp is reduced to an ISO
`YYYY-MM-DD` string on the way in.

Design Decisions:
-----------------
1. Aware datetimes are converted to UTC before the date is taken
2. Naive datetimes are assumed to already be UTC
3. Unparseable input yields None, never an exception
"""

from datetime import date, datetime, timezone

EPOCH_DATE = date(1970, 1, 1)


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware).

    Returns:
        Timezone-aware UTC datetime. Naive input is assumed to be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso(value: object) -> datetime | None:
    """Parse a backend timestamp into an aware UTC datetime.

    Accepts ISO 8601 strings (a trailing "Z" is allowed), bare ISO dates,
    epoch milliseconds and datetime/date objects.

    Args:
        value: Raw timestamp from the backend.

    Returns:
        Timezone-aware UTC datetime or None if the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str) or not value.strip():
        return None

    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_utc(parsed)


def format_iso_date(value: object) -> str | None:
    """Reduce a backend timestamp to an ISO date string.

    Args:
        value: Raw timestamp from the backend.

    Returns:
        "YYYY-MM-DD" or None for missing or malformed input.

    Example:
        >>> format_iso_date("2024-03-05T22:10:00Z")
        '2024-03-05'
        >>> format_iso_date("not a date") is None
        True
    """
    parsed = parse_iso(value)
    if parsed is None:
        return None
    return parsed.date().isoformat()


def date_sort_key(value: str | None) -> date:
    """Turn an ISO date string into a sortable date.

    Missing or malformed values sort as the Unix epoch.
    """
    if not value:
        return EPOCH_DATE
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return EPOCH_DATE
