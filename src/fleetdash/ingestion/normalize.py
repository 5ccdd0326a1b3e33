"""Parsing and display helpers for store values.

Store documents are hand-entered through several clients, so numbers and
instants arrive in many shapes.  The parsers here never raise; anything
they cannot interpret becomes ``None``.  The formatters produce the
en-US strings shown on the dashboard.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import UTC, date, datetime, tzinfo
from typing import Any

_BLANK = frozenset({"", "--"})

# Epoch values above this are taken as milliseconds.
_MILLIS_CUTOFF = 1e11


def safe_float(value: Any) -> float | None:
    """Finite float from *value*, or ``None``.  Booleans are not numbers here."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip() in _BLANK:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def safe_int(value: Any) -> int | None:
    number = safe_float(value)
    return None if number is None else int(number)


def safe_str(value: Any) -> str | None:
    return None if value is None else (str(value) or None)


def normalize_timestamp_seconds(value: Any) -> float | None:
    """Epoch seconds from a seconds or milliseconds value; non-positive yields ``None``."""
    seconds = safe_float(value)
    if seconds is None or seconds <= 0:
        return None
    return seconds / 1000.0 if seconds > _MILLIS_CUTOFF else seconds


def _from_epoch(seconds: float | None) -> datetime | None:
    if seconds is None:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def parse_instant(value: Any) -> datetime | None:
    """Convert a stored instant to an aware UTC datetime.

    Accepts Firestore timestamp maps (``seconds``/``nanoseconds``, also the
    underscore-prefixed admin SDK form), epoch seconds or milliseconds,
    ISO-8601 strings, dates and datetimes.  Anything else yields ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, Mapping):
        seconds = safe_float(value.get("seconds", value.get("_seconds")))
        if seconds is None:
            return None
        nanos = safe_float(value.get("nanoseconds", value.get("_nanoseconds"))) or 0.0
        return _from_epoch(seconds + nanos / 1e9)
    if isinstance(value, (int, float)):
        return _from_epoch(normalize_timestamp_seconds(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if safe_float(text) is not None:
            return _from_epoch(normalize_timestamp_seconds(text))
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parse_instant(parsed)
    return None


def _localize(value: datetime, tz: tzinfo | None) -> datetime:
    aware = value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    return aware.astimezone(tz or UTC)


def format_locale_date(value: datetime, tz: tzinfo | None = None) -> str:
    """Format as an en-US short date, e.g. ``1/5/2026``."""
    local = _localize(value, tz)
    return f"{local.month}/{local.day}/{local.year}"


def format_locale_datetime(value: datetime, tz: tzinfo | None = None) -> str:
    """Format as an en-US date and time, e.g. ``1/5/2026, 3:04:05 PM``."""
    local = _localize(value, tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local.minute:02d}:{local.second:02d} {meridiem}"


def format_amount(value: float) -> str:
    """Group thousands and keep up to three decimals, like ``Number.toLocaleString``."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")
