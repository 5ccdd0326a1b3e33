"""Booking status classification.

Maps the free-text status stored on a booking to the label and tone shown
by the dashboard.  Every input yields a result; unknown statuses pass
through as their own label.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class StatusCategory(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PENDING = "pending"
    OTHER = "other"
    UNKNOWN = "unknown"


class StatusTone(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    DANGER = "danger"
    WARNING = "warning"
    NEUTRAL = "neutral"


class StatusDisplay(BaseModel):
    """Display category for a booking status."""

    model_config = ConfigDict(frozen=True)

    text: str
    category: StatusCategory
    tone: StatusTone


_KNOWN: dict[str, StatusDisplay] = {
    "active": StatusDisplay(text="Active", category=StatusCategory.ACTIVE, tone=StatusTone.SUCCESS),
    "confirmed": StatusDisplay(text="Active", category=StatusCategory.ACTIVE, tone=StatusTone.SUCCESS),
    "completed": StatusDisplay(text="Completed", category=StatusCategory.COMPLETED, tone=StatusTone.INFO),
    "cancelled": StatusDisplay(text="Cancelled", category=StatusCategory.CANCELLED, tone=StatusTone.DANGER),
    "pending": StatusDisplay(text="Pending", category=StatusCategory.PENDING, tone=StatusTone.WARNING),
}

_UNKNOWN = StatusDisplay(text="Unknown", category=StatusCategory.UNKNOWN, tone=StatusTone.NEUTRAL)


def describe_status(raw_status: Any) -> StatusDisplay:
    """Return label, category and tone for *raw_status* (case-insensitive)."""
    if raw_status is None:
        return _UNKNOWN
    text = str(raw_status)
    if not text:
        return _UNKNOWN
    known = _KNOWN.get(text.lower())
    if known is not None:
        return known
    return StatusDisplay(text=text, category=StatusCategory.OTHER, tone=StatusTone.NEUTRAL)


def classify(raw_status: Any) -> str:
    """Return the display label for *raw_status*.

    ``"confirmed"`` and ``"active"`` both read as ``"Active"``; unrecognized
    non-empty values are returned unchanged; ``None`` and ``""`` read as
    ``"Unknown"``.
    """
    return describe_status(raw_status).text
