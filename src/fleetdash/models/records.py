"""Record models for the rental collections.

These mirror the documents stored in the ``vehicles``, ``users``,
``bookings`` and ``feedbacks`` collections.  Only the fields the dashboard
reads are typed; everything else stays reachable through ``raw``.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import field_validator

from fleetdash._constants import AVAILABLE_STATUS, CURRENCY_SYMBOL, MISSING_PRICE_LABEL
from fleetdash.ingestion.normalize import format_amount, safe_float, safe_str
from fleetdash.models._base import StoreRecordModel, StoreTimestamp


class VehicleRecord(StoreRecordModel):
    """A vehicle listed for rent."""

    brand: str | None = None
    model: str | None = None
    transmission: str | None = None
    status: str | None = None
    """Availability status as entered by the owner (free text)."""

    @property
    def is_available(self) -> bool:
        """Case-insensitive availability check for display purposes.

        Summary counts use an exact comparison instead; see
        :func:`fleetdash.summary.aggregator.aggregate`.
        """
        return self.status is not None and self.status.strip().lower() == AVAILABLE_STATUS.lower()

    @field_validator("brand", "model", "transmission", "status", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return safe_str(value)


class UserRecord(StoreRecordModel):
    """A platform user (owner or customer)."""

    role: str | None = None
    """``"owner"`` or ``"customer"``; other values are possible."""
    name: str | None = None
    email: str | None = None

    @field_validator("role", "name", "email", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return safe_str(value)


class BookingRecord(StoreRecordModel):
    """A rental booking.

    ``start_date_formatted`` and ``end_date_formatted`` are display-only
    fields derived by the query orchestrator; they are never stored.
    """

    _KEY_ALIASES: ClassVar[dict[str, str]] = {
        "customerName": "name",
        "customerEmail": "email",
    }

    vehicle_brand: str | None = None
    vehicle_model: str | None = None
    transmission: str | None = None
    name: str | None = None
    """Customer name."""
    email: str | None = None
    """Customer email."""
    start_date: StoreTimestamp = None
    end_date: StoreTimestamp = None
    price: float | None = None
    status: str | None = None
    timestamp: StoreTimestamp = None
    """Creation instant, used for ordering."""

    start_date_formatted: str | None = None
    end_date_formatted: str | None = None

    @property
    def price_display(self) -> str:
        """Price with currency symbol and thousands separators, ``"N/A"`` when missing."""
        if self.price is None:
            return MISSING_PRICE_LABEL
        return f"{CURRENCY_SYMBOL}{format_amount(self.price)}"

    @field_validator(
        "vehicle_brand",
        "vehicle_model",
        "transmission",
        "name",
        "email",
        "status",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> float | None:
        return safe_float(value)


class FeedbackRecord(StoreRecordModel):
    """Customer feedback.  Only counted by the dashboard."""

    created_at: StoreTimestamp = None
