"""Summary models produced once per orchestration cycle."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SummaryStats(BaseModel):
    """Count-based dashboard summary.

    Immutable and recomputed wholesale on every refresh.  Dumps with
    camelCase keys (``totalCars`` ...) when ``by_alias=True``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    total_cars: int = Field(default=0, ge=0)
    available_cars: int = Field(default=0, ge=0)
    total_owners: int = Field(default=0, ge=0)
    total_customers: int = Field(default=0, ge=0)
    total_bookings: int = Field(default=0, ge=0)
    total_feedbacks: int = Field(default=0, ge=0)


class BookingStatusCounts(BaseModel):
    """Breakdown of the recent bookings by raw status."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    pending: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0
