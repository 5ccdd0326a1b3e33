"""Reduce one cycle's records into summary counts."""

from __future__ import annotations

from collections.abc import Iterable

from fleetdash._constants import AVAILABLE_STATUS
from fleetdash.ingestion.orchestrator import OrchestrationResult
from fleetdash.models.records import BookingRecord, VehicleRecord
from fleetdash.models.summary import BookingStatusCounts, SummaryStats


def count_available(vehicles: Iterable[VehicleRecord]) -> int:
    # Exact, case-sensitive match; VehicleRecord.is_available is the lenient variant.
    return sum(1 for vehicle in vehicles if vehicle.status == AVAILABLE_STATUS)


def aggregate(result: OrchestrationResult) -> SummaryStats:
    """Compute :class:`SummaryStats` from a complete orchestration result.

    ``total_bookings`` counts the full booking read, not the recent window.
    """
    return SummaryStats(
        total_cars=len(result.vehicles),
        available_cars=count_available(result.vehicles),
        total_owners=len(result.owners),
        total_customers=len(result.customers),
        total_bookings=len(result.bookings),
        total_feedbacks=len(result.recent_feedbacks),
    )


def count_booking_statuses(bookings: Iterable[BookingRecord]) -> BookingStatusCounts:
    """Count bookings per raw status, compared lower-cased.

    ``"active"`` is not folded into ``confirmed`` here even though the
    status classifier displays both as ``"Active"``.
    """
    counts = {"pending": 0, "confirmed": 0, "completed": 0, "cancelled": 0}
    for booking in bookings:
        if booking.status is None:
            continue
        key = booking.status.lower()
        if key in counts:
            counts[key] += 1
    return BookingStatusCounts(**counts)
