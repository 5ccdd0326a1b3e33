"""Seed notification synthesis.

Derives the notification feed a refresh cycle starts from: one entry per
recent booking, plus a warning while vehicle availability is low.  The
output depends only on the inputs, so the same cycle always yields the
same feed.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import tzinfo

from fleetdash._constants import BOOKING_NOTIFICATION_PREFIX, LOW_AVAILABILITY_ID, TODAY_LABEL
from fleetdash.ingestion.normalize import format_locale_datetime
from fleetdash.models.notification import Notification, NotificationCategory, NotificationOrigin
from fleetdash.models.records import BookingRecord
from fleetdash.models.summary import SummaryStats


def booking_message(booking: BookingRecord) -> str:
    brand = booking.vehicle_brand or "Vehicle"
    model = booking.vehicle_model or ""
    name = booking.name or "Customer"
    return f"New booking: {brand} {model} by {name}"


def booking_time_label(booking: BookingRecord, position: int, tz: tzinfo | None = None) -> str:
    """Creation time of *booking*, or ``"{position} hours ago"`` when it has none."""
    if booking.timestamp is not None:
        return format_locale_datetime(booking.timestamp, tz)
    return f"{position} hours ago"


def low_availability_notification(available_cars: int) -> Notification:
    return Notification(
        id=LOW_AVAILABILITY_ID,
        message=f"Low vehicle availability alert: Only {available_cars} vehicles available",
        time=TODAY_LABEL,
        category=NotificationCategory.WARNING,
        origin=NotificationOrigin.SYNTHESIZED,
    )


def synthesize(
    stats: SummaryStats,
    recent_bookings: Sequence[BookingRecord],
    *,
    booking_limit: int = 3,
    low_availability_threshold: int = 3,
    tz: tzinfo | None = None,
) -> list[Notification]:
    """Build the seed feed for one cycle.

    Booking entries come first in the order received (most recent first),
    followed by the low-availability warning when
    ``stats.available_cars < low_availability_threshold``.  Every entry
    starts unread.
    """
    seed: list[Notification] = []
    for position, booking in enumerate(recent_bookings[:booking_limit], start=1):
        seed.append(
            Notification(
                id=f"{BOOKING_NOTIFICATION_PREFIX}{booking.id if booking.id is not None else position}",
                message=booking_message(booking),
                time=booking_time_label(booking, position, tz),
                category=NotificationCategory.INFO,
                origin=NotificationOrigin.SYNTHESIZED,
            )
        )

    if stats.available_cars < low_availability_threshold:
        seed.append(low_availability_notification(stats.available_cars))

    return seed
