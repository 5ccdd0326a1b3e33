from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from fleetdash.models.notification import NotificationCategory, NotificationOrigin
from fleetdash.models.records import BookingRecord
from fleetdash.models.summary import SummaryStats
from fleetdash.notifications.synthesizer import booking_message, synthesize


def _bookings() -> list[BookingRecord]:
    return [
        BookingRecord(
            id="b9",
            vehicle_brand="Toyota",
            vehicle_model="Vios",
            name="Ana",
            timestamp=datetime(2026, 1, 5, 15, 4, 5, tzinfo=UTC),
        ),
        BookingRecord(id="b8", vehicle_brand="Honda", vehicle_model="City", name="Ben"),
        BookingRecord(id="b7"),
        BookingRecord(id="b6", vehicle_brand="Ford"),
    ]


def test_booking_notifications_then_low_availability_warning() -> None:
    seed = synthesize(SummaryStats(available_cars=1), _bookings())

    assert [n.id for n in seed] == ["booking-b9", "booking-b8", "booking-b7", "low-availability"]
    assert seed[0].message == "New booking: Toyota Vios by Ana"
    assert seed[0].time == "1/5/2026, 3:04:05 PM"
    assert seed[1].time == "2 hours ago"
    assert seed[2].message == "New booking: Vehicle  by Customer"
    assert seed[2].time == "3 hours ago"

    warning = seed[-1]
    assert warning.category == NotificationCategory.WARNING
    assert warning.message == "Low vehicle availability alert: Only 1 vehicles available"
    assert warning.time == "Today"

    assert all(not n.read for n in seed)
    assert all(n.origin == NotificationOrigin.SYNTHESIZED for n in seed)
    assert all(n.category == NotificationCategory.INFO for n in seed[:-1])


def test_no_warning_at_threshold() -> None:
    seed = synthesize(SummaryStats(available_cars=3), _bookings()[:1])
    assert [n.id for n in seed] == ["booking-b9"]


def test_empty_inputs_with_zero_availability() -> None:
    seed = synthesize(SummaryStats(), [])
    assert [n.id for n in seed] == ["low-availability"]
    assert seed[0].message == "Low vehicle availability alert: Only 0 vehicles available"


def test_synthesis_is_deterministic() -> None:
    stats = SummaryStats(available_cars=2)
    assert synthesize(stats, _bookings()) == synthesize(stats, _bookings())


def test_limits_and_time_zone_are_configurable() -> None:
    seed = synthesize(
        SummaryStats(available_cars=4),
        _bookings(),
        booking_limit=1,
        low_availability_threshold=5,
        tz=ZoneInfo("Asia/Manila"),
    )
    assert [n.id for n in seed] == ["booking-b9", "low-availability"]
    assert seed[0].time == "1/5/2026, 11:04:05 PM"


def test_booking_message_placeholders() -> None:
    assert booking_message(BookingRecord(vehicle_brand="Ford")) == "New booking: Ford  by Customer"


def test_booking_time_label_uses_local_date_across_midnight() -> None:
    # 20:00 UTC on Jan 5 is 04:00 on Jan 6 in Manila.
    booking = BookingRecord(id="b1", timestamp=datetime(2026, 1, 5, 20, 0, tzinfo=UTC))
    seed = synthesize(SummaryStats(available_cars=5), [booking], tz=ZoneInfo("Asia/Manila"))
    assert seed[0].time == "1/6/2026, 4:00:00 AM"

    # 03:00 UTC on Jan 5 is still Jan 4 in New York.
    early = BookingRecord(id="b2", timestamp=datetime(2026, 1, 5, 3, 0, tzinfo=UTC))
    seed = synthesize(SummaryStats(available_cars=5), [early], tz=ZoneInfo("America/New_York"))
    assert seed[0].time == "1/4/2026, 10:00:00 PM"


def test_bookings_without_id_get_distinct_notification_ids() -> None:
    seed = synthesize(SummaryStats(available_cars=5), [BookingRecord(), BookingRecord()])
    assert [n.id for n in seed] == ["booking-1", "booking-2"]
