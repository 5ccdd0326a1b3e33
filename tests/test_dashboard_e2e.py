from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

import pytest

from fleetdash import (
    DashboardConfig,
    DashboardConfigError,
    DataSourceError,
    FirestoreRestStore,
    FleetDashboard,
    FleetDashError,
    InMemoryDocumentStore,
    SummaryStats,
)
from fleetdash.models.summary import BookingStatusCounts


def _store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(
        {
            "vehicles": [
                {"id": "v1", "brand": "Toyota", "model": "Vios", "status": "Available"},
                {"id": "v2", "brand": "Honda", "model": "City", "status": "Rented"},
            ],
            "users": [
                {"id": "u1", "role": "customer", "name": "Ana"},
            ],
            "bookings": [
                {
                    "id": "b1",
                    "vehicleBrand": "Toyota",
                    "vehicleModel": "Vios",
                    "customerName": "Ana",
                    "status": "completed",
                    "price": 4500,
                    "timestamp": datetime(2026, 1, 1, 9, 0, tzinfo=UTC),
                },
                {
                    "id": "b2",
                    "vehicleBrand": "Honda",
                    "vehicleModel": "City",
                    "name": "Ana",
                    "status": "Confirmed",
                    "timestamp": datetime(2026, 1, 2, 9, 0, tzinfo=UTC),
                },
                {
                    "id": "b3",
                    "vehicleBrand": "Toyota",
                    "vehicleModel": "Vios",
                    "name": "Ana",
                    "status": "pending",
                    "price": 12500,
                    "startDate": {"seconds": 1_767_312_000},
                    "timestamp": datetime(2026, 1, 3, 9, 0, tzinfo=UTC),
                },
            ],
        }
    )


def _config(**kwargs: Any) -> DashboardConfig:
    return DashboardConfig(recent_bookings_limit=2, **kwargs)


@pytest.mark.asyncio
async def test_refresh_end_to_end() -> None:
    async with FleetDashboard(_config(), store=_store()) as dashboard:
        assert dashboard.get_summary() == SummaryStats()
        stats = await dashboard.refresh()

        assert stats.model_dump(by_alias=True) == {
            "totalCars": 2,
            "availableCars": 1,
            "totalOwners": 0,
            "totalCustomers": 1,
            "totalBookings": 3,
            "totalFeedbacks": 0,
        }
        assert dashboard.get_summary() is stats

        recent = dashboard.get_recent_bookings()
        assert [b.id for b in recent] == ["b3", "b2"]
        assert recent[0].start_date_formatted == "1/2/2026"
        assert recent[0].price_display == "₱12,500"
        assert recent[1].price_display == "N/A"
        assert dashboard.get_recent_feedbacks() == []
        assert dashboard.get_booking_status_counts() == BookingStatusCounts(pending=1, confirmed=1)

        notifications = dashboard.get_notifications()
        assert [n.id for n in notifications] == ["booking-b3", "booking-b2", "low-availability"]
        assert notifications[0].message == "New booking: Toyota Vios by Ana"
        assert notifications[0].time == "1/3/2026, 9:00:00 AM"
        assert dashboard.unread_count() == 3

        assert dashboard.loading is False
        assert dashboard.last_error is None
        assert dashboard.last_refreshed_at is not None


@pytest.mark.asyncio
async def test_notification_mutations_through_dashboard() -> None:
    async with FleetDashboard(_config(), store=_store()) as dashboard:
        await dashboard.refresh()

        new_id = dashboard.add_notification("Maintenance scheduled for v2")
        assert dashboard.unread_count() == 4
        assert dashboard.get_notifications(preview=True)[0].id == new_id
        assert len(dashboard.get_notifications(preview=True)) == 3

        assert dashboard.mark_notification_read("booking-b3") is True
        assert dashboard.unread_count() == 3
        assert dashboard.remove_notification("missing") is False

        dashboard.mark_all_notifications_read()
        assert dashboard.unread_count() == 0

        dashboard.clear_notifications()
        assert dashboard.get_notifications() == []


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_state() -> None:
    store = _store()
    async with FleetDashboard(_config(), store=store) as dashboard:
        first = await dashboard.refresh()
        dashboard.mark_notification_read("low-availability")

        store.drop_collection("vehicles")
        with pytest.raises(DataSourceError) as excinfo:
            await dashboard.refresh()

        assert excinfo.value.collection == "vehicles"
        assert dashboard.last_error is excinfo.value
        assert dashboard.loading is False
        assert dashboard.get_summary() is first
        assert [b.id for b in dashboard.get_recent_bookings()] == ["b3", "b2"]
        assert dashboard.unread_count() == 2


@pytest.mark.asyncio
async def test_keep_policy_seeds_once() -> None:
    store = _store()
    async with FleetDashboard(_config(), store=store) as dashboard:
        await dashboard.refresh()
        dashboard.remove_notification("low-availability")

        store.add("bookings", {"id": "b4", "vehicleBrand": "Ford", "timestamp": datetime(2026, 1, 4, tzinfo=UTC)})
        stats = await dashboard.refresh()

        assert stats.total_bookings == 4
        assert [n.id for n in dashboard.latest_seed][0] == "booking-b4"
        assert [n.id for n in dashboard.get_notifications()] == ["booking-b3", "booking-b2"]


@pytest.mark.asyncio
async def test_merge_policy_adds_new_bookings_and_respects_dismissals() -> None:
    store = _store()
    async with FleetDashboard(_config(notification_refresh="merge"), store=store) as dashboard:
        await dashboard.refresh()
        dashboard.remove_notification("low-availability")
        dashboard.mark_notification_read("booking-b3")

        store.add("bookings", {"id": "b4", "vehicleBrand": "Ford", "timestamp": datetime(2026, 1, 4, tzinfo=UTC)})
        await dashboard.refresh()

        assert [n.id for n in dashboard.get_notifications()] == ["booking-b4", "booking-b3"]
        assert dashboard.unread_count() == 1


@pytest.mark.asyncio
async def test_concurrent_refreshes_are_serialized() -> None:
    async with FleetDashboard(_config(), store=_store()) as dashboard:
        results = await asyncio.gather(dashboard.refresh(), dashboard.refresh())
        assert results[0] == results[1]
        assert dashboard.unread_count() == 3


@pytest.mark.asyncio
async def test_refresh_requires_context_without_store() -> None:
    dashboard = FleetDashboard(_config(project_id="rental-prod"))
    with pytest.raises(FleetDashError):
        await dashboard.refresh()


@pytest.mark.asyncio
async def test_external_http_session_is_not_closed() -> None:
    class FakeSession:
        closed = False

        async def close(self) -> None:
            self.closed = True

    session = FakeSession()
    dashboard = FleetDashboard(_config(project_id="rental-prod"), http_session=session)  # type: ignore[arg-type]
    async with dashboard:
        assert isinstance(dashboard._store, FirestoreRestStore)
    assert session.closed is False


@pytest.mark.asyncio
async def test_owned_session_closed_when_entry_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[Any] = []

    class FakeClientSession:
        def __init__(self) -> None:
            self.closed = False
            created.append(self)

        async def close(self) -> None:
            self.closed = True

    monkeypatch.setattr("fleetdash.client.aiohttp.ClientSession", FakeClientSession)

    dashboard = FleetDashboard(DashboardConfig())
    with pytest.raises(DashboardConfigError):
        async with dashboard:
            pass

    assert len(created) == 1
    assert created[0].closed is True
    assert dashboard._http_session is None
