"""High-level async controller for the rental dashboard."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

import aiohttp

from fleetdash.config import DashboardConfig
from fleetdash.exceptions import DataSourceError, FleetDashError
from fleetdash.ingestion.orchestrator import QueryOrchestrator
from fleetdash.models.notification import Notification, NotificationCategory
from fleetdash.models.records import BookingRecord, FeedbackRecord
from fleetdash.models.summary import BookingStatusCounts, SummaryStats
from fleetdash.notifications.store import NotificationId, NotificationStore
from fleetdash.notifications.synthesizer import synthesize
from fleetdash.store.base import DocumentStore
from fleetdash.store.firestore import FirestoreRestStore
from fleetdash.summary.aggregator import aggregate, count_booking_statuses

_logger = logging.getLogger(__name__)


class FleetDashboard:
    """Owns one refresh cycle at a time and the resulting dashboard state.

    Usage::

        async with FleetDashboard(DashboardConfig.from_env()) as dashboard:
            await dashboard.refresh()
            stats = dashboard.get_summary()

    When no *store* is given, a :class:`FirestoreRestStore` is created on
    entry, using *http_session* or a session owned by the dashboard.
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        *,
        store: DocumentStore | None = None,
        http_session: aiohttp.ClientSession | None = None,
        notifications: NotificationStore | None = None,
    ) -> None:
        self._config = config or DashboardConfig()
        self._store = store
        self._external_session = http_session is not None
        self._http_session = http_session
        self._notifications = notifications or NotificationStore()
        self._refresh_lock = asyncio.Lock()

        self._summary = SummaryStats()
        self._status_counts = BookingStatusCounts()
        self._recent_bookings: tuple[BookingRecord, ...] = ()
        self._recent_feedbacks: tuple[FeedbackRecord, ...] = ()
        self._latest_seed: tuple[Notification, ...] = ()

        self.loading = False
        self.last_refreshed_at: datetime | None = None
        self.last_error: DataSourceError | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetDashboard:
        if self._store is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            try:
                self._store = FirestoreRestStore(self._config, self._http_session)
            except Exception:
                # __aexit__ does not run when entry fails.
                if not self._external_session:
                    await self._http_session.close()
                    self._http_session = None
                raise
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _require_store(self) -> DocumentStore:
        if self._store is None:
            raise FleetDashError("Dashboard not initialized. Use 'async with FleetDashboard(...) as dashboard:'")
        return self._store

    @property
    def config(self) -> DashboardConfig:
        return self._config

    # ------------------------------------------------------------------
    # Refresh cycle
    # ------------------------------------------------------------------

    async def refresh(self) -> SummaryStats:
        """Run one orchestration cycle and publish its results.

        Cycles never overlap; a call made while one is running waits for it.
        On :class:`DataSourceError` the previous summary, bookings and
        notifications stay in place and the error is kept in
        :attr:`last_error` before being re-raised.
        """
        store = self._require_store()
        async with self._refresh_lock:
            self.loading = True
            try:
                result = await QueryOrchestrator(store, self._config).run()
            except DataSourceError as exc:
                self.last_error = exc
                _logger.debug("Dashboard refresh failed collection=%s", exc.collection, exc_info=True)
                raise
            finally:
                self.loading = False

            stats = aggregate(result)
            seed = synthesize(
                stats,
                result.recent_bookings,
                booking_limit=self._config.booking_notification_limit,
                low_availability_threshold=self._config.low_availability_threshold,
                tz=self._config.tzinfo,
            )

            self._summary = stats
            self._status_counts = count_booking_statuses(result.recent_bookings)
            self._recent_bookings = result.recent_bookings
            self._recent_feedbacks = result.recent_feedbacks
            self._latest_seed = tuple(seed)
            reseeded = self._notifications.reseed(seed, self._config.notification_refresh)

            self.last_error = None
            self.last_refreshed_at = result.fetched_at.astimezone(UTC)
            _logger.debug(
                "Dashboard refreshed cars=%d available=%d seed=%d reseeded=%s",
                stats.total_cars,
                stats.available_cars,
                len(seed),
                reseeded,
            )
            return stats

    # ------------------------------------------------------------------
    # Presentation getters
    # ------------------------------------------------------------------

    def get_summary(self) -> SummaryStats:
        """Latest summary; all zeros before the first successful refresh."""
        return self._summary

    def get_recent_bookings(self) -> list[BookingRecord]:
        return list(self._recent_bookings)

    def get_recent_feedbacks(self) -> list[FeedbackRecord]:
        return list(self._recent_feedbacks)

    def get_booking_status_counts(self) -> BookingStatusCounts:
        return self._status_counts

    def get_notifications(self, *, preview: bool = False) -> list[Notification]:
        if preview:
            return self._notifications.preview()
        return self._notifications.notifications()

    @property
    def latest_seed(self) -> list[Notification]:
        """Seed synthesized by the last successful cycle, whether applied or not."""
        return list(self._latest_seed)

    @property
    def notification_store(self) -> NotificationStore:
        return self._notifications

    # ------------------------------------------------------------------
    # Notification mutations
    # ------------------------------------------------------------------

    def add_notification(self, message: str, category: NotificationCategory | str = NotificationCategory.INFO) -> int:
        return self._notifications.add(message, category)

    def remove_notification(self, notification_id: NotificationId) -> bool:
        return self._notifications.remove(notification_id)

    def mark_notification_read(self, notification_id: NotificationId) -> bool:
        return self._notifications.mark_read(notification_id)

    def mark_all_notifications_read(self) -> None:
        self._notifications.mark_all_read()

    def clear_notifications(self) -> None:
        self._notifications.clear()

    def unread_count(self) -> int:
        return self._notifications.unread_count()
