"""Query orchestration for one dashboard refresh cycle.

Issues the fixed set of reads against the document store concurrently,
waits for every one of them, and either returns a complete
:class:`OrchestrationResult` or raises :class:`DataSourceError`.  Only the
feedback read is optional: its failures are swallowed into an empty list.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fleetdash._constants import (
    BOOKING_ORDER_FIELD,
    BOOKINGS_COLLECTION,
    CUSTOMER_ROLE,
    FEEDBACK_ORDER_FIELD,
    FEEDBACKS_COLLECTION,
    OWNER_ROLE,
    ROLE_FIELD,
    USERS_COLLECTION,
    VEHICLES_COLLECTION,
)
from fleetdash.config import DashboardConfig
from fleetdash.exceptions import DataSourceError
from fleetdash.ingestion.normalize import format_locale_date
from fleetdash.models.records import BookingRecord, FeedbackRecord, UserRecord, VehicleRecord
from fleetdash.store.base import DocumentStore, SortDirection

_logger = logging.getLogger(__name__)

TRecord = TypeVar("TRecord", bound=BaseModel)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ReadOutcome(Generic[TRecord]):
    """Tagged result of a single store read: records on success, the error otherwise."""

    name: str
    collection: str
    optional: bool = False
    records: list[TRecord] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class OrchestrationResult(BaseModel):
    """Everything one cycle fetched, already parsed into record models."""

    model_config = ConfigDict(frozen=True)

    vehicles: tuple[VehicleRecord, ...] = ()
    owners: tuple[UserRecord, ...] = ()
    customers: tuple[UserRecord, ...] = ()
    bookings: tuple[BookingRecord, ...] = ()
    recent_bookings: tuple[BookingRecord, ...] = ()
    """Most recent first, with display dates derived."""
    recent_feedbacks: tuple[FeedbackRecord, ...] = ()
    fetched_at: datetime = Field(default_factory=_utcnow)


def with_display_dates(booking: BookingRecord, tz: tzinfo | None = None) -> BookingRecord:
    """Return *booking* with ``start_date_formatted``/``end_date_formatted`` derived.

    Dates that are absent or unparseable leave the formatted field unset.
    """
    update: dict[str, Any] = {}
    if booking.start_date is not None:
        update["start_date_formatted"] = format_locale_date(booking.start_date, tz)
    if booking.end_date is not None:
        update["end_date_formatted"] = format_locale_date(booking.end_date, tz)
    if not update:
        return booking
    return booking.model_copy(update=update)


class QueryOrchestrator:
    """Runs the per-cycle reads against a :class:`DocumentStore`."""

    def __init__(self, store: DocumentStore, config: DashboardConfig | None = None) -> None:
        self._store = store
        self._config = config or DashboardConfig()

    async def _read(
        self,
        name: str,
        collection: str,
        model: type[TRecord],
        fetch: Callable[[], Awaitable[list[dict[str, Any]]]],
        *,
        optional: bool = False,
    ) -> ReadOutcome[TRecord]:
        outcome: ReadOutcome[TRecord] = ReadOutcome(name=name, collection=collection, optional=optional)
        try:
            if self._config.query_timeout is None:
                raw_records = await fetch()
            else:
                raw_records = await asyncio.wait_for(fetch(), timeout=self._config.query_timeout)
            outcome.records = [model.model_validate(record) for record in raw_records]
        except Exception as exc:
            outcome.error = exc
        return outcome

    def _reads(self) -> list[Awaitable[ReadOutcome[Any]]]:
        store = self._store
        config = self._config
        return [
            self._read(
                "vehicles",
                VEHICLES_COLLECTION,
                VehicleRecord,
                lambda: store.query(VEHICLES_COLLECTION),
            ),
            self._read(
                "owners",
                USERS_COLLECTION,
                UserRecord,
                lambda: store.query(USERS_COLLECTION, filters=[(ROLE_FIELD, "==", OWNER_ROLE)]),
            ),
            self._read(
                "customers",
                USERS_COLLECTION,
                UserRecord,
                lambda: store.query(USERS_COLLECTION, filters=[(ROLE_FIELD, "==", CUSTOMER_ROLE)]),
            ),
            self._read(
                "bookings",
                BOOKINGS_COLLECTION,
                BookingRecord,
                lambda: store.query(
                    BOOKINGS_COLLECTION,
                    sort_by=(BOOKING_ORDER_FIELD, SortDirection.DESCENDING),
                ),
            ),
            self._read(
                "recent_bookings",
                BOOKINGS_COLLECTION,
                BookingRecord,
                lambda: store.query(
                    BOOKINGS_COLLECTION,
                    sort_by=(BOOKING_ORDER_FIELD, SortDirection.DESCENDING),
                    limit=config.recent_bookings_limit,
                ),
            ),
            self._read(
                "recent_feedbacks",
                FEEDBACKS_COLLECTION,
                FeedbackRecord,
                lambda: store.query(
                    FEEDBACKS_COLLECTION,
                    sort_by=(FEEDBACK_ORDER_FIELD, SortDirection.DESCENDING),
                    limit=config.recent_feedbacks_limit,
                ),
                optional=True,
            ),
        ]

    async def run(self) -> OrchestrationResult:
        """Run all reads and bundle the results.

        Raises
        ------
        DataSourceError
            If any required read failed.  The first failure (in read order)
            is reported; the others are logged.
        """
        outcomes: list[ReadOutcome[Any]] = list(await asyncio.gather(*self._reads()))
        by_name: dict[str, ReadOutcome[Any]] = {outcome.name: outcome for outcome in outcomes}

        failures = [outcome for outcome in outcomes if not outcome.ok and not outcome.optional]
        for outcome in outcomes:
            if outcome.ok:
                continue
            if outcome.optional:
                _logger.debug(
                    "Optional read %s on %s failed; using an empty result",
                    outcome.name,
                    outcome.collection,
                    exc_info=outcome.error,
                )
                outcome.records = []
            elif outcome is not failures[0]:
                _logger.debug("Read %s on %s failed", outcome.name, outcome.collection, exc_info=outcome.error)

        if failures:
            first = failures[0]
            if isinstance(first.error, DataSourceError):
                raise first.error
            raise DataSourceError(_failure_message(first), collection=first.collection) from first.error

        tz = self._config.tzinfo
        result = OrchestrationResult(
            vehicles=tuple(by_name["vehicles"].records),
            owners=tuple(by_name["owners"].records),
            customers=tuple(by_name["customers"].records),
            bookings=tuple(by_name["bookings"].records),
            recent_bookings=tuple(with_display_dates(b, tz) for b in by_name["recent_bookings"].records),
            recent_feedbacks=tuple(by_name["recent_feedbacks"].records),
        )
        _logger.debug(
            "Orchestration finished vehicles=%d owners=%d customers=%d bookings=%d feedbacks=%d",
            len(result.vehicles),
            len(result.owners),
            len(result.customers),
            len(result.bookings),
            len(result.recent_feedbacks),
        )
        return result


def _failure_message(outcome: ReadOutcome[Any]) -> str:
    error = outcome.error
    if isinstance(error, ValidationError):
        return f"Malformed record in {outcome.collection!r} ({outcome.name})"
    if isinstance(error, TimeoutError):
        return f"Read {outcome.name} on {outcome.collection!r} timed out"
    return f"Read {outcome.name} on {outcome.collection!r} failed: {error}"
