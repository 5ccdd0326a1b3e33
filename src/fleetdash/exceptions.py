"""Custom exception hierarchy for fleetdash."""

from __future__ import annotations


class FleetDashError(Exception):
    """Base exception for all fleetdash errors."""


class DashboardConfigError(FleetDashError):
    """Invalid or missing configuration."""


class DataSourceError(FleetDashError):
    """A read against the document store failed.

    Raised by store adapters for transport or decoding failures and by the
    query orchestrator when any required read of a cycle fails.  Consumers
    should treat the whole summary as stale and may retry the full cycle.
    """

    def __init__(
        self,
        message: str,
        *,
        collection: str = "",
        status_code: int | None = None,
    ) -> None:
        self.collection = collection
        self.status_code = status_code
        super().__init__(message)


class CollectionNotFoundError(DataSourceError):
    """The requested collection does not exist in the store.

    The orchestrator recovers from this for optional collections
    (feedbacks) by substituting an empty result.
    """
