"""fleetdash - Async dashboard core for a vehicle rental platform."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetdash")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetdash.client import FleetDashboard
from fleetdash.config import DashboardConfig
from fleetdash.exceptions import CollectionNotFoundError, DashboardConfigError, DataSourceError, FleetDashError
from fleetdash.models import (
    BookingRecord,
    BookingStatusCounts,
    FeedbackRecord,
    Notification,
    NotificationCategory,
    NotificationOrigin,
    NotificationState,
    SummaryStats,
    UserRecord,
    VehicleRecord,
)
from fleetdash.notifications.policy import NotificationRefreshPolicy
from fleetdash.notifications.store import NotificationStore
from fleetdash.status import StatusCategory, StatusDisplay, StatusTone, classify, describe_status
from fleetdash.store import DocumentStore, FirestoreRestStore, InMemoryDocumentStore

__all__ = [
    "BookingRecord",
    "BookingStatusCounts",
    "CollectionNotFoundError",
    "DashboardConfig",
    "DashboardConfigError",
    "DataSourceError",
    "DocumentStore",
    "FeedbackRecord",
    "FirestoreRestStore",
    "FleetDashError",
    "FleetDashboard",
    "InMemoryDocumentStore",
    "Notification",
    "NotificationCategory",
    "NotificationOrigin",
    "NotificationRefreshPolicy",
    "NotificationState",
    "NotificationStore",
    "StatusCategory",
    "StatusDisplay",
    "StatusTone",
    "SummaryStats",
    "UserRecord",
    "VehicleRecord",
    "__version__",
    "classify",
    "describe_status",
]
