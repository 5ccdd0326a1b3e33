"""Data models for store records, summaries and notifications."""

from fleetdash.models._base import StoreRecordModel, StoreTimestamp
from fleetdash.models.notification import Notification, NotificationCategory, NotificationOrigin, NotificationState
from fleetdash.models.records import BookingRecord, FeedbackRecord, UserRecord, VehicleRecord
from fleetdash.models.summary import BookingStatusCounts, SummaryStats

__all__ = [
    "BookingRecord",
    "BookingStatusCounts",
    "FeedbackRecord",
    "Notification",
    "NotificationCategory",
    "NotificationOrigin",
    "NotificationState",
    "StoreRecordModel",
    "StoreTimestamp",
    "SummaryStats",
    "UserRecord",
    "VehicleRecord",
]
