"""Notification models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NotificationCategory(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class NotificationOrigin(StrEnum):
    SYNTHESIZED = "synthesized"
    """Derived from aggregated records during a refresh."""
    USER = "user"
    """Created through an explicit user or system action."""


class Notification(BaseModel):
    """A single entry of the notification feed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str | int
    message: str
    time: str
    """Display label (``"Just now"``, ``"Today"``, a formatted date-time ...)."""
    read: bool = False
    category: NotificationCategory = NotificationCategory.INFO
    origin: NotificationOrigin = NotificationOrigin.SYNTHESIZED


class NotificationState(BaseModel):
    """Point-in-time view of the notification store."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    notifications: tuple[Notification, ...] = Field(default_factory=tuple)
    """Most-recent-first."""
    unread_count: int = 0

    @model_validator(mode="after")
    def _check_unread_count(self) -> NotificationState:
        expected = sum(1 for n in self.notifications if not n.read)
        if self.unread_count != expected:
            raise ValueError(f"unread_count={self.unread_count} does not match {expected} unread notifications")
        return self
