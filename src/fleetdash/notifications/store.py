"""In-memory notification store.

This is the only component allowed to mutate the notification feed.  The
feed is an ordered map (id → notification, most recent first) and the
unread count is recomputed after every mutation, so it always equals the
number of unread entries.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from fleetdash._constants import JUST_NOW_LABEL, NOTIFICATION_PREVIEW_SIZE
from fleetdash.models.notification import Notification, NotificationCategory, NotificationOrigin, NotificationState
from fleetdash.notifications.policy import NotificationRefreshPolicy, merge_seed, should_reseed

_logger = logging.getLogger(__name__)

NotificationId = str | int


def _utcnow() -> datetime:
    return datetime.now(UTC)


class NotificationStore:
    """Mutable notification feed for one process session.

    Mutations are serialized by an internal re-entrant lock, so callers on
    several threads still observe a consistent feed and count.  Nothing is
    persisted.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: OrderedDict[NotificationId, Notification] = OrderedDict()
        self._unread = 0
        self._last_issued_id = 0
        self._dismissed: set[NotificationId] = set()
        self._seeded = False

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _recount(self) -> None:
        self._unread = sum(1 for n in self._entries.values() if not n.read)

    def _replace(self, notifications: Iterable[Notification]) -> None:
        entries: OrderedDict[NotificationId, Notification] = OrderedDict()
        for notification in notifications:
            if notification.id in entries:
                _logger.debug("Ignoring duplicate notification id=%s", notification.id)
                continue
            entries[notification.id] = notification
        self._entries = entries
        self._seeded = True
        self._recount()

    def _next_id(self) -> int:
        """Millisecond-clock id, strictly increasing and unused in the feed."""
        candidate = int(self._clock().timestamp() * 1000)
        candidate = max(candidate, self._last_issued_id + 1)
        while candidate in self._entries:
            candidate += 1
        self._last_issued_id = candidate
        return candidate

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def seed(self, notifications: Iterable[Notification]) -> None:
        """Replace the whole feed.  Duplicate ids keep their first occurrence."""
        with self._lock:
            self._dismissed.clear()
            self._replace(notifications)

    def reseed(
        self,
        notifications: Iterable[Notification],
        policy: NotificationRefreshPolicy = NotificationRefreshPolicy.KEEP,
    ) -> bool:
        """Apply a refresh cycle's seed according to *policy*.

        The first seed is always applied.  Returns whether the feed changed.
        """
        with self._lock:
            if not should_reseed(policy, seeded=self._seeded):
                return False
            if not self._seeded or policy == NotificationRefreshPolicy.REPLACE:
                self.seed(notifications)
            else:
                self._replace(merge_seed(list(self._entries.values()), list(notifications), dismissed=self._dismissed))
            return True

    def add(self, message: str, category: NotificationCategory | str = NotificationCategory.INFO) -> int:
        """Prepend an unread ``"Just now"`` notification and return its id."""
        with self._lock:
            notification = Notification(
                id=self._next_id(),
                message=message,
                time=JUST_NOW_LABEL,
                read=False,
                category=NotificationCategory(category),
                origin=NotificationOrigin.USER,
            )
            self._entries[notification.id] = notification
            self._entries.move_to_end(notification.id, last=False)
            self._recount()
            return int(notification.id)

    def remove(self, notification_id: NotificationId) -> bool:
        """Remove an entry.  Unknown ids are ignored; returns whether one was removed."""
        with self._lock:
            removed = self._entries.pop(notification_id, None)
            if removed is None:
                return False
            if removed.origin == NotificationOrigin.SYNTHESIZED:
                self._dismissed.add(notification_id)
            self._recount()
            return True

    def mark_read(self, notification_id: NotificationId) -> bool:
        """Mark one entry read; returns whether anything changed."""
        with self._lock:
            current = self._entries.get(notification_id)
            if current is None or current.read:
                return False
            self._entries[notification_id] = current.model_copy(update={"read": True})
            self._recount()
            return True

    def mark_all_read(self) -> None:
        with self._lock:
            for notification_id, notification in list(self._entries.items()):
                if not notification.read:
                    self._entries[notification_id] = notification.model_copy(update={"read": True})
            self._unread = 0

    def clear(self) -> None:
        with self._lock:
            self._dismissed.update(
                notification_id
                for notification_id, notification in self._entries.items()
                if notification.origin == NotificationOrigin.SYNTHESIZED
            )
            self._entries.clear()
            self._unread = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def unread_count(self) -> int:
        with self._lock:
            return self._unread

    def notifications(self) -> list[Notification]:
        """All entries, most recent first."""
        with self._lock:
            return list(self._entries.values())

    def preview(self, limit: int = NOTIFICATION_PREVIEW_SIZE) -> list[Notification]:
        """The first *limit* entries, as shown by the collapsed feed."""
        with self._lock:
            return list(self._entries.values())[: max(0, limit)]

    def get(self, notification_id: NotificationId) -> Notification | None:
        with self._lock:
            return self._entries.get(notification_id)

    def snapshot(self) -> NotificationState:
        with self._lock:
            return NotificationState(notifications=tuple(self._entries.values()), unread_count=self._unread)

    @property
    def is_seeded(self) -> bool:
        return self._seeded

    @property
    def dismissed_ids(self) -> frozenset[NotificationId]:
        """Synthesized ids removed or cleared since the last full seed."""
        with self._lock:
            return frozenset(self._dismissed)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._entries
