"""Refresh policy for an already seeded notification feed.

This module contains no synthesis logic; it only decides how a fresh seed
is combined with what the user has already acknowledged.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from enum import StrEnum

from fleetdash.models.notification import Notification, NotificationOrigin


class NotificationRefreshPolicy(StrEnum):
    KEEP = "keep"
    """Seed once; later cycles leave the feed untouched."""
    REPLACE = "replace"
    """Every cycle replaces the feed wholesale, discarding read flags and dismissals."""
    MERGE = "merge"
    """Every cycle reseeds, preserving read flags, dismissals and user notifications."""


def should_reseed(policy: NotificationRefreshPolicy, *, seeded: bool) -> bool:
    """Decide whether a refresh cycle touches the feed at all."""
    if not seeded:
        return True
    return policy != NotificationRefreshPolicy.KEEP


def merge_seed(
    current: Sequence[Notification],
    seed: Sequence[Notification],
    *,
    dismissed: Collection[str | int] = (),
) -> list[Notification]:
    """Combine a fresh *seed* with the *current* feed.

    - user-originated notifications stay first, in their current order
    - seed entries the user removed or cleared (*dismissed*) are dropped
    - seed entries already read in the current feed stay read
    """
    user_entries = [n for n in current if n.origin == NotificationOrigin.USER]
    read_ids = {n.id for n in current if n.read}
    merged: list[Notification] = list(user_entries)
    for notification in seed:
        if notification.id in dismissed:
            continue
        if notification.id in read_ids and not notification.read:
            notification = notification.model_copy(update={"read": True})
        merged.append(notification)
    return merged
