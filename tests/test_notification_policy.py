from __future__ import annotations

from fleetdash.models.notification import Notification, NotificationOrigin
from fleetdash.notifications.policy import NotificationRefreshPolicy, merge_seed, should_reseed


def test_should_reseed() -> None:
    for policy in NotificationRefreshPolicy:
        assert should_reseed(policy, seeded=False) is True
    assert should_reseed(NotificationRefreshPolicy.KEEP, seeded=True) is False
    assert should_reseed(NotificationRefreshPolicy.REPLACE, seeded=True) is True
    assert should_reseed(NotificationRefreshPolicy.MERGE, seeded=True) is True


def test_merge_seed_orders_user_entries_first_and_skips_dismissed() -> None:
    current = [
        Notification(id=1, message="mine", time="Just now", origin=NotificationOrigin.USER),
        Notification(id="booking-a", message="a", time="Today", read=True),
    ]
    seed = [
        Notification(id="booking-b", message="b", time="Today"),
        Notification(id="booking-a", message="a", time="Today"),
        Notification(id="low-availability", message="low", time="Today"),
    ]

    merged = merge_seed(current, seed, dismissed={"low-availability"})

    assert [n.id for n in merged] == [1, "booking-b", "booking-a"]
    assert [n.read for n in merged] == [False, False, True]
