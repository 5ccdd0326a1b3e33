from __future__ import annotations

import pytest

from fleetdash.status import StatusCategory, StatusTone, classify, describe_status


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("confirmed", "Active"),
        ("Confirmed", "Active"),
        ("ACTIVE", "Active"),
        ("completed", "Completed"),
        ("Cancelled", "Cancelled"),
        ("pending", "Pending"),
    ],
)
def test_classify_known_statuses_case_insensitive(raw: str, expected: str) -> None:
    assert classify(raw) == expected


def test_classify_passes_unknown_values_through() -> None:
    assert classify("On Hold") == "On Hold"


@pytest.mark.parametrize("raw", [None, ""])
def test_classify_missing_status_is_unknown(raw: str | None) -> None:
    assert classify(raw) == "Unknown"


def test_describe_status_tones() -> None:
    assert describe_status("confirmed").tone == StatusTone.SUCCESS
    assert describe_status("completed").tone == StatusTone.INFO
    assert describe_status("cancelled").tone == StatusTone.DANGER
    assert describe_status("pending").tone == StatusTone.WARNING

    other = describe_status("waitlisted")
    assert other.category == StatusCategory.OTHER
    assert other.tone == StatusTone.NEUTRAL
    assert describe_status(None).category == StatusCategory.UNKNOWN
