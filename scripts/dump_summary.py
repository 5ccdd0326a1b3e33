#!/usr/bin/env python3
"""Run one dashboard refresh and print everything it produced.

Reads from Firestore using the ``FLEETDASH_*`` environment variables, or
from a JSON fixture served by the in-memory store.

Usage
-----
Against Firestore::

    export FLEETDASH_PROJECT_ID="rental-prod"
    export FLEETDASH_API_KEY="..."
    python scripts/dump_summary.py

Against a fixture (``{"vehicles": [...], "users": [...], ...}``)::

    python scripts/dump_summary.py --fixture data.json --json

Options::

    --fixture FILE       Serve collections from FILE instead of Firestore
    --time-zone TZ       Override the display time zone
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetdash import DashboardConfig, FleetDashboard, InMemoryDocumentStore, describe_status  # noqa: E402
from fleetdash.exceptions import FleetDashError  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _load_fixture(path: str) -> InMemoryDocumentStore:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise SystemExit(f"{path}: expected an object mapping collection names to record lists")
    return InMemoryDocumentStore(data)


def _render_text(dashboard: FleetDashboard) -> list[str]:
    out: list[str] = []
    stats = dashboard.get_summary()
    out.append(_section("SUMMARY"))
    for key, value in stats.model_dump().items():
        out.append(f"  {key:<16}: {value}")

    out.append(_section("BOOKING STATUS (recent)"))
    for key, value in dashboard.get_booking_status_counts().model_dump().items():
        out.append(f"  {key:<16}: {value}")

    out.append(_section("RECENT BOOKINGS"))
    for booking in dashboard.get_recent_bookings():
        status = describe_status(booking.status)
        out.append(
            f"  {booking.id}: {booking.vehicle_brand or '-'} {booking.vehicle_model or ''} "
            f"by {booking.name or '-'} | {booking.start_date_formatted or '-'} → "
            f"{booking.end_date_formatted or '-'} | {booking.price_display} | {status.text} ({status.tone})"
        )

    out.append(_section("RECENT FEEDBACKS"))
    for feedback in dashboard.get_recent_feedbacks():
        out.append(f"  {feedback.id}: {feedback.created_at.isoformat() if feedback.created_at else '-'}")

    out.append(_section(f"NOTIFICATIONS (unread {dashboard.unread_count()})"))
    for notification in dashboard.get_notifications():
        marker = " " if notification.read else "*"
        out.append(f"  {marker} [{notification.category}] {notification.message} ({notification.time})")
    return out


def _as_json(dashboard: FleetDashboard) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(UTC).isoformat(),
        "summary": dashboard.get_summary().model_dump(by_alias=True),
        "bookingStatus": dashboard.get_booking_status_counts().model_dump(),
        "recentBookings": [b.model_dump(exclude={"raw"}) for b in dashboard.get_recent_bookings()],
        "recentFeedbacks": [f.raw for f in dashboard.get_recent_feedbacks()],
        "notifications": [n.model_dump() for n in dashboard.get_notifications()],
        "unreadCount": dashboard.unread_count(),
    }


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(description="Dump one fleetdash refresh cycle")
    parser.add_argument("--fixture", help="JSON file with collections for the in-memory store")
    parser.add_argument("--time-zone", help="IANA time zone for display dates")
    parser.add_argument("--json", dest="json_mode", action="store_true", help="Output as JSON")
    parser.add_argument("--output", "-o", help="Write output to file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.time_zone:
        overrides["time_zone"] = args.time_zone
    config = DashboardConfig.from_env(**overrides)
    store = _load_fixture(args.fixture) if args.fixture else None

    try:
        async with FleetDashboard(config, store=store) as dashboard:
            await dashboard.refresh()
    except FleetDashError as exc:
        print(f"refresh failed: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.json_mode:
        payload = json.dumps(_as_json(dashboard), indent=2, default=str, ensure_ascii=False)
    else:
        payload = "\n".join(_render_text(dashboard))

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)


if __name__ == "__main__":
    asyncio.run(main())
