from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from fleetdash.exceptions import CollectionNotFoundError, DataSourceError
from fleetdash.store.base import CollectionQuery, FieldFilter, SortDirection, SortSpec
from fleetdash.store.memory import InMemoryDocumentStore


def _store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(
        {
            "users": [
                {"id": "u1", "role": "owner", "name": "Ben"},
                {"id": "u2", "role": "customer", "name": "Ana"},
                {"id": "u3", "role": "customer", "name": "Cy"},
                {"id": "u4", "name": "No role"},
            ],
            "bookings": [
                {"id": "b1", "timestamp": datetime(2026, 1, 1, tzinfo=UTC)},
                {"id": "b2", "timestamp": datetime(2026, 1, 3, tzinfo=UTC)},
                {"id": "b3"},
                {"id": "b4", "timestamp": {"seconds": 1_767_312_000}},
            ],
        }
    )


@pytest.mark.asyncio
async def test_equality_filter() -> None:
    store = _store()
    customers = await store.query("users", filters=[("role", "==", "customer")])
    assert [r["id"] for r in customers] == ["u2", "u3"]

    owners = await store.query("users", filters=[FieldFilter(field="role", value="owner")])
    assert [r["id"] for r in owners] == ["u1"]


@pytest.mark.asyncio
async def test_sort_excludes_records_missing_field_and_applies_limit() -> None:
    store = _store()
    # 1_767_312_000 is 2026-01-02T00:00:00Z.
    ordered = await store.query("bookings", sort_by=("timestamp", "desc"))
    assert [r["id"] for r in ordered] == ["b2", "b4", "b1"]

    limited = await store.query("bookings", sort_by=("timestamp", SortDirection.DESCENDING), limit=2)
    assert [r["id"] for r in limited] == ["b2", "b4"]

    unsorted = await store.query("bookings")
    assert len(unsorted) == 4


@pytest.mark.asyncio
async def test_missing_collection_raises() -> None:
    store = _store()
    with pytest.raises(CollectionNotFoundError) as excinfo:
        await store.query("feedbacks")
    assert isinstance(excinfo.value, DataSourceError)
    assert excinfo.value.collection == "feedbacks"

    store.create_collection("feedbacks")
    assert await store.query("feedbacks") == []


@pytest.mark.asyncio
async def test_results_are_copies() -> None:
    store = _store()
    first = await store.query("users")
    first[0]["name"] = "mutated"
    second = await store.query("users")
    assert second[0]["name"] == "Ben"


def test_add_generates_ids() -> None:
    store = InMemoryDocumentStore()
    assert store.add("vehicles", {"brand": "Toyota"}) == "vehicles-1"
    assert store.add("vehicles", {"id": "custom", "brand": "Honda"}) == "custom"
    assert store.collections == ["vehicles"]
    store.drop_collection("vehicles")
    assert store.collections == []


def test_collection_query_validation() -> None:
    request = CollectionQuery.build("users", filters=[("role", "=", "owner")], sort_by=("name", "asc"), limit=1)
    assert request.filters[0].op == "=="
    assert request.sort_by == SortSpec(field="name", direction=SortDirection.ASCENDING)

    with pytest.raises(ValidationError):
        CollectionQuery.build("users", limit=0)
    with pytest.raises(ValidationError):
        CollectionQuery.build("")
    with pytest.raises(ValidationError):
        CollectionQuery.build("users", filters=[("role", ">", "owner")])


def test_generated_ids_skip_explicit_ones_and_keep_zero() -> None:
    store = InMemoryDocumentStore()
    assert store.add("vehicles", {"id": "vehicles-2", "brand": "Ford"}) == "vehicles-2"
    assert store.add("vehicles", {"brand": "Toyota"}) == "vehicles-3"
    assert store.add("vehicles", {"brand": "Honda"}) == "vehicles-4"
    assert store.add("vehicles", {"id": 0, "brand": "Kia"}) == "0"
