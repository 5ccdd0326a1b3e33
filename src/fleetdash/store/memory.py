"""In-memory document store.

Backs tests, demos and the developer scripts.  Query semantics follow the
hosted store: equality filters, documents lacking the sort field are
excluded from sorted reads, and a missing collection is an error.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from fleetdash.exceptions import CollectionNotFoundError
from fleetdash.ingestion.normalize import parse_instant
from fleetdash.store.base import CollectionQuery, FieldFilter, SortDirection, SortSpec

_logger = logging.getLogger(__name__)


def _sort_key(value: Any) -> tuple[int, Any]:
    """Order values by type rank first so mixed-type fields still sort."""
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, (int, float)):
        return (2, float(value))
    if isinstance(value, (datetime, Mapping)):
        instant = parse_instant(value)
        if instant is not None:
            return (3, instant.timestamp())
        return (5, repr(value))
    if isinstance(value, str):
        return (4, value)
    return (5, repr(value))


class InMemoryDocumentStore:
    """Dict-of-lists store keyed by collection name."""

    def __init__(self, collections: Mapping[str, Sequence[Mapping[str, Any]]] | None = None) -> None:
        self._collections: dict[str, list[dict[str, Any]]] = {}
        for name, records in (collections or {}).items():
            for record in records:
                self.add(name, record)

    def add(self, collection: str, record: Mapping[str, Any]) -> str:
        """Insert *record* and return its id (generated when absent)."""
        records = self._collections.setdefault(collection, [])
        doc = copy.deepcopy(dict(record))
        if doc.get("id") is None or doc["id"] == "":
            taken = {existing["id"] for existing in records}
            sequence = len(records) + 1
            while f"{collection}-{sequence}" in taken:
                sequence += 1
            doc_id = f"{collection}-{sequence}"
        else:
            doc_id = str(doc["id"])
        doc["id"] = doc_id
        records.append(doc)
        return doc_id

    def create_collection(self, collection: str) -> None:
        self._collections.setdefault(collection, [])

    def drop_collection(self, collection: str) -> None:
        self._collections.pop(collection, None)

    @property
    def collections(self) -> list[str]:
        return sorted(self._collections)

    async def query(
        self,
        collection: str,
        *,
        filters: Sequence[FieldFilter | tuple[str, Any] | tuple[str, str, Any]] = (),
        sort_by: SortSpec | tuple[str, SortDirection | str] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        request = CollectionQuery.build(collection, filters=filters, sort_by=sort_by, limit=limit)
        return self.execute(request)

    def execute(self, request: CollectionQuery) -> list[dict[str, Any]]:
        records = self._collections.get(request.collection)
        if records is None:
            raise CollectionNotFoundError(
                f"Collection {request.collection!r} does not exist",
                collection=request.collection,
            )

        matched = [
            record
            for record in records
            if all(f.field in record and record[f.field] == f.value for f in request.filters)
        ]

        if request.sort_by is not None:
            field_name = request.sort_by.field
            matched = [record for record in matched if record.get(field_name) is not None]
            matched.sort(
                key=lambda record: _sort_key(record[field_name]),
                reverse=request.sort_by.direction == SortDirection.DESCENDING,
            )

        if request.limit is not None:
            matched = matched[: request.limit]

        _logger.debug("Query %s matched %d record(s)", request.collection, len(matched))
        return copy.deepcopy(matched)
