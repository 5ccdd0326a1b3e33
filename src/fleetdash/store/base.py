"""Document store query capability.

The dashboard only consumes a narrow query surface: pick a collection,
apply equality filters, sort by one field, cap the result count.  Store
adapters validate the arguments into a :class:`CollectionQuery` before
executing it.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SortDirection(StrEnum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class FieldFilter(BaseModel):
    """Equality filter on a single field."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    field: str
    op: Literal["=="] = "=="
    value: Any

    @field_validator("field")
    @classmethod
    def _field_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("filter field must be non-empty")
        return value

    @field_validator("op", mode="before")
    @classmethod
    def _normalize_op(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() in {"=", "=="}:
            return "=="
        return value


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    field: str
    direction: SortDirection = SortDirection.ASCENDING

    @field_validator("field")
    @classmethod
    def _field_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("sort field must be non-empty")
        return value


class CollectionQuery(BaseModel):
    """A validated read against one collection."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    collection: str
    filters: tuple[FieldFilter, ...] = ()
    sort_by: SortSpec | None = None
    limit: int | None = Field(default=None, ge=1)

    @field_validator("collection")
    @classmethod
    def _collection_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("collection must be non-empty")
        return value

    @classmethod
    def build(
        cls,
        collection: str,
        *,
        filters: Sequence[FieldFilter | tuple[str, Any] | tuple[str, str, Any]] = (),
        sort_by: SortSpec | tuple[str, SortDirection | str] | None = None,
        limit: int | None = None,
    ) -> CollectionQuery:
        """Build a query from the loose argument forms accepted by :class:`DocumentStore`."""
        normalized: list[FieldFilter] = []
        for item in filters:
            if isinstance(item, FieldFilter):
                normalized.append(item)
            elif len(item) == 2:
                normalized.append(FieldFilter(field=item[0], value=item[1]))
            else:
                normalized.append(FieldFilter(field=item[0], op=item[1], value=item[2]))

        sort: SortSpec | None
        if sort_by is None or isinstance(sort_by, SortSpec):
            sort = sort_by
        else:
            sort = SortSpec(field=sort_by[0], direction=SortDirection(sort_by[1]))

        return cls(collection=collection, filters=tuple(normalized), sort_by=sort, limit=limit)


class DocumentStore(Protocol):
    """Structural store interface consumed by the query orchestrator.

    Implementations return full records as plain dicts that carry the
    document ``id``, and raise :class:`fleetdash.exceptions.DataSourceError`
    (or :class:`fleetdash.exceptions.CollectionNotFoundError`) on failure.
    """

    async def query(
        self,
        collection: str,
        *,
        filters: Sequence[FieldFilter | tuple[str, Any] | tuple[str, str, Any]] = (),
        sort_by: SortSpec | tuple[str, SortDirection | str] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        ...
