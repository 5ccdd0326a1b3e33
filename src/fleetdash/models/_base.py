"""Base model for store records.

Store documents are loosely typed: any field may be missing, blank or
filled with a placeholder, and older documents use legacy key names.
:class:`StoreRecordModel` absorbs that before field validation so every
subclass can declare plain optional fields with defaults.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from fleetdash.ingestion.normalize import parse_instant

# Values that mean "not filled in".
_PLACEHOLDERS = frozenset({"", "--", "NaN", "nan", "null", "undefined"})

StoreTimestamp = Annotated[datetime | None, BeforeValidator(parse_instant)]
"""Annotated type that coerces stored instants to aware UTC datetimes (``None`` when unparseable)."""


def _is_placeholder(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in _PLACEHOLDERS
    return isinstance(value, float) and math.isnan(value)


def _rename_legacy_keys(record: dict[str, Any], renames: dict[str, str]) -> dict[str, Any]:
    """Apply ``{"legacyKey": "currentKey"}`` renames; a present current key wins."""
    renamed = dict(record)
    for legacy, current in renames.items():
        if legacy in renamed and current not in renamed:
            renamed[current] = renamed.pop(legacy)
    return renamed


class StoreRecordModel(BaseModel):
    """Base for records read from the document store.

    * camelCase store keys populate snake_case fields (``to_camel`` aliases)
    * placeholder values are dropped so the field default applies
    * subclasses list legacy key names in ``_KEY_ALIASES``
    * the untouched document is kept in ``raw``
    * a non-string ``id`` is converted to ``str``
    """

    _KEY_ALIASES: ClassVar[dict[str, str]] = {}
    """Legacy store keys renamed before validation (``{"oldKey": "newKey"}``)."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str | None = None
    """Document identifier."""

    raw: dict[str, Any] = Field(default_factory=dict)
    """The document as read from the store."""

    @model_validator(mode="before")
    @classmethod
    def _prepare_document(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        renamed = _rename_legacy_keys(data, cls._KEY_ALIASES)
        prepared = {key: value for key, value in renamed.items() if not _is_placeholder(value)}
        prepared.setdefault("raw", dict(data))

        doc_id = prepared.get("id")
        if doc_id is not None and not isinstance(doc_id, str):
            prepared["id"] = str(doc_id)
        return prepared
