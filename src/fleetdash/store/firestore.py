"""Firestore REST store adapter.

Runs collection queries through the ``documents:runQuery`` endpoint and
decodes Firestore's typed value encoding into plain Python values.
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

import aiohttp

from fleetdash._constants import USER_AGENT
from fleetdash._redact import summarize_records
from fleetdash.config import DashboardConfig
from fleetdash.exceptions import CollectionNotFoundError, DashboardConfigError, DataSourceError
from fleetdash.ingestion.normalize import parse_instant
from fleetdash.store.base import CollectionQuery, FieldFilter, SortDirection, SortSpec

_logger = logging.getLogger(__name__)

_DIRECTIONS: dict[SortDirection, str] = {
    SortDirection.ASCENDING: "ASCENDING",
    SortDirection.DESCENDING: "DESCENDING",
}


# ------------------------------------------------------------------
# Value codec
# ------------------------------------------------------------------


def encode_value(value: Any) -> dict[str, Any]:
    """Encode a filter value as a Firestore ``Value``."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, datetime):
        aware = value if value.tzinfo is not None else value.replace(tzinfo=UTC)
        return {"timestampValue": aware.astimezone(UTC).isoformat().replace("+00:00", "Z")}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": {str(k): encode_value(v) for k, v in value.items()}}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    return {"stringValue": str(value)}


def decode_value(value: Mapping[str, Any]) -> Any:
    """Decode a Firestore ``Value`` into a plain Python value.

    Timestamps become aware UTC datetimes, maps become dicts, arrays become
    lists.  Unknown encodings decode to ``None``.
    """
    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "nullValue" in value:
        return None
    if "timestampValue" in value:
        return parse_instant(value["timestampValue"])
    if "mapValue" in value:
        fields = value["mapValue"].get("fields") or {}
        return {key: decode_value(inner) for key, inner in fields.items()}
    if "arrayValue" in value:
        return [decode_value(inner) for inner in value["arrayValue"].get("values") or []]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "geoPointValue" in value:
        point = value["geoPointValue"]
        return {"latitude": point.get("latitude", 0.0), "longitude": point.get("longitude", 0.0)}
    if "bytesValue" in value:
        return base64.b64decode(value["bytesValue"])
    return None


def decode_document(document: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten a Firestore ``Document`` into a record dict carrying ``id``."""
    fields = document.get("fields") or {}
    record = {key: decode_value(inner) for key, inner in fields.items()}
    name = str(document.get("name", ""))
    record["id"] = name.rsplit("/", 1)[-1]
    return record


def _encode_filter(item: FieldFilter) -> dict[str, Any]:
    return {
        "fieldFilter": {
            "field": {"fieldPath": item.field},
            "op": "EQUAL",
            "value": encode_value(item.value),
        }
    }


def build_structured_query(request: CollectionQuery) -> dict[str, Any]:
    """Translate a :class:`CollectionQuery` into a ``StructuredQuery`` body."""
    structured: dict[str, Any] = {"from": [{"collectionId": request.collection}]}

    if len(request.filters) == 1:
        structured["where"] = _encode_filter(request.filters[0])
    elif request.filters:
        structured["where"] = {
            "compositeFilter": {
                "op": "AND",
                "filters": [_encode_filter(item) for item in request.filters],
            }
        }

    if request.sort_by is not None:
        structured["orderBy"] = [
            {
                "field": {"fieldPath": request.sort_by.field},
                "direction": _DIRECTIONS[request.sort_by.direction],
            }
        ]

    if request.limit is not None:
        structured["limit"] = request.limit

    return structured


# ------------------------------------------------------------------
# Store
# ------------------------------------------------------------------


class FirestoreRestStore:
    """Document store backed by the Firestore REST API."""

    def __init__(self, config: DashboardConfig, http_session: aiohttp.ClientSession) -> None:
        if not config.project_id:
            raise DashboardConfigError("project_id is required for the Firestore store")
        self._config = config
        self._http = http_session

    @property
    def documents_url(self) -> str:
        base = self._config.base_url.rstrip("/")
        return f"{base}/v1/projects/{self._config.project_id}/databases/{self._config.database}/documents"

    def _build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        if self._config.access_token:
            headers["authorization"] = f"Bearer {self._config.access_token}"
        return headers

    def _build_params(self) -> dict[str, str]:
        if self._config.api_key and not self._config.access_token:
            return {"key": self._config.api_key}
        return {}

    async def query(
        self,
        collection: str,
        *,
        filters: Sequence[FieldFilter | tuple[str, Any] | tuple[str, str, Any]] = (),
        sort_by: SortSpec | tuple[str, SortDirection | str] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        request = CollectionQuery.build(collection, filters=filters, sort_by=sort_by, limit=limit)
        return await self.execute(request)

    async def execute(self, request: CollectionQuery) -> list[dict[str, Any]]:
        """POST a ``runQuery`` request and decode the returned documents."""
        collection = request.collection
        url = f"{self.documents_url}:runQuery"
        body = json.dumps({"structuredQuery": build_structured_query(request)})

        _logger.debug("POST %s collection=%s", url, collection)

        try:
            async with self._http.post(
                url,
                data=body,
                headers=self._build_headers(),
                params=self._build_params(),
            ) as resp:
                text = await resp.text()
                if resp.status == 404:
                    raise CollectionNotFoundError(
                        f"Collection {collection!r} not found: {text[:200]}",
                        collection=collection,
                        status_code=resp.status,
                    )
                if resp.status != 200:
                    raise DataSourceError(
                        f"HTTP {resp.status} querying {collection!r}: {text[:200]}",
                        collection=collection,
                        status_code=resp.status,
                    )
        except DataSourceError:
            raise
        except aiohttp.ClientError as exc:
            raise DataSourceError(
                f"Query on {collection!r} failed: {exc}",
                collection=collection,
            ) from exc

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DataSourceError(
                f"Invalid JSON querying {collection!r}: {text[:200]}",
                collection=collection,
            ) from exc

        if not isinstance(payload, list):
            raise DataSourceError(
                f"Unexpected runQuery response for {collection!r}: expected a list",
                collection=collection,
            )

        records: list[dict[str, Any]] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            document = item.get("document")
            if not isinstance(document, dict):
                continue
            try:
                records.append(decode_document(document))
            except (TypeError, ValueError, AttributeError) as exc:
                raise DataSourceError(
                    f"Undecodable document in {collection!r}: {document.get('name', '?')}",
                    collection=collection,
                ) from exc

        if self._config.query_trace_enabled:
            _logger.debug("Query %s result %s", collection, summarize_records(records))
        return records
