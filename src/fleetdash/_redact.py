"""Redaction for debug logging.

Booking and user documents carry customer contact details, and the REST
adapter holds credentials.  Everything logged from a store response goes
through :func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

REDACTED = "<redacted>"

# Compared after lower-casing and dropping ``_``/``-`` separators.
_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "accesstoken",
        "refreshtoken",
        "idtoken",
        "apikey",
        "key",
        "authorization",
        "cookie",
        "email",
        "customeremail",
        "phone",
        "phonenumber",
        "address",
        "licensenumber",
    }
)

_MAX_DEPTH = 20


def _is_sensitive(key: Any) -> bool:
    folded = str(key).lower().replace("_", "").replace("-", "")
    return folded in _SENSITIVE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* with sensitive fields masked and long strings cut."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, Mapping):
        return {
            str(k): REDACTED if _is_sensitive(k) else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }
    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return repr(value)


def summarize_records(records: Sequence[Mapping[str, Any]], *, max_records: int = 3) -> dict[str, Any]:
    """Compact, redacted view of a query result for trace logging."""
    return {
        "count": len(records),
        "sample": [redact_for_log(record) for record in records[:max_records]],
    }
