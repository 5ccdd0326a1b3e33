"""Dashboard configuration for fleetdash."""

from __future__ import annotations

import dataclasses
import os
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fleetdash._constants import DEFAULT_DATABASE, FIRESTORE_BASE_URL
from fleetdash.exceptions import DashboardConfigError
from fleetdash.notifications.policy import NotificationRefreshPolicy


_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})
_FALSY = frozenset({"0", "false", "no", "n", "off"})


def _env_bool(value: str | None, default: bool) -> bool:
    """Interpret a flag variable; unset or unrecognized values keep *default*."""
    flag = (value or "").strip().lower()
    if flag in _TRUTHY:
        return True
    if flag in _FALSY:
        return False
    return default


def _env_number(env_key: str, value: str, kind: type[int] | type[float]) -> int | float:
    try:
        return kind(value)
    except ValueError as exc:
        raise DashboardConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class DashboardConfig:
    """Dashboard configuration.

    Parameters
    ----------
    project_id : str
        Firestore project hosting the rental collections.  Only required
        by the REST store adapter.
    database : str
        Firestore database id.
    base_url : str
        Firestore REST endpoint.  Point it at an emulator for local runs.
    api_key : str or None
        Web API key appended to REST queries.
    access_token : str or None
        OAuth bearer token sent with REST queries.  Takes precedence over
        ``api_key`` when both are set.
    time_zone : str
        IANA time zone used for display dates and notification labels.
    recent_bookings_limit : int
        Size of the most-recent bookings window.
    recent_feedbacks_limit : int
        Size of the most-recent feedbacks window.
    booking_notification_limit : int
        How many recent bookings produce a notification.
    low_availability_threshold : int
        A warning is synthesized while fewer vehicles than this are available.
    query_timeout : float or None
        Seconds allowed per store read.  ``None`` waits indefinitely.
    notification_refresh : NotificationRefreshPolicy
        How a refresh cycle treats an already seeded notification feed.
    query_trace_enabled : bool
        Log redacted store responses at DEBUG level.
    """

    project_id: str = ""
    database: str = DEFAULT_DATABASE
    base_url: str = FIRESTORE_BASE_URL
    api_key: str | None = None
    access_token: str | None = None
    time_zone: str = "UTC"
    recent_bookings_limit: int = 5
    recent_feedbacks_limit: int = 3
    booking_notification_limit: int = 3
    low_availability_threshold: int = 3
    query_timeout: float | None = None
    notification_refresh: NotificationRefreshPolicy = NotificationRefreshPolicy.KEEP
    query_trace_enabled: bool = False

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise DashboardConfigError(f"Unknown time zone: {self.time_zone!r}") from exc
        for name in ("recent_bookings_limit", "recent_feedbacks_limit"):
            if getattr(self, name) < 1:
                raise DashboardConfigError(f"{name} must be at least 1")
        if self.booking_notification_limit < 0:
            raise DashboardConfigError("booking_notification_limit must not be negative")
        if self.query_timeout is not None and self.query_timeout <= 0:
            raise DashboardConfigError("query_timeout must be positive")
        if not isinstance(self.notification_refresh, NotificationRefreshPolicy):
            try:
                policy = NotificationRefreshPolicy(self.notification_refresh)
            except ValueError as exc:
                raise DashboardConfigError(f"Unknown notification refresh policy: {self.notification_refresh!r}") from exc
            object.__setattr__(self, "notification_refresh", policy)

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.time_zone)

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        """Create configuration from environment variables.

        Reads the optional ``FLEETDASH_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        DashboardConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FLEETDASH_PROJECT_ID": "project_id",
            "FLEETDASH_DATABASE": "database",
            "FLEETDASH_BASE_URL": "base_url",
            "FLEETDASH_API_KEY": "api_key",
            "FLEETDASH_ACCESS_TOKEN": "access_token",
            "FLEETDASH_TIME_ZONE": "time_zone",
            "FLEETDASH_NOTIFICATION_REFRESH": "notification_refresh",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_INT_MAP = {
            "FLEETDASH_RECENT_BOOKINGS_LIMIT": "recent_bookings_limit",
            "FLEETDASH_RECENT_FEEDBACKS_LIMIT": "recent_feedbacks_limit",
            "FLEETDASH_BOOKING_NOTIFICATION_LIMIT": "booking_notification_limit",
            "FLEETDASH_LOW_AVAILABILITY_THRESHOLD": "low_availability_threshold",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, int)

        timeout_env = env.get("FLEETDASH_QUERY_TIMEOUT")
        if timeout_env is not None and "query_timeout" not in overrides:
            config_kwargs["query_timeout"] = _env_number("FLEETDASH_QUERY_TIMEOUT", timeout_env, float)

        if "query_trace_enabled" not in overrides:
            config_kwargs["query_trace_enabled"] = _env_bool(
                env.get("FLEETDASH_QUERY_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
