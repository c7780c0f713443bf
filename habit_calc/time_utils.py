"""Time, calendar and primitive conversion helpers for habit state calculation."""

import os
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .constants import DEFAULT_TIMEZONE, DEFAULT_WEEK_START

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO string (UTC, microsecond precision) if present."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def get_current_time() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def get_timezone_name() -> str:
    """Resolve configured timezone name with validation and fallback."""
    candidate = os.environ.get("HABITPET_TIMEZONE", DEFAULT_TIMEZONE)
    try:
        get_zone(candidate)
        return candidate
    except (ZoneInfoNotFoundError, ValueError):
        return DEFAULT_TIMEZONE


def get_week_start() -> int:
    """Resolve configured first weekday (0=Monday) with fallback."""
    candidate = os.environ.get("HABITPET_WEEK_START", DEFAULT_WEEK_START).strip().lower()
    if candidate not in WEEKDAY_NAMES:
        candidate = DEFAULT_WEEK_START
    return WEEKDAY_NAMES.index(candidate)


def get_zone(timezone_name: str) -> tzinfo:
    """Build a tzinfo for a zone name; UTC does not need the tz database."""
    if timezone_name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(timezone_name)


def to_local_time(dt: datetime, timezone_name: str | None = None) -> datetime:
    """Convert a datetime to the configured local timezone."""
    zone_name = timezone_name or get_timezone_name()
    tz = get_zone(zone_name)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def parse_iso_datetime(value: str | None) -> datetime | None:
    """Parse ISO datetime string into timezone-aware UTC datetime."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def to_int(value: Any, default: int = 0) -> int:
    """Best-effort integer conversion with sane fallback."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Calendar:
    """
    Day and week boundary arithmetic in one local timezone.

    Every timestamp is compared on the local wall clock, so "same day" means
    the same local calendar date even when the UTC dates differ.
    """

    timezone_name: str = DEFAULT_TIMEZONE
    first_weekday: int = 0

    @classmethod
    def from_env(cls) -> "Calendar":
        return cls(timezone_name=get_timezone_name(), first_weekday=get_week_start())

    @property
    def zone(self) -> tzinfo:
        return get_zone(self.timezone_name)

    def local(self, dt: datetime) -> datetime:
        return to_local_time(dt, self.timezone_name)

    def start_of_day(self, dt: datetime) -> datetime:
        local_date = self.local(dt).date()
        return datetime.combine(local_date, time.min, tzinfo=self.zone)

    def start_of_week(self, dt: datetime) -> datetime:
        local_date = self.local(dt).date()
        offset = (local_date.weekday() - self.first_weekday) % 7
        return datetime.combine(local_date - timedelta(days=offset), time.min, tzinfo=self.zone)

    def add_days(self, dt: datetime, days: int) -> datetime:
        """Shift by whole local days, keeping the wall-clock time."""
        local_dt = self.local(dt)
        shifted = datetime.combine(local_dt.date() + timedelta(days=days), local_dt.timetz().replace(tzinfo=None))
        return shifted.replace(tzinfo=self.zone)

    def is_same_day(self, first: datetime, second: datetime) -> bool:
        return self.local(first).date() == self.local(second).date()

    def day_diff(self, earlier: datetime, later: datetime) -> int:
        """Whole calendar days from `earlier` to `later` (negative if reversed)."""
        return (self.local(later).date() - self.local(earlier).date()).days
