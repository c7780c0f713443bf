"""Point-in-time habit snapshot handed to read-only consumers."""

import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from .models import ScheduleKind
from .time_utils import parse_iso_datetime, to_iso8601

EARLIEST_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc) + timedelta(days=2)
LATEST_TIMESTAMP = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=2)


class SnapshotDecodeError(ValueError):
    """Raised when a stored snapshot payload cannot be decoded."""


def _as_utc(dt: datetime | None) -> datetime | None:
    """Naive values are read as UTC, matching how they are encoded."""
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class HabitRecord:
    id: str
    schedule: ScheduleKind
    completed_count_today: int = 0
    completed_this_week: int = 0
    title: str | None = None
    created_at: datetime | None = None
    target_per_day: int | None = None
    target_per_week: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "created_at", _as_utc(self.created_at))


@dataclass(frozen=True)
class HabitWidgetSnapshot:
    generated_at: datetime
    last_daily_reset: datetime
    last_weekly_reset: datetime
    habits: tuple[HabitRecord, ...] = ()

    def __post_init__(self):
        for name in ("generated_at", "last_daily_reset", "last_weekly_reset"):
            object.__setattr__(self, name, _as_utc(getattr(self, name)))
        object.__setattr__(self, "habits", tuple(self.habits))


def _record_to_dict(record: HabitRecord) -> dict:
    data = {
        "id": record.id,
        "schedule": record.schedule.value,
        "completedCountToday": record.completed_count_today,
        "completedThisWeek": record.completed_this_week,
    }
    optional = {
        "title": record.title,
        "createdAt": to_iso8601(record.created_at),
        "targetPerDay": record.target_per_day,
        "targetPerWeek": record.target_per_week,
    }
    data.update({key: value for key, value in optional.items() if value is not None})
    return data


def snapshot_to_dict(snapshot: HabitWidgetSnapshot) -> dict:
    return {
        "generatedAt": to_iso8601(snapshot.generated_at),
        "lastDailyReset": to_iso8601(snapshot.last_daily_reset),
        "lastWeeklyReset": to_iso8601(snapshot.last_weekly_reset),
        "habits": [_record_to_dict(record) for record in snapshot.habits],
    }


def _require_timestamp(data: dict, key: str) -> datetime:
    parsed = parse_iso_datetime(data.get(key))
    if parsed is None:
        raise SnapshotDecodeError(f"missing or invalid timestamp: {key}")
    # Any local-zone shift of these would leave the representable range.
    if not EARLIEST_TIMESTAMP <= parsed <= LATEST_TIMESTAMP:
        raise SnapshotDecodeError(f"timestamp out of range: {key}")
    return parsed


def _optional_timestamp(data: dict, key: str) -> datetime | None:
    raw = data.get(key)
    if raw is None:
        return None
    return _require_timestamp(data, key)


def _require_int(data: dict, key: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotDecodeError(f"expected integer for {key}")
    return value


def _optional_int(data: dict, key: str) -> int | None:
    if data.get(key) is None:
        return None
    return _require_int(data, key)


def _record_from_dict(data: Any) -> HabitRecord:
    if not isinstance(data, dict):
        raise SnapshotDecodeError("habit record must be an object")
    habit_id = data.get("id")
    if not isinstance(habit_id, str) or not habit_id:
        raise SnapshotDecodeError("habit record is missing an id")
    try:
        schedule = ScheduleKind(data.get("schedule"))
    except ValueError as e:
        raise SnapshotDecodeError(f"unknown schedule: {data.get('schedule')!r}") from e
    title = data.get("title")
    if title is not None and not isinstance(title, str):
        raise SnapshotDecodeError("habit title must be a string")

    return HabitRecord(
        id=habit_id,
        schedule=schedule,
        completed_count_today=_require_int(data, "completedCountToday"),
        completed_this_week=_require_int(data, "completedThisWeek"),
        title=title,
        created_at=_optional_timestamp(data, "createdAt"),
        target_per_day=_optional_int(data, "targetPerDay"),
        target_per_week=_optional_int(data, "targetPerWeek"),
    )


def snapshot_from_dict(data: Any) -> HabitWidgetSnapshot:
    if not isinstance(data, dict):
        raise SnapshotDecodeError("snapshot must be an object")
    habits = data.get("habits")
    if not isinstance(habits, list):
        raise SnapshotDecodeError("snapshot habits must be a list")

    return HabitWidgetSnapshot(
        generated_at=_require_timestamp(data, "generatedAt"),
        last_daily_reset=_require_timestamp(data, "lastDailyReset"),
        last_weekly_reset=_require_timestamp(data, "lastWeeklyReset"),
        habits=tuple(_record_from_dict(record) for record in habits),
    )


def encode_snapshot(snapshot: HabitWidgetSnapshot) -> bytes:
    return json.dumps(snapshot_to_dict(snapshot), sort_keys=True).encode("utf-8")


def decode_snapshot(payload: bytes | str) -> HabitWidgetSnapshot:
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError, RecursionError) as e:
        raise SnapshotDecodeError(f"snapshot is not valid JSON: {e}") from e
    return snapshot_from_dict(data)
