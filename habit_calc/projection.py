"""
Read-only progress projection over a habit snapshot.

Consumers of the snapshot cannot run the reset pass. Instead they ask the
shared boundary predicate whether a reset would fire at `now` and read the
affected counters as zero. Nothing here mutates the snapshot.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from .boundaries import ResetProjection, project_resets
from .models import normalized_title, target_for_schedule
from .snapshot import HabitRecord, HabitWidgetSnapshot
from .time_utils import Calendar

DISTANT_PAST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class DisplayProgress:
    done: int = 0
    total: int = 0
    remaining: int = 0


@dataclass(frozen=True)
class PreviewRow:
    id: str
    title: str
    progress: int
    target: int
    is_done: bool


def make_projection(snapshot: HabitWidgetSnapshot, now: datetime, calendar: Calendar) -> ResetProjection:
    return project_resets(calendar, snapshot.last_daily_reset, snapshot.last_weekly_reset, now)


def target_for_record(record: HabitRecord) -> int:
    return target_for_schedule(record.schedule, record.target_per_day, record.target_per_week)


def effective_progress(record: HabitRecord, projection: ResetProjection) -> int:
    if record.schedule.is_weekly_counter:
        return 0 if projection.weekly else record.completed_this_week
    return 0 if projection.daily else record.completed_count_today


def is_record_done(record: HabitRecord, projection: ResetProjection) -> bool:
    return effective_progress(record, projection) >= target_for_record(record)


def compute_display_progress(
    snapshot: HabitWidgetSnapshot | None,
    now: datetime,
    calendar: Calendar,
) -> DisplayProgress:
    if snapshot is None:
        return DisplayProgress()

    projection = make_projection(snapshot, now, calendar)
    done = sum(1 for record in snapshot.habits if is_record_done(record, projection))
    total = len(snapshot.habits)
    return DisplayProgress(done=done, total=total, remaining=max(0, total - done))


def compute_done_total(
    snapshot: HabitWidgetSnapshot | None,
    now: datetime,
    calendar: Calendar,
) -> tuple[int, int]:
    progress = compute_display_progress(snapshot, now, calendar)
    return progress.done, progress.total


def compute_preview_rows(
    snapshot: HabitWidgetSnapshot | None,
    now: datetime,
    calendar: Calendar,
    limit: int,
) -> list[PreviewRow]:
    """
    Build the ordered preview list.

    Incomplete habits come first, then older habits, with the id as the
    final tie-break so the order is stable across refreshes.
    """
    effective_limit = max(0, limit)
    if effective_limit == 0 or snapshot is None:
        return []

    projection = make_projection(snapshot, now, calendar)
    keyed_rows = []
    for record in snapshot.habits:
        target = target_for_record(record)
        progress = effective_progress(record, projection)
        row = PreviewRow(
            id=record.id,
            title=normalized_title(record.title),
            progress=progress,
            target=target,
            is_done=progress >= target,
        )
        keyed_rows.append(((row.is_done, record.created_at or DISTANT_PAST, record.id), row))

    keyed_rows.sort(key=lambda item: item[0])
    return [row for _, row in keyed_rows[:effective_limit]]
