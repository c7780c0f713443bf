"""Timeline entries for the status and preview consumers."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .constants import DEFAULT_PREVIEW_LIMIT, TIMELINE_REFRESH_DELAY_MINUTES
from .projection import PreviewRow, compute_display_progress, compute_done_total, compute_preview_rows
from .snapshot import HabitWidgetSnapshot
from .time_utils import Calendar


@dataclass(frozen=True)
class StatusEntry:
    date: datetime
    done: int
    total: int
    remaining: int
    refresh_at: datetime


@dataclass(frozen=True)
class PreviewEntry:
    date: datetime
    done: int
    total: int
    refresh_at: datetime
    rows: list[PreviewRow] = field(default_factory=list)


def next_refresh_time(now: datetime, calendar: Calendar) -> datetime:
    """Shortly after the next local midnight, when the daily projection flips."""
    start_of_tomorrow = calendar.add_days(calendar.start_of_day(now), 1)
    return start_of_tomorrow + timedelta(minutes=TIMELINE_REFRESH_DELAY_MINUTES)


def build_status_entry(
    snapshot: HabitWidgetSnapshot | None,
    now: datetime,
    calendar: Calendar,
) -> StatusEntry:
    progress = compute_display_progress(snapshot, now, calendar)
    return StatusEntry(
        date=now,
        done=progress.done,
        total=progress.total,
        remaining=progress.remaining,
        refresh_at=next_refresh_time(now, calendar),
    )


def build_preview_entry(
    snapshot: HabitWidgetSnapshot | None,
    now: datetime,
    calendar: Calendar,
    limit: int = DEFAULT_PREVIEW_LIMIT,
) -> PreviewEntry:
    done, total = compute_done_total(snapshot, now, calendar)
    return PreviewEntry(
        date=now,
        done=done,
        total=total,
        refresh_at=next_refresh_time(now, calendar),
        rows=compute_preview_rows(snapshot, now, calendar, limit),
    )
