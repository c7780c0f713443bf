"""Publish the latest habit snapshot and signal read-only consumers."""

from datetime import datetime
from pathlib import Path

from .constants import HOME_SCREEN_WIDGET_KIND, LOCK_SCREEN_WIDGET_KIND
from .models import AppState, Habit
from .snapshot import HabitRecord, HabitWidgetSnapshot
from .snapshot_store import SnapshotStore
from .time_utils import get_current_time, to_iso8601

WIDGET_KINDS = (LOCK_SCREEN_WIDGET_KIND, HOME_SCREEN_WIDGET_KIND)


class TimelineReloader:
    def reload_timelines(self, kind: str) -> None:
        raise NotImplementedError


class NoopTimelineReloader(TimelineReloader):
    def reload_timelines(self, kind: str) -> None:
        return


class MarkerFileReloader(TimelineReloader):
    """Signals a consumer by rewriting `<kind>.reload` with the signal time."""

    def __init__(self, directory: Path | str, now=get_current_time) -> None:
        self.directory = Path(directory)
        self.now = now

    def reload_timelines(self, kind: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / f"{kind}.reload").write_text(to_iso8601(self.now()) + "\n", encoding="utf-8")


def habit_to_record(habit: Habit) -> HabitRecord:
    return HabitRecord(
        id=habit.id,
        title=habit.title,
        created_at=habit.created_at,
        schedule=habit.schedule.kind,
        target_per_day=habit.schedule.target_per_day,
        target_per_week=habit.schedule.target_per_week,
        completed_count_today=habit.completed_count_today,
        completed_this_week=habit.completed_this_week,
    )


def build_snapshot(app_state: AppState, habits: list[Habit], now: datetime) -> HabitWidgetSnapshot:
    ordered = sorted(habits, key=lambda habit: habit.created_at)
    return HabitWidgetSnapshot(
        generated_at=now,
        last_daily_reset=app_state.last_daily_reset,
        last_weekly_reset=app_state.last_weekly_reset,
        habits=tuple(habit_to_record(habit) for habit in ordered),
    )


def sync(
    app_state: AppState | None,
    habits: list[Habit],
    store: SnapshotStore,
    reloader: TimelineReloader | None = None,
    now: datetime | None = None,
) -> HabitWidgetSnapshot | None:
    """
    Write a fresh snapshot and ask both consumer channels to refresh.

    Call after any change that affects projected progress: a completion, or
    a habit being added, edited or deleted. Without app state there is
    nothing to publish yet.
    """
    if app_state is None:
        return None

    snapshot = build_snapshot(app_state, habits, now or get_current_time())
    store.save(snapshot)

    reloader = reloader or NoopTimelineReloader()
    for kind in WIDGET_KINDS:
        reloader.reload_timelines(kind)
    return snapshot
