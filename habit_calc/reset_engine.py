"""Daily and weekly reset pass over live habit, pet and app state."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from .boundaries import project_resets
from .constants import DAILY_DECAY
from .models import AppState, Habit, Pet
from .reward_engine import clamp
from .time_utils import Calendar, get_current_time


@dataclass(frozen=True)
class ResetOutcome:
    daily_reset: bool = False
    weekly_reset: bool = False
    day_diff: int = 0
    had_completion_yesterday: bool = False


def apply_daily_decay(pet: Pet) -> Pet:
    """Daily stat decay; stats floor at 0."""
    pet.hunger = clamp(pet.hunger - DAILY_DECAY["hunger"])
    pet.cleanliness = clamp(pet.cleanliness - DAILY_DECAY["cleanliness"])
    pet.energy = clamp(pet.energy - DAILY_DECAY["energy"])
    return pet


def had_completion_on(habits: Iterable[Habit], day: datetime, calendar: Calendar) -> bool:
    return any(
        habit.last_completed_date is not None and calendar.is_same_day(habit.last_completed_date, day)
        for habit in habits
    )


def next_streak(current_streak: int, day_diff: int, had_completion_yesterday: bool) -> int:
    """
    Streak after crossing `day_diff` day boundaries.

    A single boundary keeps the streak alive only if yesterday had a
    completion. Skipping a whole day always breaks it.
    """
    if day_diff == 1:
        return current_streak + 1 if had_completion_yesterday else 0
    if day_diff > 1:
        return 0
    return current_streak


def run_resets(
    app_state: AppState | None,
    habits: list[Habit],
    pet: Pet | None,
    *,
    now: datetime | None = None,
    calendar: Calendar | None = None,
) -> ResetOutcome:
    """
    Apply any daily and weekly resets due at `now`.

    Safe to call on every resume: once a boundary has been handled the stored
    reset timestamps move forward and a second call is a no-op. Missing app
    state or pet means the app is not initialized yet, so nothing happens.
    """
    if app_state is None or pet is None:
        return ResetOutcome()

    now = now or get_current_time()
    calendar = calendar or Calendar.from_env()
    projection = project_resets(calendar, app_state.last_daily_reset, app_state.last_weekly_reset, now)

    day_diff = 0
    had_completion_yesterday = False
    if projection.daily:
        start_of_today = calendar.start_of_day(now)
        day_diff = calendar.day_diff(calendar.start_of_day(app_state.last_daily_reset), start_of_today)
        yesterday = calendar.add_days(start_of_today, -1)
        had_completion_yesterday = had_completion_on(habits, yesterday, calendar)

        app_state.current_streak = next_streak(app_state.current_streak, day_diff, had_completion_yesterday)
        for habit in habits:
            habit.completed_count_today = 0
        apply_daily_decay(pet)
        app_state.last_daily_reset = start_of_today

    if projection.weekly:
        for habit in habits:
            habit.completed_this_week = 0
        app_state.last_weekly_reset = calendar.start_of_week(now)

    return ResetOutcome(
        daily_reset=projection.daily,
        weekly_reset=projection.weekly,
        day_diff=day_diff,
        had_completion_yesterday=had_completion_yesterday,
    )
