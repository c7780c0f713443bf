"""Habit completion, reward and streak-seed rules."""

from datetime import datetime

from .constants import HABIT_REWARD, STAT_MAX, STAT_MIN, XP_PER_LEVEL
from .models import AppState, Habit, Pet, ScheduleKind
from .time_utils import Calendar, get_current_time


def clamp(value: int, low: int = STAT_MIN, high: int = STAT_MAX) -> int:
    return max(low, min(high, value))


def level_for_xp(xp: int) -> int:
    """Every 100 XP is a level-up, starting at level 1."""
    return max(0, xp) // XP_PER_LEVEL + 1


def apply_reward(pet: Pet) -> Pet:
    """Apply the fixed completion bundle, clamping every stat."""
    pet.coins += HABIT_REWARD["coins"]
    pet.xp += HABIT_REWARD["xp"]
    pet.energy = clamp(pet.energy + HABIT_REWARD["energy"])
    pet.hunger = clamp(pet.hunger + HABIT_REWARD["hunger"])
    pet.cleanliness = clamp(pet.cleanliness + HABIT_REWARD["cleanliness"])
    pet.level = level_for_xp(pet.xp)
    return pet


def register_completion(habit: Habit) -> bool:
    """
    Advance the habit counters and report whether this tick earns a reward.

    Daily and weekly habits refuse a second completion within their period
    and leave the counters alone. X-times habits always count the tick but
    only reward the exact tick that reaches the target.
    """
    kind = habit.schedule.kind

    if kind == ScheduleKind.DAILY:
        if habit.completed_count_today >= 1:
            return False
        habit.completed_count_today += 1
        habit.completed_this_week += 1
        return True

    if kind == ScheduleKind.WEEKLY:
        if habit.completed_this_week >= 1:
            return False
        habit.completed_this_week += 1
        habit.completed_count_today += 1
        return True

    habit.completed_count_today += 1
    habit.completed_this_week += 1
    if kind == ScheduleKind.X_TIMES_PER_DAY:
        return habit.completed_count_today == habit.target
    return habit.completed_this_week == habit.target


def seed_streak_if_needed(app_state: AppState, now: datetime, calendar: Calendar) -> bool:
    """
    Start the streak on the first rewarded completion of a freshly reset day.

    Fires at most once per calendar day.
    """
    if not calendar.is_same_day(now, app_state.last_daily_reset):
        return False
    if app_state.current_streak != 0:
        return False
    last_bonus = app_state.last_streak_bonus_date
    if last_bonus is not None and calendar.is_same_day(last_bonus, now):
        return False

    app_state.current_streak = 1
    app_state.last_streak_bonus_date = now
    return True


def complete_habit(
    habit: Habit,
    pet: Pet,
    app_state: AppState | None = None,
    *,
    now: datetime | None = None,
    calendar: Calendar | None = None,
) -> bool:
    """
    Record one completion of `habit` and apply its reward when earned.

    Returns True only when the reward was applied. A False result is the
    normal "goal not reached yet" answer, not an error.
    """
    now = now or get_current_time()
    calendar = calendar or Calendar.from_env()

    if not register_completion(habit):
        return False

    habit.last_completed_date = now
    apply_reward(pet)
    if app_state is not None:
        seed_streak_if_needed(app_state, now, calendar)
    return True
