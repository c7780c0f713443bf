"""Daily and weekly reset boundary detection.

The reset engine uses this to decide when to mutate counters; the snapshot
projection uses the very same predicate to decide what to report.
"""

from datetime import datetime
from typing import NamedTuple

from .time_utils import Calendar


class ResetProjection(NamedTuple):
    daily: bool
    weekly: bool


def crosses_daily_boundary(calendar: Calendar, last_daily_reset: datetime, now: datetime) -> bool:
    return calendar.start_of_day(now) > calendar.start_of_day(last_daily_reset)


def crosses_weekly_boundary(calendar: Calendar, last_weekly_reset: datetime, now: datetime) -> bool:
    return calendar.start_of_week(now) > calendar.start_of_week(last_weekly_reset)


def project_resets(
    calendar: Calendar,
    last_daily_reset: datetime,
    last_weekly_reset: datetime,
    now: datetime,
) -> ResetProjection:
    """Report which resets would fire at `now` without performing them."""
    return ResetProjection(
        daily=crosses_daily_boundary(calendar, last_daily_reset, now),
        weekly=crosses_weekly_boundary(calendar, last_weekly_reset, now),
    )
