import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path


SCRIPT_DIR = Path(__file__).resolve().parents[1]
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from habit_calc import widget_timeline
from habit_calc.models import ScheduleKind
from habit_calc.snapshot import HabitRecord, HabitWidgetSnapshot
from habit_calc.time_utils import Calendar


CALENDAR = Calendar()


def utc(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


class WidgetTimelineTests(unittest.TestCase):
    def test_next_refresh_is_one_minute_past_next_midnight(self) -> None:
        refresh = widget_timeline.next_refresh_time(utc("2026-02-10T15:00:00"), CALENDAR)
        self.assertEqual(refresh, utc("2026-02-11T00:01:00"))

    def test_next_refresh_follows_local_midnight(self) -> None:
        calendar = Calendar(timezone_name="Europe/Berlin")

        # 23:30 UTC is already 00:30 on Feb 11 in Berlin.
        refresh = widget_timeline.next_refresh_time(utc("2026-02-10T23:30:00"), calendar)

        self.assertEqual(refresh, utc("2026-02-11T23:01:00"))

    def test_status_entry_without_snapshot_shows_nothing_done(self) -> None:
        now = utc("2026-02-10T15:00:00")

        entry = widget_timeline.build_status_entry(None, now, CALENDAR)

        self.assertEqual((entry.done, entry.total, entry.remaining), (0, 0, 0))
        self.assertEqual(entry.date, now)

    def test_preview_entry_carries_projected_rows(self) -> None:
        snapshot = HabitWidgetSnapshot(
            generated_at=utc("2026-02-09T20:00:00"),
            last_daily_reset=utc("2026-02-09T00:00:00"),
            last_weekly_reset=utc("2026-02-09T00:00:00"),
            habits=(
                HabitRecord(id="water", schedule=ScheduleKind.DAILY, completed_count_today=1,
                            completed_this_week=1, title="Drink water",
                            created_at=utc("2026-02-01T08:00:00")),
                HabitRecord(id="walk", schedule=ScheduleKind.X_TIMES_PER_WEEK, completed_count_today=1,
                            completed_this_week=3, title="Walk 10 min",
                            created_at=utc("2026-02-01T08:00:01"), target_per_week=3),
            ),
        )
        now = utc("2026-02-10T09:00:00")

        entry = widget_timeline.build_preview_entry(snapshot, now, CALENDAR)

        self.assertEqual((entry.done, entry.total), (1, 2))
        self.assertEqual([row.id for row in entry.rows], ["water", "walk"])
        self.assertFalse(entry.rows[0].is_done)
        self.assertTrue(entry.rows[1].is_done)
        self.assertEqual(entry.refresh_at, utc("2026-02-11T00:01:00"))


if __name__ == "__main__":
    unittest.main()
