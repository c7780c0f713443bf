import sys
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path


SCRIPT_DIR = Path(__file__).resolve().parents[1]
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from habit_calc import sync_service
from habit_calc.constants import HOME_SCREEN_WIDGET_KIND, LOCK_SCREEN_WIDGET_KIND
from habit_calc.models import AppState, Habit, Schedule, ScheduleKind
from habit_calc.snapshot_store import MemoryBlobStore, SnapshotStore


FIXED_NOW = datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc)


def utc(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


class RecordingReloader(sync_service.TimelineReloader):
    def __init__(self) -> None:
        self.reloaded_kinds: list[str] = []

    def reload_timelines(self, kind: str) -> None:
        self.reloaded_kinds.append(kind)


class SyncServiceTests(unittest.TestCase):
    def test_sync_builds_snapshot_and_reloads_both_consumers(self) -> None:
        app_state = AppState(
            last_daily_reset=utc("2026-02-10T00:00:00"),
            last_weekly_reset=utc("2026-02-09T00:00:00"),
        )
        older = Habit(
            title="Read",
            schedule=Schedule.times_per_day(3),
            completed_count_today=2,
            completed_this_week=6,
            created_at=utc("2026-02-01T09:00:00"),
        )
        newer = Habit(
            title="Walk",
            schedule=Schedule.weekly(),
            completed_count_today=1,
            completed_this_week=1,
            created_at=utc("2026-02-03T09:00:00"),
        )
        store = SnapshotStore(MemoryBlobStore())
        reloader = RecordingReloader()

        snapshot = sync_service.sync(app_state, [newer, older], store, reloader, now=FIXED_NOW)

        self.assertEqual(store.load(), snapshot)
        self.assertEqual(snapshot.generated_at, FIXED_NOW)
        self.assertEqual(snapshot.last_daily_reset, app_state.last_daily_reset)
        self.assertEqual(snapshot.last_weekly_reset, app_state.last_weekly_reset)
        self.assertEqual([record.title for record in snapshot.habits], ["Read", "Walk"])

        read = snapshot.habits[0]
        self.assertEqual(read.id, older.id)
        self.assertEqual(read.schedule, ScheduleKind.X_TIMES_PER_DAY)
        self.assertEqual(read.target_per_day, 3)
        self.assertIsNone(read.target_per_week)
        self.assertEqual(read.completed_count_today, 2)

        walk = snapshot.habits[1]
        self.assertEqual(walk.schedule, ScheduleKind.WEEKLY)
        self.assertEqual(walk.completed_this_week, 1)

        self.assertEqual(sorted(reloader.reloaded_kinds), sorted([LOCK_SCREEN_WIDGET_KIND, HOME_SCREEN_WIDGET_KIND]))

    def test_sync_does_nothing_when_app_state_is_missing(self) -> None:
        backend = MemoryBlobStore()
        reloader = RecordingReloader()

        result = sync_service.sync(None, [Habit(title="Read")], SnapshotStore(backend), reloader, now=FIXED_NOW)

        self.assertIsNone(result)
        self.assertIsNone(SnapshotStore(backend).load())
        self.assertEqual(reloader.reloaded_kinds, [])

    def test_marker_file_reloader_writes_one_marker_per_kind(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            reloader = sync_service.MarkerFileReloader(Path(temp_dir), now=lambda: FIXED_NOW)
            app_state = AppState(last_daily_reset=FIXED_NOW, last_weekly_reset=FIXED_NOW)

            sync_service.sync(app_state, [], SnapshotStore(MemoryBlobStore()), reloader, now=FIXED_NOW)

            for kind in (LOCK_SCREEN_WIDGET_KIND, HOME_SCREEN_WIDGET_KIND):
                marker = Path(temp_dir) / f"{kind}.reload"
                self.assertEqual(marker.read_text(encoding="utf-8").strip(), "2026-02-10T12:00:00.000000+00:00")


if __name__ == "__main__":
    unittest.main()
