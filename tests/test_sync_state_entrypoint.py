import importlib.util
import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch


def _load_script(name: str):
    module_path = Path(__file__).resolve().parents[1] / f"{name}.py"
    spec = importlib.util.spec_from_file_location(name, module_path)
    module = importlib.util.module_from_spec(spec)
    assert spec is not None and spec.loader is not None
    spec.loader.exec_module(module)
    return module


SYNC_STATE = _load_script("sync_state")
WIDGET_STATUS = _load_script("widget_status")

FIXED_NOW = datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc)


class SyncStateEntrypointTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        root = Path(self.temp_dir.name)
        self.state_file = root / "state.json"
        self.shared_dir = root / "shared"
        env = {
            "HABITPET_STATE_FILE": str(self.state_file),
            "HABITPET_SHARED_DIR": str(self.shared_dir),
            "HABITPET_TIMEZONE": "UTC",
            "HABITPET_WEEK_START": "monday",
        }
        env_patcher = patch.dict("os.environ", env)
        env_patcher.start()
        self.addCleanup(env_patcher.stop)

    def run_sync(self, argv, now=FIXED_NOW) -> int:
        output = io.StringIO()
        with patch.object(SYNC_STATE, "get_current_time", return_value=now):
            with redirect_stdout(output):
                exit_code = SYNC_STATE.main(argv)
        self.sync_output = output.getvalue()
        return exit_code

    def run_widget(self, now=FIXED_NOW) -> str:
        output = io.StringIO()
        with patch.object(WIDGET_STATUS, "get_current_time", return_value=now):
            with redirect_stdout(output):
                self.assertEqual(WIDGET_STATUS.main([]), 0)
        return output.getvalue()

    def read_state(self) -> dict:
        return json.loads(self.state_file.read_text(encoding="utf-8"))

    def test_first_run_seeds_state_and_publishes_snapshot(self) -> None:
        self.assertEqual(self.run_sync([]), 0)

        state = self.read_state()
        self.assertEqual(state["pet"]["coins"], 20)
        self.assertEqual(len(state["habits"]), 3)
        self.assertTrue((self.shared_dir / "habit_widget_snapshot_v1.json").exists())
        self.assertTrue((self.shared_dir / "habit_status_lockscreen.reload").exists())
        self.assertTrue((self.shared_dir / "habit_preview_homescreen.reload").exists())
        self.assertIn("Equipped: Sunny Tee, Cozy Home", self.sync_output)

    def test_completion_rewards_pet_and_updates_consumer_view(self) -> None:
        self.run_sync([])
        habit_id = self.read_state()["habits"][0]["id"]

        self.assertEqual(self.run_sync(["--complete", habit_id]), 0)

        state = self.read_state()
        self.assertEqual(state["pet"]["coins"], 25)
        self.assertEqual(state["pet"]["xp"], 10)
        self.assertEqual(state["app_state"]["current_streak"], 1)

        output = self.run_widget()
        self.assertIn("Done 1/3 (2 remaining)", output)
        self.assertIn("[x] Drink water 1/1", output)
        self.assertIn("Next refresh: 2026-02-11T00:01:00.000000+00:00", output)

        # The consumer projects the daily reset on its own before the app runs again.
        next_day = self.run_widget(datetime(2026, 2, 11, 8, 0, tzinfo=timezone.utc))
        self.assertIn("Done 0/3 (3 remaining)", next_day)

    def test_unknown_ids_fail_without_writing(self) -> None:
        self.assertEqual(self.run_sync(["--complete", "missing"]), 1)
        self.assertFalse(self.state_file.exists())

        self.run_sync([])
        self.assertEqual(self.run_sync(["--equip", "missing"]), 1)

    def test_equip_switches_room(self) -> None:
        self.run_sync([])
        state = self.read_state()
        lamp = next(item for item in state["inventory"] if item["name"] == "Desk Lamp")
        lamp["owned"] = True
        self.state_file.write_text(json.dumps(state), encoding="utf-8")

        self.assertEqual(self.run_sync(["--equip", lamp["id"]]), 0)

        rooms = {item["name"]: item["equipped_species"] for item in self.read_state()["inventory"]
                 if item["type"] == "room"}
        self.assertEqual(rooms, {"Cozy Home": [], "Desk Lamp": ["cat"], "Dreamy Bed": []})
        self.assertIn("Equipped: Sunny Tee, Desk Lamp", self.sync_output)

    def test_widget_without_snapshot_reports_empty_state(self) -> None:
        output = self.run_widget()

        self.assertIn("No habit snapshot published yet.", output)
        self.assertIn("Done 0/0 (0 remaining)", output)


if __name__ == "__main__":
    unittest.main()
