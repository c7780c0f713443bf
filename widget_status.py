#!/usr/bin/env python3
"""
Habit Pet Widget Status

Read-only consumer of the published habit snapshot. Projects today's
progress without running resets and prints the status and preview entries.
Never touches the app state file.
"""

import argparse
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from habit_calc.constants import DEFAULT_PREVIEW_LIMIT, DEFAULT_SHARED_DIR
from habit_calc.snapshot_store import JsonFileBlobStore, SnapshotStore
from habit_calc.time_utils import Calendar, get_current_time, to_iso8601
from habit_calc.widget_timeline import build_preview_entry, build_status_entry


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show projected habit progress from the snapshot.")
    parser.add_argument("--limit", type=int, default=DEFAULT_PREVIEW_LIMIT, help="Preview rows to show")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    now = get_current_time()
    calendar = Calendar.from_env()
    shared_dir = Path(os.environ.get("HABITPET_SHARED_DIR", DEFAULT_SHARED_DIR))

    snapshot = SnapshotStore(JsonFileBlobStore(shared_dir)).load()
    if snapshot is None:
        print("No habit snapshot published yet.")

    status = build_status_entry(snapshot, now, calendar)
    preview = build_preview_entry(snapshot, now, calendar, args.limit)

    print(f"Done {status.done}/{status.total} ({status.remaining} remaining)")
    for row in preview.rows:
        marker = "x" if row.is_done else " "
        print(f"  [{marker}] {row.title} {row.progress}/{row.target}")
    print(f"Next refresh: {to_iso8601(status.refresh_at)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
