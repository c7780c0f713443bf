#!/usr/bin/env python3
"""
Habit Pet State Sync

Runs the app-side update pass against the state file:
- seeds the first-launch state when no state file exists
- applies any due daily/weekly resets
- optionally completes a habit or equips an item
- writes the state file, publishes the habit snapshot and signals consumers

Environment Variables:
    HABITPET_STATE_FILE: Path to the app state file (default .habitpet/state.json)
    HABITPET_SHARED_DIR: Directory shared with read-only consumers (default .habitpet/shared)
    HABITPET_TIMEZONE: IANA timezone for day boundaries (default UTC)
    HABITPET_WEEK_START: First weekday name (default monday)
"""

import argparse
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from habit_calc.constants import DEFAULT_SHARED_DIR, DEFAULT_STATE_FILE
from habit_calc.inventory import apply_equip, equipped_items
from habit_calc.reset_engine import run_resets
from habit_calc.reward_engine import complete_habit
from habit_calc.snapshot_store import JsonFileBlobStore, SnapshotStore
from habit_calc.state_builder import load_app_data, save_app_data, seed_initial_data
from habit_calc.sync_service import MarkerFileReloader, sync
from habit_calc.time_utils import Calendar, get_current_time


def get_state_file() -> Path:
    return Path(os.environ.get("HABITPET_STATE_FILE", DEFAULT_STATE_FILE))


def get_shared_dir() -> Path:
    return Path(os.environ.get("HABITPET_SHARED_DIR", DEFAULT_SHARED_DIR))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply resets and publish the habit snapshot.")
    parser.add_argument("--complete", metavar="HABIT_ID", help="Complete the habit with this id")
    parser.add_argument("--equip", metavar="ITEM_ID", help="Equip the inventory item with this id")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    print("=" * 50)
    print("Habit Pet State Sync")
    print("=" * 50)

    now = get_current_time()
    calendar = Calendar.from_env()
    state_file = get_state_file()
    shared_dir = get_shared_dir()

    data = load_app_data(state_file)
    if data is None:
        print(f"\nNo state at {state_file}, seeding first-launch state...")
        data = seed_initial_data(now, calendar)

    print("\nRunning resets...")
    outcome = run_resets(data.app_state, data.habits, data.pet, now=now, calendar=calendar)
    print(f"  Daily reset: {outcome.daily_reset} (days passed: {outcome.day_diff})")
    print(f"  Weekly reset: {outcome.weekly_reset}")

    if args.complete:
        habit = data.find_habit(args.complete)
        if habit is None:
            print(f"Error: Unknown habit id {args.complete}")
            return 1
        rewarded = complete_habit(habit, data.pet, data.app_state, now=now, calendar=calendar)
        print(f"\nCompleted '{habit.display_title}' ({habit.schedule.kind.display_name}): "
              f"{habit.progress}/{habit.target} (reward applied: {rewarded})")

    if args.equip:
        item = data.find_item(args.equip)
        if item is None:
            print(f"Error: Unknown item id {args.equip}")
            return 1
        equipped = apply_equip(item, data.items, data.app_state.selected_pet_species)
        print(f"\nEquip '{item.name}': {'ok' if equipped else 'not owned'}")

    pet = data.pet
    print(f"\n  Pet: {pet.name} ({pet.species.value}) level {pet.level}, coins {pet.coins}")
    print(f"  Stats: energy={pet.energy}, hunger={pet.hunger}, cleanliness={pet.cleanliness}")
    print(f"  Streak: {data.app_state.current_streak}")
    worn = equipped_items(data.items, data.app_state.selected_pet_species)
    print(f"  Equipped: {', '.join(item.name for item in worn) or 'nothing'}")

    print(f"\nWriting {state_file}...")
    save_app_data(state_file, data, now)

    store = SnapshotStore(JsonFileBlobStore(shared_dir))
    snapshot = sync(data.app_state, data.habits, store, MarkerFileReloader(shared_dir), now=now)
    print(f"Published snapshot with {len(snapshot.habits)} habits to {shared_dir}")

    print("\n" + "=" * 50)
    print("State sync complete!")
    print("=" * 50)

    return 0


if __name__ == "__main__":
    sys.exit(main())
