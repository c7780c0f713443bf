"""App state file builder: seeding, migration and (de)serialization."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

from .constants import DEFAULT_PET_NAME, DEFAULT_PET_STATS, STARTING_COINS
from .io_utils import load_json_file, write_json_file
from .models import (
    AppState,
    EquipStyle,
    Habit,
    InventoryItem,
    ItemType,
    OutfitClass,
    Pet,
    PetSpecies,
    Schedule,
    ScheduleKind,
    new_id,
)
from .reward_engine import clamp, level_for_xp
from .time_utils import Calendar, get_current_time, parse_iso_datetime, to_int, to_iso8601


@dataclass
class AppData:
    app_state: AppState
    pet: Pet
    habits: list[Habit] = field(default_factory=list)
    items: list[InventoryItem] = field(default_factory=list)

    def find_habit(self, habit_id: str) -> Habit | None:
        return next((habit for habit in self.habits if habit.id == habit_id), None)

    def find_item(self, item_id: str) -> InventoryItem | None:
        return next((item for item in self.items if item.id == item_id), None)


def _parse_species(raw, default: PetSpecies | None = PetSpecies.CAT) -> PetSpecies | None:
    try:
        return PetSpecies(raw)
    except ValueError:
        return default


def _parse_species_set(raw) -> set[PetSpecies]:
    # Older state files stored equipped species as one comma-joined string.
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list):
        return set()
    species = {_parse_species(str(value).strip(), default=None) for value in raw}
    species.discard(None)
    return species


def _record_list(state: dict, key: str) -> list:
    records = state.get(key)
    if records is None:
        return []
    if not isinstance(records, list):
        print(f"Warning: Ignoring {key}: expected a list")
        return []
    return records


def _timestamp(raw, fallback: datetime) -> datetime:
    return parse_iso_datetime(raw) or fallback


def seed_initial_data(now: datetime | None = None, calendar: Calendar | None = None) -> AppData:
    """Build the first-launch state: a starter pet, demo habits and the store catalog."""
    now = now or get_current_time()
    calendar = calendar or Calendar.from_env()

    app_state = AppState(
        last_daily_reset=calendar.start_of_day(now),
        last_weekly_reset=calendar.start_of_week(now),
        selected_pet_species=PetSpecies.CAT,
        created_at=now,
    )
    pet = Pet(
        name=DEFAULT_PET_NAME,
        species=PetSpecies.CAT,
        energy=85,
        hunger=80,
        cleanliness=78,
        coins=STARTING_COINS,
        created_at=now,
    )

    demo_habits = [
        ("Drink water", Schedule.daily()),
        ("Walk 10 min", Schedule.times_per_week(3)),
        ("Read 5 pages", Schedule.daily()),
    ]
    # Offset creation times so the demo habits keep their listed order.
    habits = [
        Habit(title=title, schedule=schedule, created_at=now + timedelta(microseconds=index))
        for index, (title, schedule) in enumerate(demo_habits)
    ]

    catalog = [
        ("Sunny Tee", ItemType.OUTFIT, 30, OutfitClass.BODY, "tshirt", True),
        ("Royal Crown", ItemType.OUTFIT, 60, OutfitClass.HAT, "crown", False),
        ("Sparkle Charm", ItemType.OUTFIT, 45, OutfitClass.ACCESSORY, "sparkles", False),
        ("Cozy Home", ItemType.ROOM, 40, OutfitClass.BODY, "house", True),
        ("Desk Lamp", ItemType.ROOM, 55, OutfitClass.BODY, "lamp.desk", False),
        ("Dreamy Bed", ItemType.ROOM, 70, OutfitClass.BODY, "bed.double", False),
    ]
    items = [
        InventoryItem(
            type=item_type,
            name=name,
            price=price,
            owned=starter,
            equipped_species={PetSpecies.CAT} if starter else set(),
            asset_name=asset_name,
            outfit_class=outfit_class,
            created_at=now,
        )
        for name, item_type, price, outfit_class, asset_name, starter in catalog
    ]

    return AppData(app_state=app_state, pet=pet, habits=habits, items=items)


def habit_to_dict(habit: Habit) -> dict:
    return {
        "id": habit.id,
        "title": habit.title,
        "schedule": habit.schedule.kind.value,
        "target_per_day": habit.schedule.target_per_day,
        "target_per_week": habit.schedule.target_per_week,
        "completed_count_today": habit.completed_count_today,
        "completed_this_week": habit.completed_this_week,
        "last_completed_date": to_iso8601(habit.last_completed_date),
        "created_at": to_iso8601(habit.created_at),
    }


def habit_from_dict(data: dict, now: datetime) -> Habit:
    try:
        kind = ScheduleKind(data.get("schedule"))
    except ValueError:
        kind = ScheduleKind.DAILY
    target_per_day = data.get("target_per_day")
    target_per_week = data.get("target_per_week")
    schedule = Schedule.from_parts(
        kind,
        to_int(target_per_day, 1) if target_per_day is not None else None,
        to_int(target_per_week, 1) if target_per_week is not None else None,
    )
    return Habit(
        id=str(data.get("id") or new_id()),
        title=str(data.get("title") or ""),
        schedule=schedule,
        completed_count_today=max(0, to_int(data.get("completed_count_today"), 0)),
        completed_this_week=max(0, to_int(data.get("completed_this_week"), 0)),
        last_completed_date=parse_iso_datetime(data.get("last_completed_date")),
        created_at=_timestamp(data.get("created_at"), now),
    )


def pet_to_dict(pet: Pet) -> dict:
    return {
        "id": pet.id,
        "name": pet.name,
        "species": pet.species.value,
        "stats": {
            "energy": pet.energy,
            "hunger": pet.hunger,
            "cleanliness": pet.cleanliness,
        },
        "level": pet.level,
        "xp": pet.xp,
        "coins": pet.coins,
        "created_at": to_iso8601(pet.created_at),
    }


def pet_from_dict(data: dict, now: datetime) -> Pet:
    stats = data.get("stats")
    if not isinstance(stats, dict):
        stats = {}
    # Migrate legacy key `mood` -> `energy`.
    if "energy" not in stats and "mood" in stats:
        stats["energy"] = stats["mood"]

    xp = max(0, to_int(data.get("xp"), 0))
    return Pet(
        id=str(data.get("id") or new_id()),
        name=str(data.get("name") or DEFAULT_PET_NAME),
        species=_parse_species(data.get("species")),
        energy=clamp(to_int(stats.get("energy"), DEFAULT_PET_STATS["energy"])),
        hunger=clamp(to_int(stats.get("hunger"), DEFAULT_PET_STATS["hunger"])),
        cleanliness=clamp(to_int(stats.get("cleanliness"), DEFAULT_PET_STATS["cleanliness"])),
        level=level_for_xp(xp),
        xp=xp,
        coins=max(0, to_int(data.get("coins"), 0)),
        created_at=_timestamp(data.get("created_at"), now),
    )


def app_state_to_dict(app_state: AppState) -> dict:
    return {
        "last_daily_reset": to_iso8601(app_state.last_daily_reset),
        "last_weekly_reset": to_iso8601(app_state.last_weekly_reset),
        "current_streak": app_state.current_streak,
        "last_streak_bonus_date": to_iso8601(app_state.last_streak_bonus_date),
        "tutorial_seen": app_state.tutorial_seen,
        "user_name": app_state.user_name,
        "selected_pet_species": app_state.selected_pet_species.value,
        "created_at": to_iso8601(app_state.created_at),
    }


def app_state_from_dict(data: dict, now: datetime) -> AppState:
    return AppState(
        last_daily_reset=_timestamp(data.get("last_daily_reset"), now),
        last_weekly_reset=_timestamp(data.get("last_weekly_reset"), now),
        current_streak=max(0, to_int(data.get("current_streak"), 0)),
        last_streak_bonus_date=parse_iso_datetime(data.get("last_streak_bonus_date")),
        tutorial_seen=bool(data.get("tutorial_seen", False)),
        user_name=str(data.get("user_name") or ""),
        selected_pet_species=_parse_species(data.get("selected_pet_species")),
        created_at=_timestamp(data.get("created_at"), now),
    )


def item_to_dict(item: InventoryItem) -> dict:
    return {
        "id": item.id,
        "type": item.type.value,
        "name": item.name,
        "price": item.price,
        "owned": item.owned,
        "equipped_species": sorted(species.value for species in item.equipped_species),
        "equipped": item.equipped,
        "asset_name": item.asset_name,
        "species": item.species.value if item.species else None,
        "equip_style": item.equip_style.value,
        "outfit_class": item.outfit_class.value,
        "created_at": to_iso8601(item.created_at),
    }


def item_from_dict(data: dict, now: datetime) -> InventoryItem | None:
    try:
        item_type = ItemType(data.get("type"))
    except ValueError:
        print(f"Warning: Skipping inventory item with unknown type {data.get('type')!r}")
        return None
    return InventoryItem(
        id=str(data.get("id") or new_id()),
        type=item_type,
        name=str(data.get("name") or ""),
        price=max(0, to_int(data.get("price"), 0)),
        owned=bool(data.get("owned", False)),
        equipped_species=_parse_species_set(data.get("equipped_species")),
        equipped=bool(data.get("equipped", False)),
        asset_name=str(data.get("asset_name") or ""),
        species=_parse_species(data.get("species"), default=None),
        equip_style=EquipStyle.parse(data.get("equip_style")),
        outfit_class=OutfitClass.parse(data.get("outfit_class")),
        created_at=_timestamp(data.get("created_at"), now),
    )


def app_data_to_dict(data: AppData, now: datetime | None = None) -> dict:
    return {
        "last_updated": to_iso8601(now or get_current_time()),
        "app_state": app_state_to_dict(data.app_state),
        "pet": pet_to_dict(data.pet),
        "habits": [habit_to_dict(habit) for habit in data.habits],
        "inventory": [item_to_dict(item) for item in data.items],
    }


def app_data_from_dict(state: dict, now: datetime | None = None) -> AppData | None:
    """
    Rebuild live records from a state file, migrating older layouts.

    Returns None when the file carries no app state or pet yet.
    """
    now = now or get_current_time()
    app_state = state.get("app_state")
    pet = state.get("pet")
    if not isinstance(app_state, dict) or not isinstance(pet, dict):
        return None

    habits = [
        habit_from_dict(habit, now)
        for habit in _record_list(state, "habits")
        if isinstance(habit, dict)
    ]
    items = [
        item
        for item in (item_from_dict(raw, now) for raw in _record_list(state, "inventory") if isinstance(raw, dict))
        if item is not None
    ]
    return AppData(
        app_state=app_state_from_dict(app_state, now),
        pet=pet_from_dict(pet, now),
        habits=habits,
        items=items,
    )


def load_app_data(state_file: Path) -> AppData | None:
    """Load app data from the state file; missing or unreadable files give None."""
    state = load_json_file(state_file)
    if state is None:
        return None
    return app_data_from_dict(state)


def save_app_data(state_file: Path, data: AppData, now: datetime | None = None) -> None:
    write_json_file(state_file, app_data_to_dict(data, now))
