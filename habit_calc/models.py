"""Habit, pet, app state and inventory records."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .constants import DEFAULT_PET_NAME, DEFAULT_PET_STATS, UNTITLED_HABIT_TITLE
from .time_utils import get_current_time


def new_id() -> str:
    return str(uuid.uuid4())


class ScheduleKind(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    X_TIMES_PER_DAY = "xTimesPerDay"
    X_TIMES_PER_WEEK = "xTimesPerWeek"

    @property
    def display_name(self) -> str:
        return {
            ScheduleKind.DAILY: "Daily",
            ScheduleKind.WEEKLY: "Weekly",
            ScheduleKind.X_TIMES_PER_DAY: "X times per day",
            ScheduleKind.X_TIMES_PER_WEEK: "X times per week",
        }[self]

    @property
    def is_daily_counter(self) -> bool:
        return self in (ScheduleKind.DAILY, ScheduleKind.X_TIMES_PER_DAY)

    @property
    def is_weekly_counter(self) -> bool:
        return self in (ScheduleKind.WEEKLY, ScheduleKind.X_TIMES_PER_WEEK)


class PetSpecies(str, Enum):
    CAT = "cat"
    DOG = "dog"
    BUNNY = "bunny"
    PENGUIN = "penguin"
    LION = "lion"


class ItemType(str, Enum):
    OUTFIT = "outfit"
    ROOM = "room"


class OutfitClass(str, Enum):
    BODY = "body"
    HAT = "hat"
    ACCESSORY = "accessory"

    @classmethod
    def parse(cls, raw) -> "OutfitClass":
        """Unknown raw values fall back to body."""
        try:
            return cls(raw)
        except ValueError:
            return cls.BODY


class EquipStyle(str, Enum):
    REPLACE_SPRITE = "replaceSprite"
    OVERLAY = "overlay"

    @classmethod
    def parse(cls, raw) -> "EquipStyle":
        try:
            return cls(raw)
        except ValueError:
            return cls.OVERLAY


def target_for_schedule(
    kind: ScheduleKind,
    target_per_day: int | None = None,
    target_per_week: int | None = None,
) -> int:
    """Completions needed to meet the goal; stored targets below 1 count as 1."""
    if kind == ScheduleKind.X_TIMES_PER_DAY:
        return max(1, target_per_day if target_per_day is not None else 1)
    if kind == ScheduleKind.X_TIMES_PER_WEEK:
        return max(1, target_per_week if target_per_week is not None else 1)
    return 1


@dataclass(frozen=True)
class Schedule:
    """
    Schedule kind plus its target.

    Only the x-times kinds carry a target, so a daily habit can never hold a
    weekly target. Build instances through the named constructors.
    """

    kind: ScheduleKind
    target: int | None = None

    def __post_init__(self):
        if self.target is not None and self.kind in (ScheduleKind.DAILY, ScheduleKind.WEEKLY):
            raise ValueError(f"{self.kind.value} schedules do not take a target")

    @classmethod
    def daily(cls) -> "Schedule":
        return cls(ScheduleKind.DAILY)

    @classmethod
    def weekly(cls) -> "Schedule":
        return cls(ScheduleKind.WEEKLY)

    @classmethod
    def times_per_day(cls, target: int) -> "Schedule":
        return cls(ScheduleKind.X_TIMES_PER_DAY, target)

    @classmethod
    def times_per_week(cls, target: int) -> "Schedule":
        return cls(ScheduleKind.X_TIMES_PER_WEEK, target)

    @classmethod
    def from_parts(
        cls,
        kind: ScheduleKind,
        target_per_day: int | None = None,
        target_per_week: int | None = None,
    ) -> "Schedule":
        if kind == ScheduleKind.X_TIMES_PER_DAY:
            return cls.times_per_day(target_per_day if target_per_day is not None else 1)
        if kind == ScheduleKind.X_TIMES_PER_WEEK:
            return cls.times_per_week(target_per_week if target_per_week is not None else 1)
        return cls(kind)

    @property
    def target_per_day(self) -> int | None:
        return self.target if self.kind == ScheduleKind.X_TIMES_PER_DAY else None

    @property
    def target_per_week(self) -> int | None:
        return self.target if self.kind == ScheduleKind.X_TIMES_PER_WEEK else None

    @property
    def goal(self) -> int:
        return target_for_schedule(self.kind, self.target_per_day, self.target_per_week)


@dataclass
class Habit:
    title: str
    schedule: Schedule = field(default_factory=Schedule.daily)
    id: str = field(default_factory=new_id)
    completed_count_today: int = 0
    completed_this_week: int = 0
    last_completed_date: datetime | None = None
    created_at: datetime = field(default_factory=get_current_time)

    @property
    def display_title(self) -> str:
        return normalized_title(self.title)

    @property
    def target(self) -> int:
        return self.schedule.goal

    @property
    def progress(self) -> int:
        if self.schedule.kind.is_daily_counter:
            return self.completed_count_today
        return self.completed_this_week

    @property
    def is_goal_met(self) -> bool:
        return self.progress >= self.target


@dataclass
class Pet:
    name: str = DEFAULT_PET_NAME
    species: PetSpecies = PetSpecies.CAT
    energy: int = DEFAULT_PET_STATS["energy"]
    hunger: int = DEFAULT_PET_STATS["hunger"]
    cleanliness: int = DEFAULT_PET_STATS["cleanliness"]
    level: int = 1
    xp: int = 0
    coins: int = 0
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=get_current_time)


@dataclass
class AppState:
    last_daily_reset: datetime = field(default_factory=get_current_time)
    last_weekly_reset: datetime = field(default_factory=get_current_time)
    current_streak: int = 0
    last_streak_bonus_date: datetime | None = None
    tutorial_seen: bool = False
    user_name: str = ""
    selected_pet_species: PetSpecies = PetSpecies.CAT
    created_at: datetime = field(default_factory=get_current_time)


@dataclass
class InventoryItem:
    type: ItemType
    name: str
    price: int = 0
    owned: bool = False
    equipped_species: set[PetSpecies] = field(default_factory=set)
    # Pre-species flag; folded into equipped_species by the legacy migration.
    equipped: bool = False
    asset_name: str = ""
    species: PetSpecies | None = None
    equip_style: EquipStyle = EquipStyle.OVERLAY
    outfit_class: OutfitClass = OutfitClass.BODY
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=get_current_time)

    def is_equipped(self, species: PetSpecies) -> bool:
        return species in self.equipped_species

    def set_equipped(self, equipped: bool, species: PetSpecies) -> None:
        if equipped:
            self.equipped_species.add(species)
        else:
            self.equipped_species.discard(species)


def normalized_title(raw_title: str | None) -> str:
    """Blank titles display as a fixed placeholder."""
    trimmed = (raw_title or "").strip()
    return trimmed or UNTITLED_HABIT_TITLE
