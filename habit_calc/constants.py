"""Shared constants for habit and pet state calculation."""

DEFAULT_TIMEZONE = "UTC"
DEFAULT_WEEK_START = "monday"
DEFAULT_STATE_FILE = ".habitpet/state.json"
DEFAULT_SHARED_DIR = ".habitpet/shared"

STAT_MIN = 0
STAT_MAX = 100
XP_PER_LEVEL = 100

# Applied once per rewarded completion.
HABIT_REWARD = {
    "coins": 5,
    "xp": 10,
    "energy": 3,
    "hunger": 5,
    "cleanliness": 2,
}

# Applied once per daily boundary crossing, regardless of how many days passed.
DAILY_DECAY = {
    "hunger": 10,
    "cleanliness": 8,
    "energy": 6,
}

DEFAULT_PET_STATS = {
    "energy": 80,
    "hunger": 80,
    "cleanliness": 80,
}

DEFAULT_PET_NAME = "Mochi"
DEFAULT_PET_SPECIES = "cat"
STARTING_COINS = 20

UNTITLED_HABIT_TITLE = "Untitled Habit"

SNAPSHOT_KEY = "habit_widget_snapshot_v1"
LOCK_SCREEN_WIDGET_KIND = "habit_status_lockscreen"
HOME_SCREEN_WIDGET_KIND = "habit_preview_homescreen"
DEFAULT_PREVIEW_LIMIT = 4

# Consumers refresh shortly after midnight so the projected reset is visible.
TIMELINE_REFRESH_DELAY_MINUTES = 1
