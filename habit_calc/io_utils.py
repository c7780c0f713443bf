"""JSON file IO helpers for the app state file."""

import json
import os
from pathlib import Path


def load_json_file(path: Path) -> dict | None:
    """Load a JSON object from `path` if it exists."""
    if not path.exists():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, IOError) as e:
        print(f"Warning: Could not load {path}: {e}")
        return None

    if not isinstance(data, dict):
        print(f"Warning: Ignoring {path}: expected a JSON object")
        return None
    return data


def write_json_file(path: Path, data: dict) -> None:
    """Write data to JSON file, replacing the previous file in one step."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
