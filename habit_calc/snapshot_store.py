"""Key-value blob stores and the latest-snapshot store built on them."""

import os
import tempfile
from pathlib import Path

from .constants import SNAPSHOT_KEY
from .snapshot import HabitWidgetSnapshot, SnapshotDecodeError, decode_snapshot, encode_snapshot


class BlobStore:
    def get(self, key: str) -> bytes | None:
        raise NotImplementedError

    def set(self, key: str, value: bytes) -> None:
        raise NotImplementedError


class MemoryBlobStore(BlobStore):
    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._blobs[key] = bytes(value)


class JsonFileBlobStore(BlobStore):
    """
    One file per key inside a shared directory.

    Writes go to a temporary file first and are moved into place, so a
    reader in another process sees either the previous blob or the new one.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            print(f"Warning: Could not read {path}: {e}")
            return None

    def set(self, key: str, value: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(temp_name, self.path_for(key))
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise


class SnapshotStore:
    """Holds the single latest snapshot under one key; save replaces it wholesale."""

    def __init__(self, backend: BlobStore, key: str = SNAPSHOT_KEY) -> None:
        self.backend = backend
        self.key = key

    def save(self, snapshot: HabitWidgetSnapshot) -> None:
        self.backend.set(self.key, encode_snapshot(snapshot))

    def load(self) -> HabitWidgetSnapshot | None:
        """Load the latest snapshot; missing or corrupt data reads as no snapshot."""
        payload = self.backend.get(self.key)
        if payload is None:
            return None
        try:
            return decode_snapshot(payload)
        except SnapshotDecodeError as e:
            print(f"Warning: Could not load habit snapshot: {e}")
            return None
