"""
Persistence layer for the set of notification ids the user has read.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol, Set

from core.errors import ErrorKind, SyncError
from pending_notifier.pending_notifier import logger as app_logger

_LOGGER = app_logger.get_logger()

READ_STATE_KEY = "readNotifIds"


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """In-process storage, used when nothing has to survive a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get_item(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._values[key] = value
        self.write_count += 1


class LocalStorage:
    """
    Durable string key-value storage kept in a single JSON file.

    Writes go to a temporary sibling file which then replaces the original,
    so readers never observe a half-written file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        values = self._read_all()
        values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle)
            os.replace(temp_name, self.path)
        except OSError:
            Path(temp_name).unlink(missing_ok=True)
            raise

    def _read_all(self) -> Dict[str, object]:
        try:
            contents = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            _LOGGER.warning("Unable to read local storage at {}: {}", self.path, exc)
            return {}

        try:
            values = json.loads(contents)
        except json.JSONDecodeError:
            _LOGGER.warning("Local storage at {} is not valid JSON; starting empty.", self.path)
            return {}
        return values if isinstance(values, dict) else {}


class ReadStateStore:
    """Keeps the read-id set in memory and mirrors every change to storage."""

    def __init__(self, storage: KeyValueStorage, *, key: str = READ_STATE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._ids: Optional[Set[str]] = None
        self.last_error: Optional[SyncError] = None

    def load(self) -> Set[str]:
        """Read the persisted set. Absent or corrupt values yield an empty set."""
        raw = self._storage.get_item(self._key)
        if raw is None:
            self._ids = set()
            return set()

        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            decoded = None

        if not isinstance(decoded, list) or not all(isinstance(value, str) for value in decoded):
            message = f"Persisted value for {self._key!r} is not a list of ids."
            _LOGGER.warning("Read state is corrupt; treating it as empty. {}", message)
            self.last_error = SyncError(ErrorKind.STORAGE_CORRUPT, message)
            self._ids = set()
            return set()

        self._ids = set(decoded)
        return set(self._ids)

    def save(self, ids: Iterable[str]) -> None:
        """Overwrite the persisted set."""
        new_ids = set(ids)
        self._ids = new_ids
        self._storage.set_item(self._key, json.dumps(sorted(new_ids)))

    def contains(self, item_id: str) -> bool:
        return item_id in self._current()

    def add(self, item_id: str) -> bool:
        """Persist one id. Returns False when it was already present."""
        return self.add_all([item_id])

    def add_all(self, item_ids: Iterable[str]) -> bool:
        """Persist several ids with a single write. Returns False when none were new."""
        current = self._current()
        new_ids = [item_id for item_id in item_ids if item_id not in current]
        if not new_ids:
            return False
        self.save(current.union(new_ids))
        return True

    def ids(self) -> Set[str]:
        return set(self._current())

    def _current(self) -> Set[str]:
        if self._ids is None:
            self._ids = self.load()
        return self._ids
