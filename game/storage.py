from __future__ import annotations

"""
Key-value stores backing session persistence.

The game only ever calls ``load(key)`` and ``save(key, value)`` with string
values, so any durable string map can stand in for these classes.
"""

import json
import shutil
from pathlib import Path
from typing import Dict, Optional

from .persistence import GameLoadError, GameSaveError


class KeyValueStore:
    """Interface of the persistence collaborator."""

    def load(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def save(self, key: str, value: str) -> None:
        raise NotImplementedError

    def save_many(self, items: Dict[str, str]) -> None:
        for key, value in items.items():
            self.save(key, value)

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Volatile store; used by tests and by ``--no-save`` sessions."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    Store kept as a single JSON object on disk.

    The file is read lazily on first access and rewritten atomically (temporary
    file, then move) on every ``save``.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: Optional[Dict[str, str]] = None

    def _read(self) -> Dict[str, str]:
        if self._data is not None:
            return self._data
        if not self.path.exists():
            self._data = {}
            return self._data
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            raise GameLoadError(f"Failed to read or parse save file: {e}") from e
        if not isinstance(raw, dict):
            raise GameLoadError("Save file does not contain a JSON object")
        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def load(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def save(self, key: str, value: str) -> None:
        self.save_many({key: value})

    def save_many(self, items: Dict[str, str]) -> None:
        """Write several keys with a single file replacement."""
        try:
            data = self._read()
        except GameLoadError:
            # An unreadable file is overwritten rather than blocking every save.
            data = self._data = {}
        data.update(items)
        self._flush()

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._flush()

    def _flush(self) -> None:
        temp_file = self.path.with_suffix(".json.tmp")
        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
                f.flush()
        except OSError as e:
            raise GameSaveError(f"Failed to write to temporary save file: {e}") from e

        try:
            shutil.move(str(temp_file), str(self.path))
        except OSError as e:
            try:
                temp_file.unlink(missing_ok=True)
            except OSError:
                pass
            raise GameSaveError(f"Failed to rename temporary save file to final: {e}") from e


__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore"]
