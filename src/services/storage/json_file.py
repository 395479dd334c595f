"""
Preference storage backends.

JsonFilePreferenceStorage keeps a flat JSON object on disk.
InMemoryPreferenceStorage is used in tests and when no file is wanted.
"""

import json
from pathlib import Path
from typing import Optional

import structlog

from src.services.storage.interface import PreferenceStorageInterface, StorageError


class JsonFilePreferenceStorage(PreferenceStorageInterface):
    """
    Preferences in a single JSON file.

    A missing file reads as empty. A file that cannot be read or parsed is
    logged and also treated as empty, so a broken preference never stops
    the app from starting.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self._logger = structlog.get_logger(__name__)

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self._logger.warning(
                "preferences_unreadable",
                path=str(self._path),
                error=str(e),
            )
            return {}
        if not isinstance(data, dict):
            self._logger.warning("preferences_malformed", path=str(self._path))
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not write preferences to {self._path}: {e}") from e


class InMemoryPreferenceStorage(PreferenceStorageInterface):
    """Preferences that live as long as the object does."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
