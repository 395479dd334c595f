"""Dark-mode preference, persisted as "true"/"false" under one key."""

from src.services.storage import PreferenceStorageInterface


DARK_MODE_KEY = "ledger-dark-mode"


class ThemePreference:
    """Reads and writes the dark-mode flag. Absent means light mode."""

    def __init__(self, storage: PreferenceStorageInterface):
        self._storage = storage

    def load_dark_mode(self) -> bool:
        return self._storage.get(DARK_MODE_KEY) == "true"

    def save_dark_mode(self, enabled: bool) -> None:
        self._storage.set(DARK_MODE_KEY, "true" if enabled else "false")
