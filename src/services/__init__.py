"""Services package."""

from src.services.preferences import DARK_MODE_KEY, ThemePreference
from src.services.storage import (
    InMemoryPreferenceStorage,
    JsonFilePreferenceStorage,
    PreferenceStorageInterface,
    StorageError,
)

__all__ = [
    # Preferences
    "DARK_MODE_KEY",
    "ThemePreference",
    # Storage services
    "InMemoryPreferenceStorage",
    "JsonFilePreferenceStorage",
    "PreferenceStorageInterface",
    "StorageError",
]
