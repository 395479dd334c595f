"""
Storage Services Package

Provides the preference storage interface and its concrete backends.
"""

from src.services.storage.interface import (
    PreferenceStorageInterface,
    StorageError,
)
from src.services.storage.json_file import (
    InMemoryPreferenceStorage,
    JsonFilePreferenceStorage,
)

__all__ = [
    # Interfaces
    "PreferenceStorageInterface",
    # Exceptions
    "StorageError",
    # Implementations
    "InMemoryPreferenceStorage",
    "JsonFilePreferenceStorage",
]
