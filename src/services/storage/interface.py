"""
Abstract Preference Storage Interface

Ledger data is never persisted. The only thing written to disk is a
handful of UI preferences, stored as string values under string keys.

Backends: a JSON file on disk, or an in-memory dict.
"""

from abc import ABC, abstractmethod
from typing import Optional


class PreferenceStorageInterface(ABC):
    """
    Abstract interface for local preference storage.

    Values are plain strings, mirroring a browser's local storage.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a preference.

        Args:
            key: Preference key

        Returns:
            The stored string, or None if the key was never written
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a preference.

        Args:
            key: Preference key
            value: String value to store

        Raises:
            StorageError: If the value could not be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
