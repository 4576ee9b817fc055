"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the stores unaware of where their state is persisted
2. Use in-memory storage for testing
3. Swap the JSON file for another local backend later

The interface mirrors a browser's local storage: string keys mapped to
string values. Anything richer (JSON arrays, enums) is encoded by the
caller.
"""

from abc import ABC, abstractmethod
from typing import Optional


# Keys used by the application
EXPENSES_KEY = "ExpensesArray"
THEME_KEY = "expense-tracker-theme"


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for string key-value storage.

    Any storage implementation (JSON file, in-memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backing store cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a value, overwriting any previous one.

        Args:
            key: Storage key
            value: String value to store

        Raises:
            StorageWriteError: If the value cannot be persisted
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The backing store exists but could not be read or parsed."""
    pass


class StorageWriteError(StorageError):
    """A value could not be persisted."""
    pass
