"""
Storage Services Package

Provides the abstract key-value interface and its local implementations.
"""

from src.services.storage.interface import (
    EXPENSES_KEY,
    THEME_KEY,
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from src.services.storage.local_storage import (
    InMemoryStorage,
    JsonFileStorage,
)

__all__ = [
    # Keys
    "EXPENSES_KEY",
    "THEME_KEY",
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
