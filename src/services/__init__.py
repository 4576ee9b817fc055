"""Services package."""

from src.services.storage import (
    EXPENSES_KEY,
    THEME_KEY,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Storage services
    "EXPENSES_KEY",
    "THEME_KEY",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorageInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
