"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
The JSON file store backs the app; the in-memory store backs tests.
"""

from digital_drawer.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from digital_drawer.services.storage.json_file import JsonFileKeyValueStore
from digital_drawer.services.storage.memory import InMemoryKeyValueStore

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
