"""
Abstract Storage Interface

DESIGN DECISION: The app keeps all of its state in a flat key-value store,
one JSON string per section key (e.g. "@finance_transactions").
We define an abstract interface so that:
1. The backup engine never depends on a concrete store
2. Tests can use an in-memory store
3. A store with native transactions can offer atomic batch writes

The interface is intentionally tiny - get, set, remove and a batch set.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the local key-value store.

    Values are always strings (serialized JSON). A missing key reads
    as None.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under a key.

        Args:
            key: Storage key, including its namespace prefix

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> bool:
        """
        Store a value, overwriting any previous value.

        Args:
            key: Storage key, including its namespace prefix
            value: Serialized value

        Returns:
            True if written successfully

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if the key existed and was removed
        """
        pass

    @property
    def supports_atomic_batch(self) -> bool:
        """Can `set_many` write all items or none?"""
        return False

    async def set_many(self, items: list[tuple[str, str]]) -> list[str]:
        """
        Store several values.

        The default implementation writes one key after another and is
        NOT atomic: on failure, earlier keys stay written. Stores that
        override this atomically must also report `supports_atomic_batch`.

        Returns:
            The keys written, in order
        """
        written = []
        for key, value in items:
            await self.set(key, value)
            written.append(key)
        return written


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class StorageReadError(StorageError):
    """The store could not be read."""
    pass


class StorageWriteError(StorageError):
    """A value could not be written."""
    pass
