"""Shared fixtures for Digital Drawer tests."""

from typing import Optional

import pytest

from digital_drawer.services.storage import (
    InMemoryKeyValueStore,
    StorageWriteError,
)


class FailingStore(InMemoryKeyValueStore):
    """In-memory store whose write to one key fails."""

    def __init__(self, fail_on: str, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.fail_on = fail_on

    @property
    def supports_atomic_batch(self) -> bool:
        return False

    async def set(self, key: str, value: str) -> bool:
        if key == self.fail_on:
            raise StorageWriteError(f"Disk full while writing {key}", key=key)
        return await super().set(key, value)

    async def set_many(self, items: list[tuple[str, str]]) -> list[str]:
        written = []
        for key, value in items:
            await self.set(key, value)
            written.append(key)
        return written


@pytest.fixture
def failing_store():
    """Factory: failing_store("@home_history") fails on that key."""
    def _make(fail_on: str, initial: Optional[dict[str, str]] = None) -> FailingStore:
        return FailingStore(fail_on, initial)
    return _make
