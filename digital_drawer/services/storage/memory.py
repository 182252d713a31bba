"""
In-Memory Storage Implementation

Dict-backed store used by tests and by restore previews.
Nothing is persisted.
"""

from typing import Optional

from digital_drawer.services.storage.interface import KeyValueStoreInterface


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Key-value store held in a plain dict."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    async def remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    @property
    def supports_atomic_batch(self) -> bool:
        return True

    async def set_many(self, items: list[tuple[str, str]]) -> list[str]:
        # Nothing in a dict update can fail half-way
        self._data.update(items)
        return [key for key, _ in items]

    def snapshot(self) -> dict[str, str]:
        """Copy of the current contents."""
        return dict(self._data)
