"""In-memory collection store keyed by source URL."""

import asyncio
from typing import Optional

from .models import Collection


class CollectionStore:
    """Collections keyed by source URL, guarded by a single lock.

    The lock is only held for in-memory reads and writes, never across
    network I/O.
    """

    def __init__(self):
        self._collections: dict[str, Collection] = {}
        self._lock = asyncio.Lock()

    async def get(self, url: str) -> Optional[Collection]:
        async with self._lock:
            return self._collections.get(url)

    async def insert(self, collection: Collection) -> None:
        """Insert or wholesale replace the collection for its URL."""
        async with self._lock:
            self._collections[collection.url] = collection

    async def replace(self, collection: Collection) -> Optional[Collection]:
        """Replace an existing collection, keeping its sync flag.

        Returns:
            The stored collection, or None if the URL was removed meanwhile
        """
        async with self._lock:
            current = self._collections.get(collection.url)
            if current is None:
                return None
            collection = collection.model_copy(update={"sync_enabled": current.sync_enabled})
            self._collections[collection.url] = collection
            return collection

    async def values(self) -> list[Collection]:
        """Snapshot of all stored collections."""
        async with self._lock:
            return list(self._collections.values())

    async def toggle(self, url: str, enabled: bool) -> bool:
        """Set the sync flag. Returns False if the URL is unknown."""
        async with self._lock:
            collection = self._collections.get(url)
            if collection is None:
                return False
            collection.sync_enabled = enabled
            return True

    async def remove(self, url: str) -> Optional[Collection]:
        async with self._lock:
            return self._collections.pop(url, None)

    async def sync_targets(self) -> list[tuple[str, Optional[str]]]:
        """(url, etag) pairs of collections with sync enabled."""
        async with self._lock:
            return [(c.url, c.etag) for c in self._collections.values() if c.sync_enabled]
