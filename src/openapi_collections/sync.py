"""Background sync of imported collections."""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

import httpx

from .models import Collection
from .store import CollectionStore
from .updater import UpdateResult, refresh_collection

logger = logging.getLogger(__name__)

COLLECTION_UPDATED = "collection-updated"

Notifier = Callable[[str, Collection], Any]


class SyncScheduler:
    """Periodically re-fetches every collection with sync enabled.

    Each cycle snapshots the ``(url, etag)`` pairs of the active
    collections, fetches them with ``If-None-Match`` outside the store
    lock, and replaces the collections whose documents changed. Changed
    collections are published to ``notify`` as ``collection-updated``.
    Failures are logged and the URL is retried on the next cycle.
    """

    def __init__(
        self,
        store: CollectionStore,
        client: httpx.AsyncClient,
        notify: Optional[Notifier] = None,
        interval: float = 60.0,
    ):
        self.store = store
        self.client = client
        self.notify = notify
        self.interval = interval
        self._stopped = asyncio.Event()

    async def check_once(self) -> list[UpdateResult]:
        """Run a single sync cycle."""
        targets = await self.store.sync_targets()
        results = []

        for url, etag in targets:
            try:
                result = await refresh_collection(self.store, self.client, url, etag)
            except Exception as e:
                logger.exception("Sync failed for %s", url)
                results.append(UpdateResult(url, success=False, error=str(e) or type(e).__name__))
                continue
            results.append(result)

            if not result.success:
                logger.warning("Sync skipped %s: %s", url, result.error)
                continue
            if result.updated:
                logger.info("Collection updated: %s", url)
                await self._publish(result.collection)

        return results

    async def _publish(self, collection: Collection) -> None:
        if self.notify is None:
            return
        try:
            outcome = self.notify(COLLECTION_UPDATED, collection)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("Update notification failed for %s", collection.url)

    async def run(self) -> None:
        """Sync every ``interval`` seconds until ``stop()`` is called."""
        logger.info("Sync started, interval %ss", self.interval)
        while not self._stopped.is_set():
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                await self.check_once()
        logger.info("Sync stopped")

    def stop(self) -> None:
        self._stopped.set()
