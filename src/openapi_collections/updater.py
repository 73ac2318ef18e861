"""Collection import and refresh - fetches OpenAPI documents from their URLs."""

import logging
from typing import Optional

import httpx

from .config import Settings, get_settings
from .errors import CollectionError, FetchError
from .models import Collection, CollectionSource
from .parsers import OpenApiParser
from .store import CollectionStore

logger = logging.getLogger(__name__)


class FetchResult:
    """Response to a (possibly conditional) document fetch."""

    def __init__(self, status: int, etag: Optional[str] = None, text: str = ""):
        self.status = status
        self.etag = etag
        self.text = text

    @property
    def not_modified(self) -> bool:
        return self.status == 304

    def __repr__(self) -> str:
        return f"FetchResult(status={self.status}, etag={self.etag!r})"


class UpdateResult:
    """Result of refreshing or importing a single collection."""

    def __init__(
        self,
        url: str,
        success: bool,
        updated: bool = False,
        error: Optional[str] = None,
        collection: Optional[Collection] = None,
    ):
        self.url = url
        self.success = success
        self.updated = updated
        self.error = error
        self.collection = collection

    def __repr__(self) -> str:
        status = "updated" if self.updated else ("ok" if self.success else f"error: {self.error}")
        return f"UpdateResult({self.url}: {status})"


def create_client(settings: Optional[Settings] = None) -> httpx.AsyncClient:
    """HTTP client used for document fetches."""
    settings = settings or get_settings()
    return httpx.AsyncClient(
        timeout=settings.timeout,
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


async def fetch_document(
    client: httpx.AsyncClient,
    url: str,
    etag: Optional[str] = None,
) -> FetchResult:
    """Fetch a document, conditionally when an ETag is known.

    Args:
        client: HTTP client to use
        url: Document URL
        etag: ETag from the previous fetch, sent as If-None-Match

    Returns:
        FetchResult with status 200 and the body, or status 304

    Raises:
        FetchError: On transport errors and unexpected statuses
    """
    headers = {}
    if etag:
        headers["If-None-Match"] = etag

    try:
        response = await client.get(url, headers=headers)
    except (httpx.RequestError, httpx.InvalidURL) as e:
        raise FetchError(url, str(e) or type(e).__name__) from e

    if response.status_code == 304:
        return FetchResult(304, etag=etag)

    if not response.is_success:
        raise FetchError(url, f"HTTP {response.status_code}")

    return FetchResult(
        response.status_code,
        etag=response.headers.get("etag"),
        text=response.text,
    )


async def import_collection(
    store: CollectionStore,
    client: httpx.AsyncClient,
    url: str,
    sync_enabled: bool = True,
) -> Collection:
    """Fetch, parse and store the document at ``url``.

    Raises:
        FetchError: If the document cannot be fetched
        ParseError: If the document is not valid JSON
    """
    result = await fetch_document(client, url)
    collection = OpenApiParser.build(result.text, url, result.etag)
    if not sync_enabled:
        collection.sync_enabled = False

    await store.insert(collection)
    logger.info("Imported %s (%d endpoints)", url, collection.endpoint_count)
    return collection


async def toggle_sync(store: CollectionStore, url: str, enabled: bool) -> None:
    """Enable or pause background sync. Unknown URLs are ignored."""
    if not await store.toggle(url, enabled):
        logger.debug("Toggle ignored for unknown collection %s", url)


async def refresh_collection(
    store: CollectionStore,
    client: httpx.AsyncClient,
    url: str,
    etag: Optional[str] = None,
) -> UpdateResult:
    """Conditionally re-fetch one collection and replace it if it changed.

    Errors are reported in the result instead of raised.
    """
    try:
        result = await fetch_document(client, url, etag)
        if result.not_modified:
            return UpdateResult(url, success=True, updated=False)

        collection = OpenApiParser.build(result.text, url, result.etag)
    except CollectionError as e:
        return UpdateResult(url, success=False, error=e.message)

    stored = await store.replace(collection)
    if stored is None:
        # Removed while the fetch was in flight
        return UpdateResult(url, success=True, updated=False)

    return UpdateResult(url, success=True, updated=True, collection=stored)


async def import_sources(
    store: CollectionStore,
    client: httpx.AsyncClient,
    sources: list[CollectionSource],
) -> list[UpdateResult]:
    """Import every configured source, collecting failures."""
    results = []

    for source in sources:
        try:
            collection = await import_collection(store, client, source.url, source.sync_enabled)
        except CollectionError as e:
            logger.warning("Failed to import %s: %s", source.url, e.message)
            results.append(UpdateResult(source.url, success=False, error=e.message))
            continue

        results.append(UpdateResult(source.url, success=True, updated=True, collection=collection))

    return results
