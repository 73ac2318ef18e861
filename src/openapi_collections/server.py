"""MCP server exposing OpenAPI collections."""

import asyncio
import logging
from collections import deque
from contextlib import asynccontextmanager
from typing import Optional

from mcp.server.fastmcp import Context, FastMCP

from .config import configure_logging, get_settings, load_sources
from .errors import CollectionError
from .models import Collection
from .store import CollectionStore
from .sync import SyncScheduler
from .updater import create_client, import_collection, import_sources, toggle_sync as toggle_collection_sync

logger = logging.getLogger(__name__)

RECENT_UPDATES_LIMIT = 50


class ServerState:
    """Objects shared by the tools for the server lifetime."""

    def __init__(self, store: CollectionStore, client, scheduler: SyncScheduler):
        self.store = store
        self.client = client
        self.scheduler = scheduler
        self.recent_updates: deque[dict] = deque(maxlen=RECENT_UPDATES_LIMIT)

    def record_update(self, topic: str, collection: Collection) -> None:
        self.recent_updates.append({
            "topic": topic,
            "url": collection.url,
            "name": collection.name,
            "etag": collection.etag,
            "last_updated": collection.last_updated.isoformat(),
        })


@asynccontextmanager
async def lifespan(server: FastMCP):
    """Import configured sources and run background sync."""
    settings = get_settings()
    store = CollectionStore()

    async with create_client(settings) as client:
        scheduler = SyncScheduler(store, client, interval=settings.sync_interval)
        state = ServerState(store, client, scheduler)
        scheduler.notify = state.record_update

        results = await import_sources(store, client, load_sources())
        logger.info("Imported %d of %d source(s)", sum(r.success for r in results), len(results))

        task = asyncio.create_task(scheduler.run())
        try:
            yield {"state": state}
        finally:
            scheduler.stop()
            await task


# Create the MCP server
mcp = FastMCP(
    "OpenAPI Collections",
    lifespan=lifespan,
)


def get_state(ctx: Context) -> ServerState:
    """Get the server state from context."""
    return ctx.request_context.lifespan_context["state"]


@mcp.tool(name="import_collection")
async def import_collection_tool(ctx: Context, url: str) -> dict:
    """Import an OpenAPI 3 JSON document from a URL.

    Args:
        url: URL of the OpenAPI document

    Returns the collection summary, or an error message.
    """
    state = get_state(ctx)
    try:
        collection = await import_collection(state.store, state.client, url)
    except CollectionError as e:
        return {"error": str(e)}
    return _collection_summary(collection)


@mcp.tool()
async def toggle_sync(ctx: Context, url: str, enabled: bool) -> dict:
    """Enable or pause background sync for an imported collection.

    Args:
        url: Source URL of the collection
        enabled: True to keep the collection in sync, False to pause it
    """
    state = get_state(ctx)
    await toggle_collection_sync(state.store, url, enabled)
    return {"url": url, "sync_enabled": enabled}


@mcp.tool()
async def list_collections(ctx: Context) -> list[dict]:
    """List all imported collections."""
    state = get_state(ctx)
    return [_collection_summary(c) for c in await state.store.values()]


@mcp.tool()
async def get_collection(ctx: Context, url: str) -> Optional[dict]:
    """Get a full collection with all endpoints.

    Args:
        url: Source URL of the collection
    """
    state = get_state(ctx)
    collection = await state.store.get(url)
    if collection:
        return collection.model_dump(mode="json")
    return None


@mcp.tool()
async def get_endpoint_details(
    ctx: Context,
    url: str,
    method: str,
    path: str,
) -> Optional[dict]:
    """Get details for one endpoint of a collection.

    Args:
        url: Source URL of the collection
        method: HTTP method (GET, POST, PUT, DELETE, PATCH)
        path: Full path or path template (e.g., "/users/{id}")

    Returns parameters, body example and form fields of the endpoint.
    """
    state = get_state(ctx)
    collection = await state.store.get(url)
    if not collection:
        return None

    endpoint = collection.find_endpoint(method, path)
    if endpoint:
        return endpoint.model_dump(mode="json")
    return None


@mcp.tool()
async def recent_updates(ctx: Context) -> list[dict]:
    """List collections recently replaced by background sync."""
    state = get_state(ctx)
    return list(state.recent_updates)


def _collection_summary(collection: Collection) -> dict:
    return {
        "name": collection.name,
        "url": collection.url,
        "groups": {group: len(endpoints) for group, endpoints in collection.groups.items()},
        "endpoint_count": collection.endpoint_count,
        "last_updated": collection.last_updated.isoformat(),
        "etag": collection.etag,
        "sync_enabled": collection.sync_enabled,
    }


def run_server():
    """Run the MCP server."""
    configure_logging()
    mcp.run()


if __name__ == "__main__":
    run_server()
