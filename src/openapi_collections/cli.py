"""CLI for openapi-collections."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from .config import configure_logging, get_settings, load_sources
from .errors import CollectionError
from .models import Collection
from .parsers import OpenApiParser
from .store import CollectionStore
from .sync import SyncScheduler
from .updater import create_client, import_collection, import_sources

app = typer.Typer(
    name="openapi-collections",
    help="Import OpenAPI documents into endpoint collections",
)


def _print_collection(collection: Collection) -> None:
    typer.echo(f"{collection.name} ({collection.url})")
    if collection.etag:
        typer.echo(f"  ETag: {collection.etag}")
    typer.echo(f"  Endpoints: {collection.endpoint_count}")

    for group, endpoints in collection.groups.items():
        typer.echo(f"\n  {group}")
        for endpoint in endpoints:
            line = f"    {endpoint.method:<7} {endpoint.path}"
            if endpoint.summary:
                line += f"  - {endpoint.summary}"
            typer.echo(line)


async def _import(url: str) -> Collection:
    async with create_client() as client:
        return await import_collection(CollectionStore(), client, url)


@app.command()
def inspect(
    source: str = typer.Argument(..., help="Document URL or local JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print the full collection as JSON"),
) -> None:
    """Import a single document and print its collection."""
    configure_logging()

    try:
        if source.startswith(("http://", "https://")):
            collection = asyncio.run(_import(source))
        else:
            collection = OpenApiParser.parse_file(Path(source))
    except (CollectionError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(collection.model_dump_json(indent=2))
    else:
        _print_collection(collection)


@app.command()
def list_sources(
    sources_file: Optional[Path] = typer.Option(
        None,
        "--sources",
        "-s",
        help="Path to sources.yaml file",
    ),
) -> None:
    """List all configured document sources."""
    sources = load_sources(sources_file)

    if not sources:
        typer.echo("No sources configured")
        return

    typer.echo("Configured sources:\n")

    for source in sources:
        status = "sync" if source.sync_enabled else "paused"
        label = f"{source.name}: " if source.name else ""
        typer.echo(f"  {label}{source.url} [{status}]")


async def _watch(sources_file: Optional[Path], interval: float) -> None:
    store = CollectionStore()

    def echo_update(topic: str, collection: Collection) -> None:
        typer.echo(f"[{topic}] {collection.name} ({collection.url}) - {collection.endpoint_count} endpoint(s)")

    async with create_client() as client:
        for result in await import_sources(store, client, load_sources(sources_file)):
            if result.success:
                typer.echo(f"  IMPORTED {result.url}")
            else:
                typer.echo(f"  ERROR {result.url}: {result.error}")

        scheduler = SyncScheduler(store, client, notify=echo_update, interval=interval)
        await scheduler.run()


@app.command()
def watch(
    sources_file: Optional[Path] = typer.Option(
        None,
        "--sources",
        "-s",
        help="Path to sources.yaml file",
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between sync cycles",
    ),
) -> None:
    """Import all sources and keep them in sync."""
    configure_logging()
    typer.echo("Importing sources...")
    typer.echo("Use Ctrl+C to stop")

    try:
        asyncio.run(_watch(sources_file, interval or get_settings().sync_interval))
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        pass


@app.command()
def serve() -> None:
    """Start the MCP server."""
    # Import here to avoid circular imports
    from .server import run_server

    run_server()


if __name__ == "__main__":
    app()
