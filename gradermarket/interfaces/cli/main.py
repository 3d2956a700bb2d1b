"""
CLI Main - Typer-based command-line interface.

Usage:
    gradermarket sync
    gradermarket import listings.json
    gradermarket search "1r0742" --mode partNumber
    gradermarket serve
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from gradermarket.config import GraderMarketError, get_settings
from gradermarket.domains.catalog import Equipment, Part, StockCountry
from gradermarket.domains.search import (
    CatalogSearchEngine,
    SearchMode,
    SearchQuery,
    StockFilter,
    highlight,
)

app = typer.Typer(
    name="gradermarket",
    help="GraderMarket - Grader and parts marketplace search",
    add_completion=False,
)
console = Console()


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _db_path(db: Path | None) -> Path:
    return db or Path(get_settings().db_path)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search text"),
    mode: SearchMode = typer.Option(SearchMode.ALL, "--mode", "-m", help="Search strategy"),
    stock: StockFilter = typer.Option(StockFilter.ALL, "--stock", "-s", help="Stock facet"),
    brand: list[str] = typer.Option([], "--brand", "-b", help="Brand facet (repeatable)"),
    country: list[StockCountry] = typer.Option(
        [], "--country", "-c", help="Country facet (repeatable)"
    ),
    db: Path | None = typer.Option(None, "--db", help="Snapshot database path"),
) -> None:
    """Search the local catalog snapshot."""
    asyncio.run(_search_async(query, mode, stock, brand, country, _db_path(db)))


async def _search_async(
    text: str,
    mode: SearchMode,
    stock: StockFilter,
    brands: list[str],
    countries: list[StockCountry],
    db_path: Path,
) -> None:
    """Async search implementation."""
    from gradermarket.adapters.sqlite import CatalogRepository

    settings = get_settings()
    engine = CatalogSearchEngine.from_settings(
        threshold=settings.search_fuzzy_threshold,
        weights=settings.search_field_weights,
        limit=settings.search_result_limit,
    )

    repo = CatalogRepository(db_path)
    try:
        await repo.initialize()
        catalog = await repo.list_items()
    finally:
        await repo.close()

    query = SearchQuery(
        text=text,
        mode=mode,
        stock_filter=stock,
        brand_filter=frozenset(brands),
        country_filter=frozenset(countries),
    )
    results = engine.search(catalog, query)

    if not results:
        console.print(f"[yellow]No matches for[/yellow] {escape(text)}")
        return

    table = Table(title=f"Results for '{escape(text)}'")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind", style="cyan")
    table.add_column("Title")
    table.add_column("Brand")
    table.add_column("Part / Model")
    table.add_column("Stock", justify="right")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Link", style="dim")

    for result in results:
        item = result.item
        if isinstance(item, Part):
            identifier = highlight(item.part_number, text, "[bold yellow]", "[/]", escape)
            stock_cell = str(item.stock_quantity)
        else:
            identifier = escape(item.model or "-")
            stock_cell = "-"
        table.add_row(
            str(result.rank),
            result.kind,
            highlight(item.title, text, "[bold yellow]", "[/]", escape),
            escape(item.brand or "-"),
            identifier,
            stock_cell,
            f"{item.price:,.2f}",
            result.detail_path,
        )

    console.print(table)


@app.command()
def sync(
    api_url: str | None = typer.Option(None, "--api-url", help="Marketplace API base URL"),
    db: Path | None = typer.Option(None, "--db", help="Snapshot database path"),
) -> None:
    """Fetch the catalog from the marketplace API into the local snapshot."""
    asyncio.run(_sync_async(api_url, _db_path(db)))


async def _sync_async(api_url: str | None, db_path: Path) -> None:
    """Async sync implementation."""
    from gradermarket.adapters.marketplace import MarketplaceClient
    from gradermarket.adapters.sqlite import CatalogRepository

    settings = get_settings()
    client = MarketplaceClient(
        base_url=api_url or settings.catalog_api_url,
        timeout=settings.catalog_timeout,
        page_size=settings.catalog_page_size,
        retry_attempts=settings.catalog_retry_attempts,
        retry_backoff=settings.catalog_retry_backoff,
    )
    repo = CatalogRepository(db_path)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Fetching catalog...", total=None)

        try:
            items = await client.fetch_catalog()

            progress.update(task, description="Writing snapshot...")
            await repo.initialize()
            count = await repo.replace_all(items)

        except GraderMarketError as e:
            console.print(f"[red]Error:[/red] {escape(e.message)} ({e.code.value})")
            raise typer.Exit(1)
        finally:
            await client.close()
            await repo.close()

    console.print(f"\n[green]Synced {count} listings[/green]")
    console.print(f"[dim]Snapshot: {db_path}[/dim]")


@app.command("import")
def import_listings(
    path: Path = typer.Argument(..., help='JSON file: {"graders": [...], "parts": [...]}'),
    db: Path | None = typer.Option(None, "--db", help="Snapshot database path"),
) -> None:
    """Load listings from a JSON export into the local snapshot."""
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        items: list[Equipment | Part] = [
            *(Equipment.model_validate(row) for row in data.get("graders", [])),
            *(Part.model_validate(row) for row in data.get("parts", [])),
        ]
    except (json.JSONDecodeError, AttributeError, ValidationError) as e:
        console.print(f"[red]Error:[/red] Invalid listings file: {escape(str(e))}")
        raise typer.Exit(1)

    count = asyncio.run(_import_async(items, _db_path(db)))
    console.print(f"[green]Imported {count} listings[/green]")


async def _import_async(items: list[Equipment | Part], db_path: Path) -> int:
    """Replace the snapshot with imported listings."""
    from gradermarket.adapters.sqlite import CatalogRepository

    repo = CatalogRepository(db_path)
    try:
        await repo.initialize()
        return await repo.replace_all(items)
    finally:
        await repo.close()


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting GraderMarket API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "gradermarket.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from gradermarket import __version__

    console.print(f"GraderMarket v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
