"""Fetch command implementation."""

from typing import Optional

import typer
from pydantic import ValidationError
from rich.markup import escape

from ..bootstrap import create_aggregator
from ..config import Config
from ..ingestion import FetchParameters
from .common import console, print_fetch_statistics, require_database


def fetch_command(
    sources: Optional[str] = typer.Option(
        None,
        "--sources",
        "-s",
        help="Comma-separated list of sources to fetch from (newsapi,guardian,nytimes)",
    ),
    from_date: Optional[str] = typer.Option(
        None, "--from", help="Fetch articles from this date (YYYY-MM-DD)"
    ),
    to_date: Optional[str] = typer.Option(
        None, "--to", help="Fetch articles until this date (YYYY-MM-DD)"
    ),
    query: Optional[str] = typer.Option(None, "--q", "-q", help="Search query"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category filter"),
    page_size: Optional[int] = typer.Option(
        None, "--page-size", help="Articles requested per provider"
    ),
) -> None:
    """Fetch news articles from configured sources and store them."""
    config = Config()
    fetch_defaults = config.config.fetch

    try:
        params = FetchParameters(
            search_query=query,
            category=category,
            from_date=from_date,
            to_date=to_date,
            page_size=page_size or fetch_defaults.page_size,
            language=fetch_defaults.language,
            source_keys=sources,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid fetch options: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    require_database(config)

    aggregator = create_aggregator(config)
    if not aggregator.source_keys:
        console.print("[yellow]⚠️  No news providers are configured. Run 'newshub check-config'.[/yellow]")
        raise typer.Exit(1)

    console.print("Starting to fetch news articles...")

    try:
        stats = aggregator.run(params)
    except KeyboardInterrupt:
        console.print("\n[yellow]Fetch interrupted by user[/yellow]")
        raise typer.Exit(1)

    console.print("\n[green]Fetch completed![/green]")
    print_fetch_statistics(stats)
