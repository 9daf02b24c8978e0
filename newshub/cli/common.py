"""Helpers shared by CLI commands."""

from typing import Any, Dict

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config
from ..db import validate_connection
from ..models import ArticlePage
from ..pipeline import FetchStatistics

console = Console()


def require_database(config: Config) -> Dict[str, Any]:
    """Return the DB config, exiting with an error if Postgres is unreachable."""
    db_config = config.get_db_config()
    console.print("[dim]Checking database connection...[/dim]")
    if not validate_connection(db_config):
        console.print("[red]❌ Database connection failed![/red]")
        console.print("Please check your database configuration and ensure Postgres is running.")
        raise typer.Exit(1)
    return db_config


def print_fetch_statistics(stats: FetchStatistics) -> None:
    """Print a per-source table and totals for an aggregation run."""
    table = Table(title="Fetch Summary")
    table.add_column("Source", style="cyan")
    table.add_column("Fetched", style="yellow", justify="right")
    table.add_column("Stored", style="green", justify="right")
    table.add_column("Error", style="red")

    for source_key, source_stats in stats.sources.items():
        table.add_row(
            source_key,
            str(source_stats.fetched),
            str(source_stats.stored),
            source_stats.error or "",
        )

    console.print(table)
    console.print(
        f"\n[bold]Total:[/bold] {stats.total_fetched} fetched, {stats.total_stored} stored"
    )


def print_article_page(page: ArticlePage, title: str = "Articles") -> None:
    """Print one page of articles."""
    if not page.items:
        console.print("[yellow]No articles found.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Published", style="yellow")
    table.add_column("Source", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Author", style="magenta")
    table.add_column("Category", style="green")

    for article in page.items:
        table.add_row(
            str(article.id),
            article.published_at.strftime("%Y-%m-%d %H:%M") if article.published_at else "-",
            article.source_name or article.source_key or "Unknown",
            article.title,
            article.author_name or "",
            article.category or "Unknown",
        )

    console.print(table)
    console.print(
        f"[dim]Page {page.page} of {page.last_page} • {page.total} articles[/dim]"
    )
