"""Sources listing command."""

from rich.table import Table

from ..config import Config
from ..db import SourceRegistry
from .common import console, require_database


def sources_command() -> None:
    """List news sources with their article counts."""
    config = Config()
    db_config = require_database(config)

    sources = SourceRegistry(db_config).list_with_counts()
    if not sources:
        console.print("[yellow]No sources registered yet. Run 'newshub init' or 'newshub fetch'.[/yellow]")
        return

    table = Table(title="News Sources")
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Articles", style="green", justify="right")
    table.add_column("Website", style="blue")

    for source in sources:
        table.add_row(
            source.key,
            source.name,
            str(source.article_count or 0),
            source.meta.get("website", ""),
        )

    console.print(table)
