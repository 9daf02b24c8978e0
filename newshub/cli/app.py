"""Main CLI application."""

import typer
from dotenv import load_dotenv
from rich.markup import escape

# Load .env file if it exists
load_dotenv()

from ..config import Config
from ..db import close_connection_pool
from ..logging_config import setup_logging
from .check_config import check_config_command
from .common import console
from .fetch import fetch_command
from .init import init_command
from .preferences import preferences_app
from .search import authors_command, categories_command, feed_command, search_command, show_command
from .sources import sources_command

app = typer.Typer(
    name="newshub",
    help="newshub - aggregate NewsAPI, Guardian and New York Times articles",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    try:
        logging_config = Config().config.logging
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    setup_logging("DEBUG" if verbose else logging_config.level, logging_config.file)
    ctx.call_on_close(close_connection_pool)


# Register commands
app.command("init")(init_command)
app.command("fetch")(fetch_command)
app.command("check-config")(check_config_command)
app.command("search")(search_command)
app.command("show")(show_command)
app.command("categories")(categories_command)
app.command("authors")(authors_command)
app.command("feed")(feed_command)
app.command("sources")(sources_command)
app.add_typer(preferences_app, name="prefs", help="Manage personalized feed preferences")


if __name__ == "__main__":
    app()
