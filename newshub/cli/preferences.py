"""User preference commands."""

from typing import Optional

import typer

from ..bootstrap import create_preference_service
from ..config import Config
from ..models import Preferences
from .common import console, require_database

preferences_app = typer.Typer(help="Manage personalized feed preferences")


def _print_preferences(user_id: int, preferences: Preferences) -> None:
    console.print(f"[bold]Preferences for user {user_id}[/bold]")
    console.print(f"  Sources: {', '.join(preferences.sources) or '-'}")
    console.print(f"  Categories: {', '.join(preferences.categories) or '-'}")
    console.print(f"  Authors: {', '.join(preferences.authors) or '-'}")


@preferences_app.command("show")
def preferences_show(
    user_id: int = typer.Option(..., "--user-id", "-u", help="User ID"),
) -> None:
    """Show a user's preferences."""
    config = Config()
    require_database(config)
    preferences = create_preference_service(config).get_preferences(user_id)
    _print_preferences(user_id, preferences)


@preferences_app.command("set")
def preferences_set(
    user_id: int = typer.Option(..., "--user-id", "-u", help="User ID"),
    sources: Optional[str] = typer.Option(None, "--sources", help="Comma-separated source names"),
    categories: Optional[str] = typer.Option(None, "--categories", help="Comma-separated categories"),
    authors: Optional[str] = typer.Option(None, "--authors", help="Comma-separated authors"),
) -> None:
    """Replace a user's preferences."""
    config = Config()
    require_database(config)

    preferences = Preferences(sources=sources, categories=categories, authors=authors)
    saved = create_preference_service(config).update_preferences(user_id, preferences)
    console.print("[green]✅ Preferences saved[/green]")
    _print_preferences(user_id, saved.preferences)


@preferences_app.command("clear")
def preferences_clear(
    user_id: int = typer.Option(..., "--user-id", "-u", help="User ID"),
) -> None:
    """Delete a user's preferences."""
    config = Config()
    require_database(config)

    if create_preference_service(config).delete_preferences(user_id):
        console.print(f"[green]✅ Cleared preferences for user {user_id}[/green]")
    else:
        console.print(f"[yellow]User {user_id} had no saved preferences.[/yellow]")
