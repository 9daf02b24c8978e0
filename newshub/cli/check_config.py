"""Check provider configuration."""

import typer

from ..config import Config
from ..ingestion import provider_status
from .common import console


def check_config_command() -> None:
    """Check which news provider API keys are configured."""
    console.print("Checking News Aggregator Configuration...\n")

    statuses = provider_status(Config())
    all_configured = True

    for status in statuses:
        if not status.enabled:
            console.print(f"[yellow]⚠️  {status.display_name}: DISABLED[/yellow]\n")
            continue

        if status.configured:
            console.print(f"[green]✓ {status.display_name}: CONFIGURED[/green]\n")
            continue

        all_configured = False
        console.print(f"[red]❌ {status.display_name}: NOT CONFIGURED[/red]")
        console.print(f"   Set {status.api_key_env} in .env file")
        console.print(f"   Get key at: {status.signup_url}\n")

    if all_configured:
        console.print("[green]All API keys are configured! You can now run: newshub fetch[/green]")
        return

    console.print("[yellow]⚠️  Some API keys are missing. Please configure them in your .env file.[/yellow]")
    raise typer.Exit(1)
