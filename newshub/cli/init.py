"""Init command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.panel import Panel

from ..config import DEFAULT_CONFIG_PATH, Config, ConfigModel, save_config
from ..db import SourceRegistry, init_database, validate_connection
from ..ingestion import FETCHER_CLASSES
from .common import console


def seed_sources(registry: SourceRegistry) -> int:
    """Register every known provider with its display metadata."""
    for fetcher_cls in FETCHER_CLASSES.values():
        registry.sync(
            fetcher_cls.source_key,
            fetcher_cls.display_name,
            fetcher_cls.default_base_url,
            {"description": fetcher_cls.description, "website": fetcher_cls.website},
        )
    return len(FETCHER_CLASSES)


def init_command(
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        help="Configuration file to create",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("newshub", "--db-name", help="Database name"),
    db_user: str = typer.Option("newshub", "--db-user", help="Database user"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """Initialize configuration, database schema and news sources."""
    console.print(Panel.fit("📰 newshub - Initialization", style="bold blue"))

    # Create or keep the configuration file
    if config_path.exists() and not force:
        console.print(f"Using existing config: {config_path}")
    else:
        model = ConfigModel(
            postgres={
                "host": db_host,
                "port": db_port,
                "database": db_name,
                "user": db_user,
                "password_env": "NEWSHUB_DB_PASSWORD",
            },
            logging={"level": "INFO", "file": log_file},
        )
        save_config(model, config_path)
        console.print(f"✅ Created config: {config_path}")

    config = Config(config_path)
    db_config = config.get_db_config()

    # Validate database connection
    console.print("\n[bold]Testing database connection...[/bold]")
    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: [bold]export NEWSHUB_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    # Initialize database schema
    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
        count = seed_sources(SourceRegistry(db_config))
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print(f"✅ Database schema initialized, {count} sources registered")

    console.print(
        Panel(
            f"[green]✅ newshub initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n\n"
            f"Next steps:\n"
            f"1. Set API keys: [bold]NEWSAPI_KEY, GUARDIAN_API_KEY, NYT_API_KEY[/bold]\n"
            f"2. Check them: [bold]newshub check-config[/bold]\n"
            f"3. Run: [bold]newshub fetch[/bold] (schedule it hourly with cron)",
            style="green",
        )
    )
