"""Article query commands."""

from typing import Optional

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel

from ..bootstrap import create_article_service
from ..config import Config
from ..models import ArticleFilters
from .common import console, print_article_page, require_database


def search_command(
    query: Optional[str] = typer.Option(
        None, "--q", "-q", help="Search keyword; fetches from providers when nothing is stored"
    ),
    from_date: Optional[str] = typer.Option(None, "--from", help="Published on or after (YYYY-MM-DD)"),
    to_date: Optional[str] = typer.Option(None, "--to", help="Published on or before (YYYY-MM-DD)"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category"),
    source: Optional[str] = typer.Option(
        None, "--source", "-s", help="Comma-separated source keys"
    ),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Author (partial match)"),
    sort: str = typer.Option("desc", "--sort", help="Sort by published date: asc or desc"),
    per_page: Optional[int] = typer.Option(None, "--per-page", help="Items per page (max 100)"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
) -> None:
    """Search stored articles, fetching from the providers on a miss."""
    config = Config()

    try:
        filters = ArticleFilters(
            search_query=query,
            from_date=from_date,
            to_date=to_date,
            category=category,
            sources=source,
            author=author,
            sort_order=sort,
            per_page=per_page or config.config.query.per_page,
            page=page,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid search options: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    require_database(config)
    service = create_article_service(config)
    result = service.query_with_auto_fetch(filters)

    if result.auto_fetch:
        console.print("[dim]No stored matches, fetched from news sources.[/dim]")
    print_article_page(result.page)


def show_command(
    article_id: int = typer.Argument(..., help="Article ID"),
) -> None:
    """Show a single article."""
    config = Config()
    require_database(config)

    article = create_article_service(config).get_article(article_id)
    if article is None:
        console.print(f"[red]Article {article_id} not found.[/red]")
        raise typer.Exit(1)

    published = article.published_at.strftime("%Y-%m-%d %H:%M:%S") if article.published_at else "-"
    body = "\n".join(
        [
            f"[bold]{article.title}[/bold]",
            "",
            f"Source: {article.source_name or 'Unknown'}",
            f"Author: {article.author_name or '-'}",
            f"Category: {article.category or 'Unknown'}",
            f"Published: {published}",
            f"URL: {article.url}",
            "",
            article.description or "",
            "",
            article.content or "",
        ]
    )
    console.print(Panel(body, title=f"Article {article.id}"))


def categories_command() -> None:
    """List all categories of stored articles."""
    config = Config()
    require_database(config)
    for category in create_article_service(config).get_categories():
        console.print(category)


def authors_command() -> None:
    """List all authors of stored articles."""
    config = Config()
    require_database(config)
    for author in create_article_service(config).get_authors():
        console.print(author)


def feed_command(
    user_id: int = typer.Option(..., "--user-id", "-u", help="User whose preferences to apply"),
    per_page: Optional[int] = typer.Option(None, "--per-page", help="Items per page (max 100)"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
) -> None:
    """Show the personalized feed for a user."""
    config = Config()
    require_database(config)

    service = create_article_service(config)
    articles = service.get_personalized_articles(
        user_id,
        per_page=per_page or config.config.query.per_page,
        page=page,
    )
    print_article_page(articles, title=f"Personalized feed for user {user_id}")
