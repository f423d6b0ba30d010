"""Article listing commands for the GMN News CLI."""

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..client import ApiError, NewsApiClient
from ..config import Config
from .errors import show_error

console = Console()


@click.command()
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Page size.")
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True)
@click.option(
    "--pages",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Keep loading more pages while the API reports more.",
)
def articles(limit: int | None, offset: int, pages: int):
    """List the latest articles."""
    config = Config.load()
    client = NewsApiClient(config.articles_endpoint, config.reader_endpoint)
    page_size = config.page_size if limit is None else limit

    table = Table(title="Latest news")
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Link", overflow="fold")

    next_offset = offset
    has_more = True
    loaded = 0
    for _ in range(pages):
        if not has_more:
            break
        try:
            payload = client.list_articles(limit=page_size, offset=next_offset)
        except ApiError as exc:
            if loaded:
                console.print(table)
            show_error(console, "Couldn't load articles.", exc)
            raise SystemExit(1)

        items = payload.get("articles") or []
        paging = payload.get("paging") or {}
        for item in items:
            table.add_row(
                escape(item.get("date") or "-"),
                escape(item.get("title") or ""),
                escape(item.get("link") or ""),
            )
        count = paging.get("count", len(items))
        has_more = bool(paging.get("hasMore", count == page_size))
        next_offset += count
        loaded += count

    if not loaded:
        console.print("[yellow]No articles found[/yellow]")
        return

    console.print(table)
    if has_more:
        console.print(f"[dim]More available: --offset {next_offset}[/dim]")
