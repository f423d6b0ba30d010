"""Shared error panel for CLI commands."""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..client import ApiError


def show_error(console: Console, headline: str, exc: ApiError):
    """Show the failure with the last attempted request URL so it can be retried."""
    body = Text()
    body.append(f"{headline} ", style="bold")
    body.append(f"({exc.message})\n")
    body.append(f"Last request: {exc.request_url}", style="dim")
    console.print(Panel(body, border_style="red", expand=False))
