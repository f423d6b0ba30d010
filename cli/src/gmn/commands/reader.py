"""Reading-mode command for the GMN News CLI."""

from html.parser import HTMLParser

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from ..client import ApiError, NewsApiClient
from ..config import Config
from .errors import show_error

console = Console()

_BLOCK_TAGS = {"p", "div", "br", "li", "h1", "h2", "h3", "h4", "h5", "h6", "figure", "figcaption", "blockquote", "tr"}


class _TextCollector(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag in _BLOCK_TAGS:
            self.parts.append("\n")

    def handle_data(self, data):
        self.parts.append(data)

    def text(self) -> str:
        lines = [" ".join(line.split()) for line in "".join(self.parts).splitlines()]
        return "\n\n".join(line for line in lines if line)


def html_to_text(html: str) -> str:
    collector = _TextCollector()
    collector.feed(html)
    collector.close()
    return collector.text()


@click.command()
@click.argument("url")
@click.option("--html", "show_html", is_flag=True, help="Print the sanitized HTML instead of text.")
def read(url: str, show_html: bool):
    """Open an article in reading mode."""
    config = Config.load()
    client = NewsApiClient(config.articles_endpoint, config.reader_endpoint)

    try:
        document = client.read_article(url)
    except ApiError as exc:
        show_error(console, "Couldn't load article.", exc)
        raise SystemExit(1)

    console.print(f"\n[bold]{escape(document.get('title') or url)}[/bold]")
    if document.get("byline"):
        console.print(f"[dim]{escape(document['byline'])}[/dim]")
    console.print(f"[dim]{escape(document.get('siteName') or '')}[/dim]")
    if document.get("leadImage"):
        console.print(f"Lead image: {escape(document['leadImage'])}")
    console.print()

    body = document.get("html") or ""
    if show_html:
        console.print(body, markup=False, highlight=False)
    else:
        console.print(Panel(Text(html_to_text(body) or "(empty)"), expand=False))
