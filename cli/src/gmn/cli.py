"""Main CLI entry point for GMN News."""

import click

from .commands import articles, reader


@click.group()
@click.version_option(version="1.0.0")
def main():
    """GMN News - read the latest gaming news from the terminal."""
    pass


main.add_command(articles.articles)
main.add_command(reader.read)


if __name__ == "__main__":
    main()
