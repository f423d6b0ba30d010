"""Configuration management for the GMN News CLI."""

import os
import re
from dataclasses import dataclass
from pathlib import Path

import yaml

DEFAULT_ARTICLES_ENDPOINT = "http://localhost:3000/api/articles"
CONFIG_PATH = Path.home() / ".config" / "gmn-news" / "config.yaml"


def normalize_articles_endpoint(raw: str | None) -> str | None:
    """Accept a bare origin, `<origin>/api` or `<origin>/api/articles`."""
    if raw is None or not raw.strip():
        return None
    value = raw.strip().rstrip("/")
    if re.search(r"/api/articles$", value, flags=re.IGNORECASE):
        return value
    if re.search(r"/api$", value, flags=re.IGNORECASE):
        return f"{value}/articles"
    return f"{value}/api/articles"


def reader_endpoint_for(articles_endpoint: str) -> str:
    return re.sub(r"/api/articles$", "/api/article", articles_endpoint, flags=re.IGNORECASE)


@dataclass
class Config:
    """CLI configuration."""

    articles_endpoint: str = DEFAULT_ARTICLES_ENDPOINT
    page_size: int = 20

    @property
    def reader_endpoint(self) -> str:
        return reader_endpoint_for(self.articles_endpoint)

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load from ~/.config/gmn-news/config.yaml; GMN_API_BASE wins over the file."""
        config_path = path or CONFIG_PATH
        data: dict = {}
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        endpoint = (
            normalize_articles_endpoint(os.environ.get("GMN_API_BASE"))
            or normalize_articles_endpoint(data.get("api_base"))
            or DEFAULT_ARTICLES_ENDPOINT
        )
        return cls(articles_endpoint=endpoint, page_size=int(data.get("page_size", 20)))

    def save(self, path: Path | None = None):
        """Save config to file."""
        config_path = path or CONFIG_PATH
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump({"api_base": self.articles_endpoint, "page_size": self.page_size}, f)
