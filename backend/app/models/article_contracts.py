from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


def _normalize_optional_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if not normalized:
        return None
    return normalized


class _WireModel(BaseModel):
    """JSON keys are camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ArticleSummary(_WireModel):
    title: str
    link: str
    date: str | None = None
    deck: str | None = None
    image: str | None = None

    @field_validator("deck", "image", "date", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return _normalize_optional_text(value)


class PagingInfo(_WireModel):
    limit: int
    offset: int
    count: int
    has_more: bool


class ArticleListResponse(_WireModel):
    articles: list[ArticleSummary]
    paging: PagingInfo


class ReaderDocument(_WireModel):
    title: str
    byline: str | None = None
    excerpt: str | None = None
    site_name: str
    lead_image: str | None = None
    html: str

    @field_validator("byline", "excerpt", "lead_image", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return _normalize_optional_text(value)


class ErrorResponse(_WireModel):
    error: str


class PingResponse(_WireModel):
    ok: Literal[True] = True
