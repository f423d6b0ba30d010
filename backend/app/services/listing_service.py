from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, cast
from urllib.parse import urlencode

from backend.app.models.article_contracts import ArticleListResponse, ArticleSummary, PagingInfo
from backend.app.services.errors import InternalError, UpstreamError
from backend.app.services.http_client import (
    HttpStatusError,
    HttpTransportError,
    http_get,
)
from backend.app.telemetry import TelemetryClient

LOGGER = logging.getLogger("gmn_news.listing")

LISTING_SORT = "publish_date:desc"
# Upstream image renditions, best quality first.
IMAGE_FIELD_PRIORITY: tuple[str, ...] = (
    "original",
    "super_url",
    "medium_url",
    "small_url",
    "square_medium",
    "square_small",
    "thumb_url",
    "tiny_url",
)


def pick_image(image: Mapping[str, Any] | None) -> str | None:
    if not isinstance(image, Mapping):
        return None
    for field_name in IMAGE_FIELD_PRIORITY:
        value = image.get(field_name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def to_article_summary(item: Mapping[str, Any]) -> ArticleSummary:
    publish_date = item.get("publish_date")
    return ArticleSummary(
        title=_to_text(item.get("title")),
        link=_to_text(item.get("site_detail_url")),
        date=publish_date[:10] if isinstance(publish_date, str) else None,
        deck=item.get("deck"),
        image=pick_image(cast(Mapping[str, Any] | None, item.get("image"))),
    )


class ArticleListingService:
    def __init__(
        self,
        *,
        api_base_url: str,
        api_key: str | None,
        user_agent: str,
        default_limit: int = 20,
        http_timeout_seconds: float | None = None,
        telemetry: TelemetryClient | None = None,
    ) -> None:
        self._api_base_url = api_base_url
        self._api_key = api_key
        self._user_agent = user_agent
        self._default_limit = max(0, default_limit)
        self._http_timeout_seconds = http_timeout_seconds
        self._telemetry = telemetry if telemetry is not None else TelemetryClient.disabled()
        if api_key is None:
            LOGGER.warning("no listing API key configured; upstream will likely reject requests")

    @property
    def default_limit(self) -> int:
        return self._default_limit

    def list_articles(self, *, limit: int | None = None, offset: int = 0) -> ArticleListResponse:
        resolved_limit = self._default_limit if limit is None else max(0, limit)
        resolved_offset = max(0, offset)

        payload = self._fetch_listing(limit=resolved_limit, offset=resolved_offset)
        raw_results = payload.get("results")
        items = cast(list[object], raw_results) if isinstance(raw_results, list) else []
        try:
            articles = [
                to_article_summary(cast(Mapping[str, Any], item))
                for item in items
                if isinstance(item, Mapping)
            ][:resolved_limit]
        except ValueError as exc:
            LOGGER.exception("listing item mapping failed offset=%s", resolved_offset)
            raise InternalError("Failed to fetch", detail=str(exc)) from exc

        paging = PagingInfo(
            limit=resolved_limit,
            offset=resolved_offset,
            count=len(articles),
            has_more=len(articles) == resolved_limit,
        )
        self._telemetry.emit(
            "articles.list.completed",
            limit=resolved_limit,
            offset=resolved_offset,
            count=paging.count,
            has_more=paging.has_more,
        )
        return ArticleListResponse(articles=articles, paging=paging)

    def _build_listing_url(self, *, limit: int, offset: int) -> str:
        params: list[tuple[str, str]] = []
        if self._api_key is not None:
            params.append(("api_key", self._api_key))
        params.extend(
            [
                ("format", "json"),
                ("sort", LISTING_SORT),
                ("limit", str(limit)),
                ("offset", str(offset)),
            ]
        )
        separator = "&" if "?" in self._api_base_url else "?"
        return f"{self._api_base_url}{separator}{urlencode(params)}"

    def _fetch_listing(self, *, limit: int, offset: int) -> dict[str, Any]:
        url = self._build_listing_url(limit=limit, offset=offset)
        try:
            response = http_get(
                url,
                headers={"Accept": "application/json", "User-Agent": self._user_agent},
                timeout_seconds=self._http_timeout_seconds,
            )
        except HttpStatusError as exc:
            LOGGER.warning(
                "listing upstream rejected request status=%s limit=%s offset=%s",
                exc.status,
                limit,
                offset,
            )
            raise UpstreamError(exc.status, url=self._api_base_url) from exc
        except HttpTransportError as exc:
            LOGGER.error("listing upstream unreachable error=%s", exc)
            raise InternalError("Failed to fetch", detail=str(exc)) from exc

        try:
            parsed = json.loads(response.text())
        except json.JSONDecodeError as exc:
            LOGGER.error("listing upstream returned invalid JSON offset=%s", offset)
            raise InternalError("Failed to fetch", detail="invalid_json") from exc
        if not isinstance(parsed, dict):
            LOGGER.error("listing upstream returned non-object JSON offset=%s", offset)
            raise InternalError("Failed to fetch", detail="unexpected_json_shape")
        return cast(dict[str, Any], parsed)


def _to_text(value: object) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""
