from __future__ import annotations

import logging
from urllib.parse import urlparse

from backend.app.models.article_contracts import ReaderDocument
from backend.app.services.errors import (
    ExtractionError,
    InputValidationError,
    InternalError,
    NewsProxyError,
    UpstreamError,
)
from backend.app.services.html_sanitizer import sanitize_article_html
from backend.app.services.http_client import (
    HttpStatusError,
    HttpTransportError,
    http_get,
)
from backend.app.services.readability_extractor import (
    ExtractedArticle,
    PageMetadata,
    extract_page_metadata,
    extract_readable_article,
)
from backend.app.telemetry import TelemetryClient

LOGGER = logging.getLogger("gmn_news.reader")


class ArticleReaderService:
    """Reading mode: fetch one trusted article page and return a sanitized document.

    Every step is a hard gate. Validation failures never reach the network,
    nothing is retried and nothing is cached between requests.
    """

    def __init__(
        self,
        *,
        trusted_domain: str,
        site_display_name: str,
        user_agent: str,
        http_timeout_seconds: float | None = None,
        telemetry: TelemetryClient | None = None,
    ) -> None:
        self._trusted_domain = trusted_domain.strip().lower().lstrip(".")
        self._site_display_name = site_display_name
        self._user_agent = user_agent
        self._http_timeout_seconds = http_timeout_seconds
        self._telemetry = telemetry if telemetry is not None else TelemetryClient.disabled()

    def read_article(self, url: str | None) -> ReaderDocument:
        article_url = self.validate_article_url(url)
        html_text = self._fetch_html(article_url)
        try:
            document = self._build_document(article_url, html_text)
        except NewsProxyError:
            raise
        except Exception as exc:
            LOGGER.exception("reader pipeline failed url=%s", article_url)
            raise InternalError("Reader failed", detail=str(exc)) from exc

        self._telemetry.emit(
            "article.reader.completed",
            article_url=article_url,
            has_byline=document.byline is not None,
            has_lead_image=document.lead_image is not None,
            markup_chars=len(document.html),
        )
        return document

    def validate_article_url(self, url: str | None) -> str:
        candidate = (url or "").strip()
        if not candidate:
            raise InputValidationError("Missing url param")

        parsed = urlparse(candidate)
        try:
            host = (parsed.hostname or "").lower()
            _ = parsed.port
        except ValueError as exc:
            raise InputValidationError("Invalid url param", detail=str(exc)) from exc
        if parsed.scheme.lower() not in {"http", "https"} or not host:
            raise InputValidationError("Invalid url param", detail=f"url={candidate}")

        if not self.is_trusted_host(host):
            self._telemetry.emit("article.reader.rejected", host=host)
            LOGGER.info("reader rejected untrusted host=%s", host)
            raise InputValidationError(
                f"Only {self._site_display_name} URLs are allowed",
                detail=f"untrusted host={host}",
            )
        return candidate

    def is_trusted_host(self, host: str) -> bool:
        normalized = host.strip().lower().rstrip(".")
        return normalized == self._trusted_domain or normalized.endswith(
            f".{self._trusted_domain}"
        )

    def _fetch_html(self, url: str) -> str:
        try:
            response = http_get(
                url,
                headers={
                    "Accept": "text/html,application/xhtml+xml",
                    "User-Agent": self._user_agent,
                },
                timeout_seconds=self._http_timeout_seconds,
            )
        except HttpStatusError as exc:
            LOGGER.warning("reader upstream rejected fetch status=%s url=%s", exc.status, url)
            raise UpstreamError(exc.status, url=url) from exc
        except HttpTransportError as exc:
            LOGGER.error("reader upstream unreachable url=%s error=%s", url, exc)
            raise InternalError("Reader failed", detail=str(exc)) from exc
        return response.text()

    def _extract(
        self,
        html_text: str,
        *,
        base_url: str,
        metadata: PageMetadata,
    ) -> ExtractedArticle | None:
        return extract_readable_article(html_text, base_url=base_url, metadata=metadata)

    def _build_document(self, article_url: str, html_text: str) -> ReaderDocument:
        metadata = extract_page_metadata(html_text)
        extracted = self._extract(html_text, base_url=article_url, metadata=metadata)
        if extracted is None:
            LOGGER.warning("readability produced no article url=%s", article_url)
            raise ExtractionError("Unable to parse article", detail=f"url={article_url}")

        return ReaderDocument(
            title=extracted.title or "",
            byline=extracted.byline,
            excerpt=extracted.excerpt,
            site_name=extracted.site_name or self._site_display_name,
            lead_image=metadata.lead_image,
            html=sanitize_article_html(extracted.content_html),
        )
