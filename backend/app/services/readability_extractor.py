from __future__ import annotations

import logging
from dataclasses import dataclass
from html.parser import HTMLParser

import lxml.html
from lxml.etree import ParserError
from readability import Document
from readability.readability import Unparseable

LOGGER = logging.getLogger("gmn_news.extraction")

_READABILITY_NO_TITLE = "[no-title]"
_EXCERPT_MAX_CHARS = 300
_BYLINE_MAX_CHARS = 100
# Same markers Mozilla Readability treats as an in-page byline.
_BYLINE_XPATH = (
    "//*[@rel='author'"
    " or contains(@itemprop, 'author')"
    " or contains(translate(@class, 'BYLINE', 'byline'), 'byline')"
    " or contains(translate(@id, 'BYLINE', 'byline'), 'byline')]"
)


@dataclass(frozen=True)
class ExtractedArticle:
    title: str | None
    byline: str | None
    excerpt: str | None
    site_name: str | None
    content_html: str


@dataclass(frozen=True)
class PageMetadata:
    title: str | None
    byline: str | None
    description: str | None
    site_name: str | None
    lead_image: str | None


class _PageMetadataParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._meta: dict[str, str] = {}

    def meta_value(self, key: str) -> str | None:
        return _normalize_optional_text(self._meta.get(key.lower()))

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag.lower() != "meta":
            return
        attrs_map = {name.lower(): (value or "").strip() for name, value in attrs}
        key = attrs_map.get("property") or attrs_map.get("name") or attrs_map.get("itemprop")
        normalized_key = _normalize_optional_text(key)
        normalized_value = _normalize_optional_text(attrs_map.get("content"))
        if normalized_key is None or normalized_value is None:
            return
        lowered = normalized_key.lower()
        if lowered not in self._meta:
            self._meta[lowered] = normalized_value


def extract_page_metadata(html_text: str) -> PageMetadata:
    parser = _PageMetadataParser()
    parser.feed(html_text)
    parser.close()
    return PageMetadata(
        title=(
            parser.meta_value("dc:title")
            or parser.meta_value("og:title")
            or parser.meta_value("title")
            or parser.meta_value("twitter:title")
        ),
        byline=(
            parser.meta_value("author")
            or parser.meta_value("dc:creator")
            or parser.meta_value("parsely-author")
            or _non_url(parser.meta_value("article:author"))
        ),
        description=(
            parser.meta_value("dc:description")
            or parser.meta_value("og:description")
            or parser.meta_value("description")
            or parser.meta_value("twitter:description")
        ),
        site_name=parser.meta_value("og:site_name"),
        lead_image=parser.meta_value("og:image") or parser.meta_value("twitter:image"),
    )


def extract_readable_article(
    html_text: str,
    *,
    base_url: str,
    metadata: PageMetadata | None = None,
) -> ExtractedArticle | None:
    """Isolate the main article body of a page.

    Relative links and image sources inside the result are resolved against
    `base_url`. Returns None when the page has no extractable body; callers
    must not fall back to the raw page.
    """
    if not html_text.strip():
        return None
    try:
        document = Document(html_text, url=base_url)
        content_html = document.summary(html_partial=True)
        readability_title = document.short_title()
    except (Unparseable, ParserError, ValueError) as exc:
        LOGGER.info("readability could not parse page url=%s error=%s", base_url, exc)
        return None

    body_text = _text_content(content_html)
    if body_text is None:
        return None

    if metadata is None:
        metadata = extract_page_metadata(html_text)
    title = metadata.title
    if title is None and readability_title and readability_title != _READABILITY_NO_TITLE:
        title = _normalize_optional_text(readability_title)
    return ExtractedArticle(
        title=title,
        byline=metadata.byline or find_inline_byline(html_text),
        excerpt=metadata.description or _first_paragraph(content_html),
        site_name=metadata.site_name,
        content_html=content_html,
    )


def _text_content(fragment_html: str) -> str | None:
    if not fragment_html.strip():
        return None
    try:
        root = lxml.html.fragment_fromstring(fragment_html, create_parent="div")
    except ParserError:
        return None
    return _normalize_optional_text(" ".join(root.text_content().split()))


def _first_paragraph(fragment_html: str) -> str | None:
    try:
        root = lxml.html.fragment_fromstring(fragment_html, create_parent="div")
    except ParserError:
        return None
    for paragraph in root.iter("p"):
        text = _normalize_optional_text(" ".join(paragraph.text_content().split()))
        if text is not None:
            return text[:_EXCERPT_MAX_CHARS]
    return None


def _non_url(value: str | None) -> str | None:
    if value is None or value.startswith(("http://", "https://")):
        return None
    return value


def _normalize_optional_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if not normalized:
        return None
    return normalized


def find_inline_byline(html_text: str) -> str | None:
    """First short author credit marked up in the page body, if any."""
    try:
        root = lxml.html.fromstring(html_text)
    except (ParserError, ValueError):
        return None
    for element in root.xpath(_BYLINE_XPATH):
        if not isinstance(element, lxml.html.HtmlElement) or element.tag == "meta":
            continue
        text = _normalize_optional_text(" ".join(element.text_content().split()))
        if text is not None and len(text) < _BYLINE_MAX_CHARS:
            return text
    return None
