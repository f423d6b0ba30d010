from __future__ import annotations

import nh3

# Safe text markup a reader view can render as-is.
SAFE_TEXT_TAGS: frozenset[str] = frozenset(
    {
        "address", "article", "aside", "footer", "header",
        "h1", "h2", "h3", "h4", "h5", "h6", "hgroup", "main", "nav", "section",
        "blockquote", "dd", "div", "dl", "dt", "hr", "li", "ol", "p", "pre", "ul",
        "a", "abbr", "b", "bdi", "bdo", "br", "cite", "code", "data", "dfn", "em",
        "i", "kbd", "mark", "q", "rb", "rp", "rt", "rtc", "ruby", "s", "samp",
        "small", "span", "strong", "sub", "sup", "time", "u", "var", "wbr",
        "caption", "col", "colgroup", "table", "tbody", "td", "tfoot", "th",
        "thead", "tr",
    }
)
READER_EXTRA_TAGS: frozenset[str] = frozenset({"img", "figure", "figcaption"})
ALLOWED_TAGS: frozenset[str] = SAFE_TEXT_TAGS | READER_EXTRA_TAGS

ALLOWED_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "name", "target", "rel"}),
    "img": frozenset({"src", "alt", "title"}),
    "*": frozenset({"id", "class", "style"}),
}

# Opened tabs must not get a window.opener handle back to the reader page.
FORCED_ANCHOR_ATTRIBUTES: dict[str, str] = {"target": "_blank", "rel": "noopener"}


def sanitize_article_html(html: str) -> str:
    """Reduce extracted article markup to the reader allow-list.

    Script and style contents are dropped together with their tags, event
    handler attributes and unknown tags disappear, comments are stripped and
    anchors are rewritten to open in a new tab without an opener reference.
    """
    if not html.strip():
        return ""
    return nh3.clean(
        html,
        tags=set(ALLOWED_TAGS),
        attributes={tag: set(names) for tag, names in ALLOWED_ATTRIBUTES.items()},
        strip_comments=True,
        # rel is forced below; nh3 rejects link_rel while rel is an allowed attribute.
        link_rel=None,
        set_tag_attribute_values={"a": dict(FORCED_ANCHOR_ATTRIBUTES)},
    )
