# memobbs/content/processor.py
"""Markdown to sanitized HTML conversion for memo content.

A memo's content is kept in three forms: the raw Markdown the user typed,
the rendered and sanitized HTML used for display, and a plain-text
extract used for searching.
"""

from dataclasses import dataclass

import bleach
import markdown
from bleach.html5lib_shim import Filter
from bleach.sanitizer import Cleaner

MARKDOWN_EXTENSIONS = ["fenced_code", "codehilite", "tables", "nl2br", "sane_lists"]

HIGHLIGHT_CLASS = "highlight"

MARKDOWN_EXTENSION_CONFIGS = {
    "codehilite": {
        "css_class": HIGHLIGHT_CLASS,
        "guess_lang": True,
        "use_pygments": True,
    },
}

ALLOWED_TAGS = frozenset(
    {
        # block
        "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
        "figcaption", "figure", "footer", "header", "hr", "li", "main", "nav",
        "ol", "p", "pre", "section", "ul",
        "h1", "h2", "h3", "h4", "h5", "h6",
        # inline
        "a", "abbr", "b", "bdi", "bdo", "br", "cite", "code", "data", "del",
        "dfn", "em", "i", "img", "kbd", "mark", "q", "s", "samp", "small",
        "span", "strong", "sub", "sup", "time", "u", "var", "wbr",
        # tables
        "caption", "col", "colgroup", "table", "tbody", "td", "tfoot", "th",
        "thead", "tr",
    }
)

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})

# Tags that keep any class (syntax highlighting tokens)
FREE_CLASS_TAGS = frozenset({"code", "pre", "span"})

# Tags whose class attribute must match exactly
FIXED_CLASSES = {
    "div": HIGHLIGHT_CLASS,
    "figure": "memo-figure",
    "figcaption": "memo-figcaption",
}

TAG_ATTRIBUTES = {
    "a": frozenset({"href", "title"}),
    "img": frozenset({"src", "alt", "title"}),
    "td": frozenset({"colspan", "rowspan"}),
    "th": frozenset({"colspan", "rowspan"}),
    "ol": frozenset({"start"}),
    "time": frozenset({"datetime"}),
    "data": frozenset({"value"}),
}

IMAGE_ATTRIBUTES = {"class": "memo-img", "data-action": "zoom"}

# Removed together with everything inside them
DROPPED_CONTENT_TAGS = frozenset({"script", "style", "textarea", "noscript"})


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    if name == "class":
        if tag in FREE_CLASS_TAGS:
            return True
        return FIXED_CLASSES.get(tag) == value
    return name in TAG_ATTRIBUTES.get(tag, ())


class DroppedContentFilter(Filter):
    """Removes script-like elements along with their bodies."""

    def __iter__(self):
        depth = 0
        for token in Filter.__iter__(self):
            name = token.get("name")
            if name in DROPPED_CONTENT_TAGS and token["type"] == "StartTag":
                depth += 1
                continue
            if name in DROPPED_CONTENT_TAGS and token["type"] == "EndTag":
                depth = max(depth - 1, 0)
                continue
            if depth == 0:
                yield token


class ImageZoomFilter(Filter):
    """Marks every surviving image as a zoomable memo image."""

    def __iter__(self):
        for token in Filter.__iter__(self):
            if token["type"] in ("StartTag", "EmptyTag") and token["name"] == "img":
                for name, value in IMAGE_ATTRIBUTES.items():
                    token["data"][(None, name)] = value
            yield token


@dataclass(frozen=True)
class ProcessedContent:
    raw: str
    html: str
    text: str


def render_markdown(raw: str) -> str:
    """Render Markdown to (unsanitized) HTML with highlighted code blocks."""
    return markdown.markdown(
        raw,
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
        output_format="html",
    )


def sanitize_html(html: str) -> str:
    """Reduce HTML to the memo allow-list; anything else is dropped."""
    # Cleaner instances are not thread-safe, so one is built per call
    cleaner = Cleaner(
        # Dropped-content tags pass the sanitizer so the filter can see their bounds
        tags=ALLOWED_TAGS | DROPPED_CONTENT_TAGS,
        attributes=_allow_attribute,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
        filters=[DroppedContentFilter, ImageZoomFilter],
    )
    return cleaner.clean(html)


def strip_tags(html: str) -> str:
    return bleach.clean(html, tags=frozenset(), attributes={}, strip=True, strip_comments=True)


def process_content(raw: str) -> ProcessedContent:
    """Convert raw Markdown into its raw/html/text triple."""
    html = sanitize_html(render_markdown(raw))
    return ProcessedContent(raw=raw, html=html, text=strip_tags(html))
