"""Text processing helpers shared by ingestion and rendering."""

import re

from selectolax.parser import HTMLParser

_WHITESPACE = re.compile(r"\s+")
_TITLE_KEY = re.compile(r"[^a-z0-9]")


def normalize_whitespace(text: str | None) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def clean_html_text(html_text: str | None) -> str:
    """Strip tags and decode entities, returning plain text.

    Args:
        html_text: HTML fragment (plain text passes through)

    Returns:
        Whitespace-normalized plain text
    """
    if not html_text:
        return ""
    if "<" not in html_text and "&" not in html_text:
        return normalize_whitespace(html_text)

    tree = HTMLParser(html_text)
    root = tree.body or tree.root
    if root is None:
        return ""
    return normalize_whitespace(root.text(separator=" "))


def first_image_src(html_text: str | None) -> str | None:
    """URL of the first <img> in an HTML fragment, if any."""
    if not html_text or "<img" not in html_text.lower():
        return None
    node = HTMLParser(html_text).css_first("img[src]")
    if node is None:
        return None
    return node.attributes.get("src") or None


def title_key(title: str, length: int = 50) -> str:
    """Compact exact-match key for a headline."""
    return _TITLE_KEY.sub("", title.lower())[:length]
