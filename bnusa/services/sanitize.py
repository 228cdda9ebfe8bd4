"""
Input sanitation for book, chapter and comment payloads.

Chapter bodies come from the rich text editor and keep a small whitelist of
formatting markup; every other field is treated as plain text.
"""

import re
from typing import Any

import nh3

MAX_TEXT_LENGTH = 1000
EXCERPT_LENGTH = 160

ALLOWED_TAGS = {
    "p", "br", "strong", "em", "u", "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "blockquote", "a", "img", "div", "span",
}
_STYLED = {"class", "style"}
ALLOWED_ATTRIBUTES = {
    "a": {"href", "title", "target", "style"},
    "img": {"src", "alt", "title", "width", "height"},
    **{
        tag: _STYLED
        for tag in ("div", "span", "p", "blockquote", "li", "h1", "h2", "h3", "h4", "h5", "h6")
    },
}
_COLOR_RE = re.compile(
    r"#(?:[0-9a-fA-F]{3}){1,2}|rgb\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*\)"
)
# Property -> accepted value pattern
ALLOWED_STYLES = {
    "color": _COLOR_RE,
    "background-color": _COLOR_RE,
    "text-align": re.compile(r"left|right|center|justify"),
    "text-decoration": re.compile(r"none|underline|line-through"),
}
ALLOWED_URL_SCHEMES = {"http", "https", "mailto"}
# Pasted images arrive as data: URIs; no other attribute may carry one
DATA_URL_ATTRIBUTES = {("img", "src")}

_TAG_RE = re.compile(r"<[^>]*>")


def filter_style(style: str) -> str:
    """Keep only whitelisted declarations whose value matches its pattern."""
    kept = []
    for declaration in style.split(";"):
        prop, sep, value = declaration.partition(":")
        prop, value = prop.strip().lower(), value.strip()
        pattern = ALLOWED_STYLES.get(prop)
        if sep and pattern is not None and pattern.fullmatch(value):
            kept.append(f"{prop}:{value}")
    return ";".join(kept)


def _filter_attribute(element: str, attribute: str, value: str) -> str | None:
    if value.strip().lower().startswith("data:"):
        return value if (element, attribute) in DATA_URL_ATTRIBUTES else None
    if attribute == "style":
        return filter_style(value) or None
    return value


def sanitize_content(content: str) -> str:
    """Strip scripts, event handlers and unknown markup from chapter HTML."""
    if not content:
        return ""
    return nh3.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        attribute_filter=_filter_attribute,
        url_schemes=ALLOWED_URL_SCHEMES | {"data"},
        filter_style_properties=set(ALLOWED_STYLES),
    )


def sanitize_text(text: Any) -> str:
    """Plain text: trimmed, angle brackets removed, capped at 1000 chars."""
    if not text or not isinstance(text, str):
        return ""
    return text.strip().replace("<", "").replace(">", "")[:MAX_TEXT_LENGTH]


def strip_html(html: str | None) -> str:
    if not isinstance(html, str):
        return ""
    return _TAG_RE.sub("", html)


def make_excerpt(html: str | None, length: int = EXCERPT_LENGTH) -> str:
    text = strip_html(html)
    if len(text) > length:
        return text[:length] + "..."
    return text


def _sanitize_resource_item(item: Any) -> dict | None:
    if not item:
        return None
    if isinstance(item, str):
        url = sanitize_text(item)
        return {"name": "", "url": url} if url else None
    if isinstance(item, dict):
        name = sanitize_text(item.get("name")) if isinstance(item.get("name"), str) else ""
        url = sanitize_text(item.get("url")) if isinstance(item.get("url"), str) else ""
        return {"name": name, "url": url} if url else None
    return None


def sanitize_book_data(data: dict) -> dict:
    """Sanitize a book/chapter payload.

    Keys missing from `data` come back as None so callers can tell "not sent"
    from "sent empty". Link fields are only cleaned here; `bnusa.services.links`
    validates and canonicalizes them.
    """
    clean = dict(data)
    for key in ("title", "description", "genre", "status", "cover_image"):
        if key in data:
            clean[key] = sanitize_text(data[key]) if data[key] is not None else None
        else:
            clean[key] = None

    content = data.get("content")
    clean["content"] = sanitize_content(content) if isinstance(content, str) and content else None

    genres = data.get("genres")
    if isinstance(genres, list):
        clean["genres"] = [sanitize_text(g) for g in genres]
    else:
        clean["genres"] = None

    spotify = data.get("spotify_link")
    clean["spotify_link"] = sanitize_text(spotify) if isinstance(spotify, str) else None

    youtube = data.get("youtube_links")
    if isinstance(youtube, list):
        clean["youtube_links"] = [
            cleaned for cleaned in (sanitize_text(u) if isinstance(u, str) else "" for u in youtube)
            if cleaned
        ]
    else:
        clean["youtube_links"] = None

    resources = data.get("resource_links")
    if isinstance(resources, list):
        clean["resource_links"] = [
            item for item in (_sanitize_resource_item(r) for r in resources) if item
        ]
    else:
        clean["resource_links"] = None

    return clean
