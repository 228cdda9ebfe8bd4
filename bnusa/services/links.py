"""
Validation and canonicalization of the external links a writer can attach to
a book: one Spotify link, up to three YouTube videos and up to five generic
resource links.
"""

import ipaddress
import re
from urllib.parse import parse_qs, urlsplit

from bnusa.core.exceptions import ValidationError

MAX_YOUTUBE_LINKS = 3
MAX_RESOURCE_LINKS = 5
MAX_RESOURCE_NAME_LENGTH = 100

# Dot-separated LDH labels (underscore tolerated), checked on the IDNA form
HOST_RE = re.compile(
    r"^(?!-)[a-z0-9_-]{1,63}(?<!-)(?:\.(?!-)[a-z0-9_-]{1,63}(?<!-))*\.?$"
)

SPOTIFY_HOSTS = {"open.spotify.com", "www.open.spotify.com"}
YOUTUBE_HOSTS = {"youtube.com", "m.youtube.com", "youtu.be"}

# Optional locale prefix (/intl-en/) and optional /embed/ before type and id
SPOTIFY_PATH_RE = re.compile(
    r"^/(?:intl-[A-Za-z-]+/)?(?:embed/)?"
    r"(track|playlist|album|artist|episode|show)/([A-Za-z0-9]+)/?$"
)

INVALID_SPOTIFY_MESSAGE = (
    "Invalid Spotify link. Only open.spotify.com "
    "track/playlist/album/artist/episode/show URLs are allowed."
)
INVALID_YOUTUBE_MESSAGE = "Invalid YouTube link provided."
INVALID_RESOURCE_MESSAGE = (
    "Invalid resource link provided. Only http/https URLs are allowed."
)
RESOURCE_NAME_TOO_LONG_MESSAGE = (
    f"Resource link name is too long (max {MAX_RESOURCE_NAME_LENGTH} characters)."
)


def _split(url: str):
    """urlsplit that reports malformed input (bad port, brackets) as None."""
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        return None
    return parts


def _spotify_match(url: str):
    parts = _split(url)
    if parts is None or parts.scheme not in ("http", "https"):
        return None
    if parts.hostname not in SPOTIFY_HOSTS:
        return None
    return SPOTIFY_PATH_RE.match(parts.path)


def is_valid_spotify_url(url: str) -> bool:
    return _spotify_match(url) is not None


def normalize_spotify_url(url: str) -> str:
    """Return `https://open.spotify.com/{type}/{id}` for a valid Spotify URL."""
    match = _spotify_match(url)
    if match is None:
        raise ValidationError(INVALID_SPOTIFY_MESSAGE)
    kind, item_id = match.groups()
    return f"https://open.spotify.com/{kind}/{item_id}"


def youtube_video_id(url: str) -> str | None:
    """Extract the video id from watch, youtu.be, shorts and embed URLs."""
    parts = _split(url)
    if parts is None or not parts.scheme or not parts.hostname:
        return None

    host = parts.hostname
    if host.startswith("www."):
        host = host[len("www."):]
    if host not in YOUTUBE_HOSTS:
        return None

    segments = [s for s in parts.path.split("/") if s]
    if host == "youtu.be":
        if segments and len(segments[0]) > 5:
            return segments[0]
        return None
    if parts.path == "/watch":
        video_ids = parse_qs(parts.query).get("v")
        return video_ids[0] if video_ids and video_ids[0] else None
    if parts.path.startswith(("/shorts/", "/embed/")):
        if len(segments) > 1 and len(segments[1]) > 5:
            return segments[1]
    return None


def normalize_youtube_url(url: str) -> str:
    video_id = youtube_video_id(url)
    if not video_id:
        raise ValidationError(INVALID_YOUTUBE_MESSAGE)
    return f"https://www.youtube.com/watch?v={video_id}"


def normalize_youtube_links(links) -> list[str]:
    """Trim, drop empties, keep the first three, canonicalize, dedupe in order.

    A single invalid entry rejects the whole list.
    """
    if not isinstance(links, list):
        links = []
    cleaned = [s.strip() for s in links if isinstance(s, str) and s.strip()]
    cleaned = cleaned[:MAX_YOUTUBE_LINKS]

    normalized = [normalize_youtube_url(link) for link in cleaned]
    return list(dict.fromkeys(normalized))


def is_valid_host(host: str | None) -> bool:
    """Hostname, IPv4 address or IPv6 literal; Unicode names go through IDNA."""
    if not host:
        return False
    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return False
        return True
    try:
        ascii_host = host.encode("idna").decode("ascii")
    except UnicodeError:
        return False
    return HOST_RE.match(ascii_host.lower()) is not None


def is_valid_http_url(url: str) -> bool:
    parts = _split(url)
    if parts is None:
        return False
    return parts.scheme in ("http", "https") and is_valid_host(parts.hostname)


def normalize_resource_links(links) -> list[dict]:
    """Coerce entries to `{name, url}`, keep five, validate, dedupe by URL."""
    if not isinstance(links, list):
        links = []

    mapped = []
    for item in links:
        if isinstance(item, str):
            url = item.strip()
            if url:
                mapped.append({"name": "", "url": url})
        elif isinstance(item, dict):
            name = item.get("name")
            url = item.get("url")
            name = name.strip() if isinstance(name, str) else ""
            url = url.strip() if isinstance(url, str) else ""
            if url:
                mapped.append({"name": name, "url": url})
    mapped = mapped[:MAX_RESOURCE_LINKS]

    for link in mapped:
        if not is_valid_http_url(link["url"]):
            raise ValidationError(INVALID_RESOURCE_MESSAGE)
        if len(link["name"]) > MAX_RESOURCE_NAME_LENGTH:
            raise ValidationError(RESOURCE_NAME_TOO_LONG_MESSAGE)

    seen = set()
    unique = []
    for link in mapped:
        key = link["url"].lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(link)
    return unique
