"""Book slug generation."""

import random
import re
import unicodedata

SLUG_SUFFIX_MIN = 1_000_000
SLUG_SUFFIX_MAX = 9_999_999
FALLBACK_BASE = "book"

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*-\d{7}$")


def slugify(title: str) -> str:
    """Lowercase ASCII slug of `title`; empty when nothing survives."""
    text = unicodedata.normalize("NFKD", title or "")
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    text = re.sub(r"[^a-z0-9\s-]", "", text)
    text = re.sub(r"[-\s]+", "-", text)
    return text.strip("-")


def generate_book_slug(title: str) -> str:
    """Title slug plus a random 7-digit suffix.

    Kurdish (Arabic script) titles have no ASCII form, so they fall back to
    `book-NNNNNNN`. Collisions are not checked; the unique index on
    `ktebnus.slug` is the backstop.
    """
    base = slugify(title) or FALLBACK_BASE
    suffix = random.randint(SLUG_SUFFIX_MIN, SLUG_SUFFIX_MAX)
    return f"{base}-{suffix}"


def is_valid_slug(slug: str) -> bool:
    return bool(_SLUG_RE.match(slug or ""))
