"""
Column types and defaults shared by the Kteb Nus models.

Production runs on PostgreSQL, the test suite on SQLite; the helpers here keep
identifiers and timestamps behaving the same on both.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.types import CHAR, TypeDecorator


def utcnow() -> datetime:
    """Timestamp default with microsecond precision (SQLite `now()` has seconds)."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """
    UUID column exposed to Python as a string.

    Ids travel through URLs and JSON as strings, and comments reference books
    and parent comments by their string form, so the ORM side is always `str`.

    - Postgres: native UUID
    - Other DBs (e.g. SQLite): CHAR(36)
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_UUID(as_uuid=False))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value: Any, dialect):
        if value is None:
            return None
        # Raises ValueError on malformed ids; callers validate with `is_valid_id`
        return str(uuid.UUID(str(value)))

    def process_result_value(self, value: Any, dialect):
        if value is None:
            return None
        return str(value)


def is_valid_id(value: str | None) -> bool:
    """Whether `value` parses as a UUID (path parameters are untrusted)."""
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except (ValueError, TypeError):
        return False
    return True
