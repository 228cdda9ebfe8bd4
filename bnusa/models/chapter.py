"""
Chapter model for book content.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)

from bnusa.db.base import Base
from bnusa.db.types import GUID, new_id, utcnow


class Chapter(Base):
    """Chapter model for book content."""

    __tablename__ = "ktebnuschapters"

    id = Column(GUID(), primary_key=True, default=new_id)
    book_id = Column(GUID(), ForeignKey("ktebnus.id"), index=True, nullable=False)

    title = Column(String(1000), nullable=False)
    content = Column(Text, nullable=False)  # Sanitized HTML
    order = Column(Integer, nullable=False, default=1)  # Assigned server-side
    is_draft = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_ktebnuschapters_book_order", "book_id", "order", unique=True),
        Index("ix_ktebnuschapters_book_draft", "book_id", "is_draft"),
    )
