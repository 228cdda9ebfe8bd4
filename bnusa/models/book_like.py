"""
One reader's like on a book.
"""

from sqlalchemy import Column, DateTime, String, UniqueConstraint

from bnusa.db.base import Base
from bnusa.db.types import GUID, new_id, utcnow


class BookLike(Base):
    """Like row; at most one per (book, user)."""

    __tablename__ = "book_likes"

    id = Column(GUID(), primary_key=True, default=new_id)
    book_id = Column(String(36), index=True, nullable=False)
    user_id = Column(String(128), index=True, nullable=False)
    user_email = Column(String(255), nullable=False, default="")
    user_name = Column(String(255), nullable=False, default="")

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("book_id", "user_id", name="uq_book_likes_book_user"),
    )
