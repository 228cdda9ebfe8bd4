"""
Threaded reader comments on published books.
"""

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text

from bnusa.db.base import Base
from bnusa.db.types import GUID, new_id, utcnow

MAX_COMMENT_LENGTH = 1000


class BookComment(Base):
    """A comment or a reply (`parent_id` set) on a book.

    `book_id` and `parent_id` are plain strings, not foreign keys: comments
    outlive the book they were written on.
    """

    __tablename__ = "book_comments"

    id = Column(GUID(), primary_key=True, default=new_id)
    book_id = Column(String(36), index=True, nullable=False)

    # Commenter snapshot
    user_id = Column(String(128), nullable=False)
    user_email = Column(String(255), nullable=False, default="")
    user_name = Column(String(255), nullable=False, default="")
    user_profile_image = Column(String(1000), default="")

    content = Column(Text, nullable=False)
    parent_id = Column(String(36), index=True, nullable=True)

    # Never set by the delete path, which removes rows outright
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_book_comments_book_created", "book_id", "created_at"),
        Index("ix_book_comments_parent_created", "parent_id", "created_at"),
        Index("ix_book_comments_user_created", "user_id", "created_at"),
    )
