"""
Book model for Kteb Nus serialized books.
"""

import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String, Text

from bnusa.db.base import Base
from bnusa.db.types import GUID, new_id, utcnow


class BookStatus(enum.Enum):
    """Writing status shown to readers."""

    ONGOING = "ongoing"
    FINISHED = "finished"


class Book(Base):
    """A writer's book with its publication flags.

    The three flags form the publishing state machine:
    draft (True, False, False) -> pending review (False, True, False) ->
    published (False, False, True). Only the first transition happens here;
    publishing is done by the review tooling.
    """

    __tablename__ = "ktebnus"

    id = Column(GUID(), primary_key=True, default=new_id)
    slug = Column(String(255), unique=True, index=True, nullable=False)

    # Owner and author snapshot taken at creation time
    user_id = Column(String(128), index=True, nullable=False)
    author_uid = Column(String(128))
    author_name = Column(String(255), default="")
    author_username = Column(String(255), default="")
    author_email = Column(String(255), default="")
    author_photo_url = Column(String(1000), default="")

    # Content metadata
    title = Column(String(1000), nullable=False)
    description = Column(Text, nullable=False)
    genre = Column(String(255), nullable=False)
    genres = Column(JSON)  # optional, up to 3; `genre` stays primary
    status = Column(String(20), default=BookStatus.ONGOING.value, nullable=False)
    cover_image = Column(String(1000), default="")

    # Enrichment links
    spotify_link = Column(String(500), default="")
    youtube_links = Column(JSON, default=list)
    resource_links = Column(JSON, default=list)

    # Publication state
    is_draft = Column(Boolean, default=True, nullable=False)
    is_pending_review = Column(Boolean, default=False, nullable=False)
    is_published = Column(Boolean, default=False, nullable=False)

    views = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_ktebnus_user_draft", "user_id", "is_draft"),
        Index("ix_ktebnus_user_published", "user_id", "is_published"),
        Index("ix_ktebnus_user_updated", "user_id", "updated_at"),
        Index("ix_ktebnus_pending_review", "is_pending_review"),
    )
