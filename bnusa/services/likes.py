"""
Like counter: one row per (book, user), toggled idempotently.
"""

import logging

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bnusa.core.exceptions import ValidationError
from bnusa.models.book import Book
from bnusa.models.book_like import BookLike
from bnusa.schemas.auth import AuthUser

logger = logging.getLogger(__name__)

LIKE = "like"
UNLIKE = "unlike"

# Shown in the Kurdish UI as-is
LIKED_MESSAGE = "ڵایک کرا"
UNLIKED_MESSAGE = "ڵایکەکە لابردرا"

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class LikeService:
    """Per-user likes on published books"""

    @staticmethod
    def count_likes(db: Session, book: Book) -> int:
        return db.query(BookLike).filter(BookLike.book_id == str(book.id)).count()

    @staticmethod
    def has_liked(db: Session, book: Book, user: AuthUser) -> bool:
        return (
            db.query(BookLike.id)
            .filter(BookLike.book_id == str(book.id), BookLike.user_id == user.uid)
            .first()
            is not None
        )

    @staticmethod
    def add_like(db: Session, book: Book, user: AuthUser) -> None:
        """Insert the like unless it already exists; repeated likes are no-ops"""
        values = {
            "book_id": str(book.id),
            "user_id": user.uid,
            "user_email": user.email or "",
            "user_name": user.name_or_email,
        }
        insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
        if insert is not None:
            stmt = (
                insert(BookLike)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["book_id", "user_id"])
            )
            db.execute(stmt)
            db.commit()
            return

        if LikeService.has_liked(db, book, user):
            return
        try:
            db.add(BookLike(**values))
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent like from the same user
            db.rollback()

    @staticmethod
    def remove_like(db: Session, book: Book, user: AuthUser) -> None:
        db.query(BookLike).filter(
            BookLike.book_id == str(book.id), BookLike.user_id == user.uid
        ).delete(synchronize_session="fetch")
        db.commit()

    @staticmethod
    def toggle_like(db: Session, book: Book, user: AuthUser, action: str | None) -> dict:
        """Apply `like`/`unlike`, then read the count and status back"""
        if action == LIKE:
            LikeService.add_like(db, book, user)
        elif action == UNLIKE:
            LikeService.remove_like(db, book, user)
        else:
            raise ValidationError("Invalid action. Use 'like' or 'unlike'.")

        return {
            "success": True,
            "likes": LikeService.count_likes(db, book),
            "hasLiked": LikeService.has_liked(db, book, user),
            "message": LIKED_MESSAGE if action == LIKE else UNLIKED_MESSAGE,
        }
