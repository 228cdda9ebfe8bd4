"""
Chapter store: chapters are appended in order, edited by the book owner and
read publicly once both the book and the chapter are published.
"""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from bnusa.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from bnusa.db.types import is_valid_id, utcnow
from bnusa.models.book import Book
from bnusa.models.chapter import Chapter
from bnusa.schemas.auth import AuthUser
from bnusa.services.books import clamp_limit, isoformat
from bnusa.services.sanitize import make_excerpt, sanitize_book_data

logger = logging.getLogger(__name__)

OWNER_PAGE_SIZE = 3
PUBLIC_PAGE_SIZE = 3
MAX_PAGE_SIZE = 50

CHAPTER_NOT_FOUND = "Chapter not found"


def chapter_to_response(chapter: Chapter) -> dict:
    return {
        "id": str(chapter.id),
        "bookId": str(chapter.book_id),
        "title": chapter.title,
        "content": chapter.content,
        "order": chapter.order,
        "isDraft": chapter.is_draft,
        "createdAt": isoformat(chapter.created_at),
        "updatedAt": isoformat(chapter.updated_at),
    }


def chapter_to_list_item(chapter: Chapter) -> dict:
    """Owner list entry: an excerpt instead of the full body."""
    return {
        "id": str(chapter.id),
        "title": chapter.title,
        "order": chapter.order,
        "isDraft": bool(chapter.is_draft),
        "createdAt": isoformat(chapter.created_at),
        "updatedAt": isoformat(chapter.updated_at),
        "excerpt": make_excerpt(chapter.content),
    }


def chapter_to_public_item(chapter: Chapter) -> dict:
    return {
        "id": str(chapter.id),
        "title": chapter.title or "",
        "order": chapter.order or 0,
        "createdAt": isoformat(chapter.created_at),
        "updatedAt": isoformat(chapter.updated_at),
    }


def chapter_to_public_response(chapter: Chapter, book: Book) -> dict:
    """Reader view with the minimal book info the reading page shows."""
    return {
        **chapter_to_public_item(chapter),
        "content": chapter.content or "",
        "book": {
            "id": str(book.id),
            "slug": book.slug,
            "title": book.title or "",
        },
    }


class ChapterService:
    """Operations on the chapters of a book"""

    @staticmethod
    def create_chapter(db: Session, book: Book, payload: dict) -> Chapter:
        """Append a chapter; its order is always last order + 1"""
        data = sanitize_book_data(payload)
        if not data["title"] or not data["content"]:
            raise ValidationError("Title and content are required")

        last_order = (
            db.query(func.max(Chapter.order))
            .filter(Chapter.book_id == book.id)
            .scalar()
        )
        is_draft = payload.get("is_draft")

        chapter = Chapter(
            book_id=book.id,
            title=data["title"],
            content=data["content"],
            is_draft=is_draft if isinstance(is_draft, bool) else True,
            order=(last_order or 0) + 1,
        )
        db.add(chapter)
        db.commit()
        db.refresh(chapter)
        return chapter

    @staticmethod
    def list_chapters(
        db: Session, book: Book, skip: int | None = None, limit: int | None = None
    ) -> dict:
        """Owner listing; reads one row past the page to compute `hasMore`"""
        limit = clamp_limit(limit, OWNER_PAGE_SIZE, MAX_PAGE_SIZE)
        skip = max(0, skip or 0)

        rows = (
            db.query(Chapter)
            .filter(Chapter.book_id == book.id)
            .order_by(Chapter.order)
            .offset(skip)
            .limit(limit + 1)
            .all()
        )
        has_more = len(rows) > limit
        return {
            "success": True,
            "chapters": [chapter_to_list_item(c) for c in rows[:limit]],
            "hasMore": has_more,
        }

    @staticmethod
    def get_owned_chapter(db: Session, chapter_id: str, user: AuthUser) -> Chapter:
        """Chapter by id, checked against the owner of its book"""
        chapter = None
        if is_valid_id(chapter_id):
            chapter = db.query(Chapter).filter(Chapter.id == chapter_id).first()
        if not chapter:
            raise NotFoundError(CHAPTER_NOT_FOUND)

        book = db.query(Book).filter(Book.id == chapter.book_id).first()
        if not book:
            raise NotFoundError("Associated book not found")
        if book.user_id != user.uid:
            raise ForbiddenError("Unauthorized")
        return chapter

    @staticmethod
    def update_chapter(db: Session, chapter: Chapter, payload: dict) -> Chapter:
        data = sanitize_book_data(payload)
        if data["title"]:
            chapter.title = data["title"]
        if data["content"]:
            chapter.content = data["content"]
        if isinstance(payload.get("is_draft"), bool):
            chapter.is_draft = payload["is_draft"]
        chapter.updated_at = utcnow()

        db.commit()
        db.refresh(chapter)
        return chapter

    @staticmethod
    def delete_chapter(db: Session, chapter: Chapter) -> None:
        """Remove one chapter; the order of its siblings is left as is"""
        chapter_id, book_id = chapter.id, chapter.book_id
        db.delete(chapter)
        db.commit()
        logger.info("Chapter %s deleted from book %s", chapter_id, book_id)

    @staticmethod
    def list_published_chapters(
        db: Session, book: Book, skip: int | None = None, limit: int | None = None
    ) -> dict:
        """Non-draft chapters; the whole list unless a page size is given"""
        query = (
            db.query(Chapter)
            .filter(Chapter.book_id == book.id, Chapter.is_draft.is_(False))
            .order_by(Chapter.order, Chapter.created_at)
        )
        if limit is None:
            chapters = query.all()
            return {
                "success": True,
                "chapters": [chapter_to_public_item(c) for c in chapters],
            }

        limit = clamp_limit(limit, PUBLIC_PAGE_SIZE, MAX_PAGE_SIZE)
        skip = max(0, skip or 0)
        chapters = query.offset(skip).limit(limit).all()
        total = query.count()
        return {
            "success": True,
            "chapters": [chapter_to_public_item(c) for c in chapters],
            "total": total,
            "hasMore": skip + len(chapters) < total,
        }

    @staticmethod
    def get_published_chapter(db: Session, book: Book, chapter_id: str) -> Chapter:
        chapter = None
        if is_valid_id(chapter_id):
            chapter = (
                db.query(Chapter)
                .filter(
                    Chapter.id == chapter_id,
                    Chapter.book_id == book.id,
                    Chapter.is_draft.is_(False),
                )
                .first()
            )
        if not chapter:
            raise NotFoundError(CHAPTER_NOT_FOUND)
        return chapter
