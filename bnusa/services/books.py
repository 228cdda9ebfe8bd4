"""
Book store: ownership-scoped CRUD, the draft -> pending-review transition and
the public reading surface.
"""

import logging
import math
from datetime import datetime

from sqlalchemy import extract, func, or_
from sqlalchemy.orm import Session

from bnusa.core.exceptions import NotFoundError, ValidationError
from bnusa.models.book import Book, BookStatus
from bnusa.models.chapter import Chapter
from bnusa.schemas.auth import AuthUser
from bnusa.services import links
from bnusa.services.sanitize import sanitize_book_data
from bnusa.services.slug import generate_book_slug

logger = logging.getLogger(__name__)

OWNER_PAGE_SIZE = 6
PUBLIC_PAGE_SIZE = 12
MAX_PAGE_SIZE = 24
MAX_GENRES = 3

BOOK_NOT_FOUND = "Book not found"


def isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def clamp_page(page: int | None) -> int:
    return page if page and page > 0 else 1


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    if limit is None:
        return default
    return min(maximum, max(1, limit))


def book_to_response(book: Book) -> dict:
    """Full owner view of a book."""
    return {
        "id": str(book.id),
        "slug": book.slug,
        "userId": book.user_id,
        "authorUid": book.author_uid,
        "authorName": book.author_name or "",
        "authorUsername": book.author_username or "",
        "authorEmail": book.author_email or "",
        "authorPhotoURL": book.author_photo_url or "",
        "title": book.title,
        "description": book.description,
        "genre": book.genre,
        "genres": book.genres or [],
        "status": book.status,
        "coverImage": book.cover_image or "",
        "spotifyLink": book.spotify_link or "",
        "youtubeLinks": book.youtube_links or [],
        "resourceLinks": book.resource_links or [],
        "isDraft": book.is_draft,
        "isPendingReview": book.is_pending_review,
        "isPublished": book.is_published,
        "views": book.views or 0,
        "createdAt": isoformat(book.created_at),
        "updatedAt": isoformat(book.updated_at),
    }


def book_to_grid_item(book: Book) -> dict:
    """Fields the "my books" grid needs."""
    return {
        "id": str(book.id),
        "title": book.title,
        "genre": book.genre,
        "status": book.status,
        "coverImage": book.cover_image or "",
        "slug": book.slug,
        "isDraft": book.is_draft,
        "isPendingReview": book.is_pending_review,
        "isPublished": book.is_published,
        "createdAt": isoformat(book.created_at),
        "updatedAt": isoformat(book.updated_at),
    }


def book_to_public_response(book: Book) -> dict:
    """Reader view; author fields come from the snapshot taken at creation."""
    return {
        "id": str(book.id),
        "slug": book.slug,
        "title": book.title,
        "writer": book.author_name or "",
        "writerUsername": book.author_username or "",
        "writerAvatar": book.author_photo_url or "",
        "ownerId": book.user_id or book.author_uid or "",
        "genre": book.genre or "",
        "image": book.cover_image or "",
        "description": book.description or "",
        "views": book.views or 0,
        "createdAt": isoformat(book.created_at),
        "updatedAt": isoformat(book.updated_at),
        "youtubeLinks": book.youtube_links or [],
        "resourceLinks": book.resource_links or [],
        "spotifyLink": book.spotify_link or "",
    }


def book_to_public_list_item(book: Book) -> dict:
    return {
        "id": str(book.id),
        "title": book.title,
        "writer": book.author_name or "",
        "genre": book.genre or "",
        "image": book.cover_image or "",
        "slug": book.slug,
        "views": book.views or 0,
    }


def _validate_status(value: str) -> str:
    allowed = [s.value for s in BookStatus]
    if value not in allowed:
        raise ValidationError(f"Invalid status. Allowed values: {', '.join(allowed)}")
    return value


def _validate_genres(genres: list[str]) -> list[str] | None:
    if len(genres) > MAX_GENRES or not all(genres):
        raise ValidationError("genres must be an array of up to 3 non-empty strings")
    return genres or None


def _published(query):
    return query.filter(Book.is_published.is_(True))


class BookService:
    """Operations on books and their publication state"""

    @staticmethod
    def get_owned_book(db: Session, slug: str, user: AuthUser) -> Book:
        """Book by slug, visible only to its owner"""
        book = (
            db.query(Book)
            .filter(Book.slug == slug, Book.user_id == user.uid)
            .first()
        )
        if not book:
            raise NotFoundError(BOOK_NOT_FOUND)
        return book

    @staticmethod
    def get_published_book(db: Session, slug: str) -> Book:
        book = _published(db.query(Book).filter(Book.slug == slug)).first()
        if not book:
            raise NotFoundError(BOOK_NOT_FOUND)
        return book

    @staticmethod
    def create_book(db: Session, user: AuthUser, payload: dict) -> Book:
        """Create a draft book owned by `user`"""
        data = sanitize_book_data(payload)
        if not data["title"] or not data["description"] or not data["genre"]:
            raise ValidationError("Title, description, and genre are required")

        status = _validate_status(data["status"] or BookStatus.ONGOING.value)
        genres = _validate_genres(data["genres"]) if data["genres"] is not None else None

        author = payload.get("author") or {}
        username = author.get("username") or (
            user.email.split("@")[0] if user.email else ""
        )

        book = Book(
            slug=generate_book_slug(data["title"]),
            user_id=user.uid,
            author_uid=author.get("uid") or user.uid,
            author_name=author.get("name") or user.display_name or "",
            author_username=username,
            author_email=author.get("email") or user.email or "",
            author_photo_url=author.get("photo_url") or "",
            title=data["title"],
            description=data["description"],
            genre=data["genre"],
            genres=genres,
            status=status,
            cover_image=data["cover_image"] or "",
            is_draft=True,
            is_pending_review=False,
            is_published=False,
            views=0,
        )
        db.add(book)
        db.commit()
        db.refresh(book)

        logger.info("Book %s created by %s", book.slug, user.uid)
        return book

    @staticmethod
    def list_user_books(
        db: Session,
        user: AuthUser,
        page: int | None = None,
        limit: int | None = None,
        drafts_only: bool = False,
        published_only: bool = False,
    ) -> dict:
        """Page through the caller's books, most recently updated first"""
        page = clamp_page(page)
        limit = clamp_limit(limit, OWNER_PAGE_SIZE, MAX_PAGE_SIZE)

        query = db.query(Book).filter(Book.user_id == user.uid)
        if drafts_only:
            query = query.filter(Book.is_draft.is_(True))
        elif published_only:
            query = query.filter(Book.is_published.is_(True))

        total = query.count()
        books = (
            query.order_by(Book.updated_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {
            "books": [book_to_grid_item(book) for book in books],
            "total": total,
            "page": page,
            "limit": limit,
        }

    @staticmethod
    def list_chapters(db: Session, book: Book) -> list[Chapter]:
        return (
            db.query(Chapter)
            .filter(Chapter.book_id == book.id)
            .order_by(Chapter.order)
            .all()
        )

    @staticmethod
    def update_book(db: Session, book: Book, payload: dict) -> Book:
        """Apply a partial update; link fields are validated and canonicalized.

        Everything is validated before the book is touched, so a rejected
        link leaves no half-applied changes on the session.
        """
        data = sanitize_book_data(payload)
        changes = {}

        if data["title"]:
            changes["title"] = data["title"]
        if data["description"]:
            changes["description"] = data["description"]
        if data["genre"]:
            changes["genre"] = data["genre"]
        if data["status"]:
            changes["status"] = _validate_status(data["status"])
        if data["genres"] is not None:
            changes["genres"] = _validate_genres(data["genres"])
        if data["cover_image"] is not None:
            changes["cover_image"] = data["cover_image"]

        if data["spotify_link"] is not None:
            link = data["spotify_link"].strip()
            changes["spotify_link"] = links.normalize_spotify_url(link) if link else ""
        if data["youtube_links"] is not None:
            changes["youtube_links"] = links.normalize_youtube_links(data["youtube_links"])
        if data["resource_links"] is not None:
            changes["resource_links"] = links.normalize_resource_links(
                data["resource_links"]
            )

        for field, value in changes.items():
            setattr(book, field, value)
        db.commit()
        db.refresh(book)
        return book

    @staticmethod
    def delete_book(db: Session, book: Book) -> None:
        """Delete the book and its chapters in one transaction.

        Comments and likes reference the book by id string and are kept.
        """
        slug = book.slug
        try:
            deleted_chapters = (
                db.query(Chapter)
                .filter(Chapter.book_id == book.id)
                .delete()
            )
            db.query(Book).filter(Book.id == book.id).delete()
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info("Book %s deleted with %d chapters", slug, deleted_chapters)

    @staticmethod
    def submit_for_review(db: Session, book: Book) -> Book:
        """Move a draft book to pending review"""
        if book.is_published:
            raise ValidationError("Book is already published")
        if book.is_pending_review:
            raise ValidationError("Book is already pending review")

        chapter_count = db.query(Chapter).filter(Chapter.book_id == book.id).count()
        if chapter_count == 0:
            raise ValidationError("Cannot publish book without chapters")

        book.is_draft = False
        book.is_pending_review = True
        book.is_published = False
        db.commit()
        db.refresh(book)

        logger.info("Book %s submitted for review", book.slug)
        return book

    @staticmethod
    def get_public_book(db: Session, slug: str, increment_views: bool = True) -> Book:
        """Published book by slug, counting a view unless told not to"""
        if increment_views:
            # A view is not an edit; keep updated_at out of the onupdate default
            matched = (
                _published(db.query(Book).filter(Book.slug == slug))
                .update(
                    {Book.views: Book.views + 1, Book.updated_at: Book.updated_at},
                    synchronize_session=False,
                )
            )
            db.commit()
            if not matched:
                raise NotFoundError(BOOK_NOT_FOUND)
        return BookService.get_published_book(db, slug)

    @staticmethod
    def list_public_books(
        db: Session,
        page: int | None = None,
        limit: int | None = None,
        search: str | None = None,
        genre: str | None = None,
        year: str | None = None,
    ) -> dict:
        """Published books with search/genre/year filters and filter facets"""
        page = clamp_page(page)
        limit = clamp_limit(limit, PUBLIC_PAGE_SIZE, MAX_PAGE_SIZE)
        search = (search or "").strip()
        genre = (genre or "").strip().lower()
        year = (year or "").strip()

        query = _published(db.query(Book))
        if genre and genre != "all":
            query = query.filter(func.lower(Book.genre) == genre)
        if search:
            escaped = (
                search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            )
            pattern = f"%{escaped}%"
            query = query.filter(
                or_(
                    Book.title.ilike(pattern, escape="\\"),
                    Book.author_name.ilike(pattern, escape="\\"),
                )
            )
        if year.isdigit():
            query = query.filter(extract("year", Book.created_at) == int(year))

        total = query.count()
        books = (
            query.order_by(Book.updated_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        genres = []
        for (value,) in _published(db.query(Book.genre)).distinct():
            if value and value.lower() not in genres:
                genres.append(value.lower())
        years = sorted(
            {
                int(value)
                for (value,) in _published(
                    db.query(extract("year", Book.created_at))
                ).distinct()
                if value is not None
            },
            reverse=True,
        )

        return {
            "success": True,
            "books": [book_to_public_list_item(book) for book in books],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": max(1, math.ceil(total / limit)),
            },
            "filters": {"genres": genres, "years": years},
        }
