"""Book management endpoints for the book owner."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bnusa.api import deps
from bnusa.schemas.auth import AuthUser
from bnusa.schemas.book import BookPayload, ChapterPayload
from bnusa.services.books import BookService, book_to_response
from bnusa.services.chapters import ChapterService, chapter_to_response

router = APIRouter()


@router.get("")
def list_books(
    page: int = 1,
    limit: int = 6,
    drafts: bool = False,
    published: bool = False,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """List the current user's books."""
    return BookService.list_user_books(
        db,
        current_user,
        page=page,
        limit=limit,
        drafts_only=drafts,
        published_only=published,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_book(
    book_data: BookPayload,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Create a new draft book."""
    book = BookService.create_book(
        db, current_user, book_data.model_dump(exclude_unset=True)
    )
    return {"book": book_to_response(book), "message": "Book created successfully"}


@router.get("/{slug}")
def get_book(
    slug: str,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Get one of the current user's books with all of its chapters."""
    book = BookService.get_owned_book(db, slug, current_user)
    chapters = BookService.list_chapters(db, book)
    return {
        "book": book_to_response(book),
        "chapters": [chapter_to_response(chapter) for chapter in chapters],
    }


@router.put("/{slug}")
def update_book(
    slug: str,
    book_update: BookPayload,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.limit_book_updates),
):
    """Update a book. Rate limited per user."""
    book = BookService.get_owned_book(db, slug, current_user)
    book = BookService.update_book(db, book, book_update.model_dump(exclude_unset=True))
    return {"book": book_to_response(book), "message": "Book updated successfully"}


@router.delete("/{slug}")
def delete_book(
    slug: str,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Delete a book and all of its chapters."""
    book = BookService.get_owned_book(db, slug, current_user)
    BookService.delete_book(db, book)
    return {"message": "Book and all chapters deleted successfully"}


@router.post("/{slug}/publish")
def publish_book(
    slug: str,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Submit a draft book for review."""
    book = BookService.get_owned_book(db, slug, current_user)
    book = BookService.submit_for_review(db, book)
    return {
        "book": book_to_response(book),
        "message": "Book submitted for review successfully",
    }


@router.get("/{slug}/chapters")
def list_book_chapters(
    slug: str,
    skip: int = 0,
    limit: int = 3,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Page through a book's chapters (excerpts only)."""
    book = BookService.get_owned_book(db, slug, current_user)
    return ChapterService.list_chapters(db, book, skip=skip, limit=limit)


@router.post("/{slug}/chapters", status_code=status.HTTP_201_CREATED)
def create_chapter(
    slug: str,
    chapter_data: ChapterPayload,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Append a chapter to a book."""
    book = BookService.get_owned_book(db, slug, current_user)
    chapter = ChapterService.create_chapter(
        db, book, chapter_data.model_dump(exclude_unset=True)
    )
    return {
        "chapter": chapter_to_response(chapter),
        "message": "Chapter created successfully",
    }
