"""Public reading endpoints for published books."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from bnusa.api import deps
from bnusa.services.books import BookService, book_to_public_response
from bnusa.services.chapters import ChapterService, chapter_to_public_response

router = APIRouter()


@router.get("/books")
def list_published_books(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    search: Optional[str] = None,
    genre: Optional[str] = None,
    year: Optional[str] = None,
    db: Session = Depends(deps.get_db),
):
    """Browse published books with optional search, genre and year filters."""
    return BookService.list_public_books(
        db, page=page, limit=limit, search=search, genre=genre, year=year
    )


@router.get("/books/{slug}")
def get_published_book(
    slug: str,
    response: Response,
    no_inc: Optional[str] = Query(None, alias="noInc"),
    db: Session = Depends(deps.get_db),
):
    """Published book by slug. Counts a view unless `noInc=1`."""
    book = BookService.get_public_book(db, slug, increment_views=no_inc != "1")
    response.headers["Cache-Control"] = "no-store"
    return {"success": True, "book": book_to_public_response(book)}


@router.get("/books/{slug}/chapters")
def list_published_chapters(
    slug: str,
    response: Response,
    skip: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(deps.get_db),
):
    book = BookService.get_published_book(db, slug)
    result = ChapterService.list_published_chapters(db, book, skip=skip, limit=limit)
    response.headers["Cache-Control"] = "public, max-age=30"
    return result


@router.get("/books/{slug}/chapters/{chapter_id}")
def get_published_chapter(
    slug: str,
    chapter_id: str,
    response: Response,
    db: Session = Depends(deps.get_db),
):
    book = BookService.get_published_book(db, slug)
    chapter = ChapterService.get_published_chapter(db, book, chapter_id)
    response.headers["Cache-Control"] = "no-store"
    return {"success": True, "chapter": chapter_to_public_response(chapter, book)}
