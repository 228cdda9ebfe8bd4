"""Comment threads on published books."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bnusa.api import deps
from bnusa.schemas.auth import AuthUser
from bnusa.schemas.comment import CommentCreate
from bnusa.services.books import BookService
from bnusa.services.comments import (
    CommentService,
    comment_to_response,
    validate_comment_content,
)

router = APIRouter()


@router.get("/books/{slug}/comments")
def list_comments(
    slug: str,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(deps.get_db),
):
    """Top-level comments, newest first, with their direct replies."""
    book = BookService.get_published_book(db, slug)
    return CommentService.list_comments(db, book, page=page, limit=limit)


@router.post("/books/{slug}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    slug: str,
    comment_in: CommentCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Post a comment, or a reply when `parentId` is given."""
    content = validate_comment_content(comment_in.content)
    book = BookService.get_published_book(db, slug)
    comment = CommentService.create_comment(
        db, book, current_user, content, parent_id=comment_in.parent_id
    )
    return {"success": True, "data": comment_to_response(comment)}


@router.get("/books/{slug}/comments/replies/{comment_id}")
def list_replies(
    slug: str,
    comment_id: str,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(deps.get_db),
):
    book = BookService.get_published_book(db, slug)
    return CommentService.list_replies(db, book, comment_id, page=page, limit=limit)


@router.delete("/books/{slug}/comments/{comment_id}")
def delete_comment(
    slug: str,
    comment_id: str,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Delete a comment together with every reply beneath it."""
    book = BookService.get_published_book(db, slug)
    deleted = CommentService.delete_comment(db, book, comment_id, current_user)
    return {
        "success": True,
        "message": "Comment deleted successfully",
        "deletedCount": deleted,
    }
