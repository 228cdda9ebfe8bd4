from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bnusa.api import deps
from bnusa.schemas.auth import AuthUser
from bnusa.schemas.comment import LikeAction
from bnusa.services.books import BookService
from bnusa.services.likes import LikeService

router = APIRouter()


@router.get("/books/{slug}/like")
def get_like_count(slug: str, db: Session = Depends(deps.get_db)):
    book = BookService.get_published_book(db, slug)
    return {"success": True, "count": LikeService.count_likes(db, book)}


@router.post("/books/{slug}/like")
def toggle_like(
    slug: str,
    like_in: LikeAction,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Like or unlike a book; repeating the same action changes nothing."""
    book = BookService.get_published_book(db, slug)
    return LikeService.toggle_like(db, book, current_user, like_in.action)


@router.get("/books/{slug}/like/check")
def check_like(
    slug: str,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    book = BookService.get_published_book(db, slug)
    return {
        "success": True,
        "hasLiked": LikeService.has_liked(db, book, current_user),
        "likes": LikeService.count_likes(db, book),
    }
