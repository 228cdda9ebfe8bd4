"""
Comment tree store.

Comments form a tree through `parent_id`. Listings show top-level comments
with one level of replies; deleting a comment removes its whole subtree.
"""

import logging
import math
import uuid

from sqlalchemy.orm import Session

from bnusa.core.exceptions import (
    ForbiddenError,
    NotFoundError,
    OperationFailedError,
    ValidationError,
)
from bnusa.db.types import is_valid_id
from bnusa.models.book import Book
from bnusa.models.book_comment import MAX_COMMENT_LENGTH, BookComment
from bnusa.schemas.auth import AuthUser
from bnusa.services.books import clamp_limit, clamp_page, isoformat

logger = logging.getLogger(__name__)

PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


def display_name(comment: BookComment | None) -> str:
    if comment is None:
        return "User"
    return comment.user_name or comment.user_email or "User"


def comment_to_response(
    comment: BookComment,
    parent_user_name: str | None = None,
    replies: list[dict] | None = None,
) -> dict:
    data = {
        "id": str(comment.id),
        "content": comment.content,
        "createdAt": isoformat(comment.created_at),
        "userName": display_name(comment),
        "userProfileImage": comment.user_profile_image or "",
        "userId": comment.user_id,
        "parentId": comment.parent_id or None,
        "replies": replies or [],
    }
    if parent_user_name is not None:
        data["parentUserName"] = parent_user_name
    return data


def _visible(query, book_id: str):
    return query.filter(
        BookComment.book_id == book_id, BookComment.is_deleted.is_(False)
    )


class CommentService:
    """Threaded comments on published books"""

    @staticmethod
    def create_comment(
        db: Session,
        book: Book,
        user: AuthUser,
        content: str | None,
        parent_id: str | None = None,
    ) -> BookComment:
        content = validate_comment_content(content)
        book_id = str(book.id)

        if parent_id:
            parent = None
            if is_valid_id(parent_id):
                parent_id = str(uuid.UUID(parent_id))
                parent = (
                    _visible(db.query(BookComment), book_id)
                    .filter(BookComment.id == parent_id)
                    .first()
                )
            if not parent:
                raise NotFoundError("Parent comment not found")

        comment = BookComment(
            book_id=book_id,
            user_id=user.uid,
            user_email=user.email or "",
            user_name=user.name_or_email,
            user_profile_image=user.photo_url or "",
            content=content,
            parent_id=parent_id or None,
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment

    @staticmethod
    def list_comments(
        db: Session, book: Book, page: int | None = None, limit: int | None = None
    ) -> dict:
        """Top-level comments newest first, each with its direct replies"""
        page = clamp_page(page)
        limit = clamp_limit(limit, PAGE_SIZE, MAX_PAGE_SIZE)
        book_id = str(book.id)

        top_level = _visible(db.query(BookComment), book_id).filter(
            BookComment.parent_id.is_(None)
        )
        total = top_level.count()
        comments = (
            top_level.order_by(BookComment.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        # Direct replies for the whole page in one query, oldest first
        replies_by_parent: dict[str, list[BookComment]] = {}
        if comments:
            replies = (
                _visible(db.query(BookComment), book_id)
                .filter(BookComment.parent_id.in_([str(c.id) for c in comments]))
                .order_by(BookComment.created_at.asc())
                .all()
            )
            for reply in replies:
                replies_by_parent.setdefault(reply.parent_id, []).append(reply)

        items = []
        for comment in comments:
            parent_name = display_name(comment)
            items.append(
                comment_to_response(
                    comment,
                    replies=[
                        comment_to_response(reply, parent_user_name=parent_name)
                        for reply in replies_by_parent.get(str(comment.id), [])
                    ],
                )
            )

        pages = math.ceil(total / limit)
        return {
            "success": True,
            "comments": items,
            "hasMore": page < pages,
            "pagination": {"page": page, "limit": limit, "total": total, "pages": pages},
        }

    @staticmethod
    def list_replies(
        db: Session,
        book: Book,
        comment_id: str,
        page: int | None = None,
        limit: int | None = None,
    ) -> dict:
        """Direct replies to one comment, newest first"""
        page = clamp_page(page)
        limit = clamp_limit(limit, PAGE_SIZE, MAX_PAGE_SIZE)
        book_id = str(book.id)

        parent = None
        replies, total = [], 0
        if is_valid_id(comment_id):
            comment_id = str(uuid.UUID(comment_id))
            parent = db.query(BookComment).filter(BookComment.id == comment_id).first()
            query = _visible(db.query(BookComment), book_id).filter(
                BookComment.parent_id == comment_id
            )
            total = query.count()
            replies = (
                query.order_by(BookComment.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )

        parent_name = display_name(parent)
        pages = math.ceil(total / limit)
        return {
            "success": True,
            "data": [
                comment_to_response(reply, parent_user_name=parent_name)
                for reply in replies
            ],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": pages,
                "hasMore": page < pages,
            },
        }

    @staticmethod
    def collect_descendant_ids(db: Session, book_id: str, root_id: str) -> list[str]:
        """Ids of every reply below `root_id`, gathered level by level"""
        seen = {root_id}
        descendants = []
        frontier = [root_id]
        while frontier:
            children = [
                str(child_id)
                for (child_id,) in db.query(BookComment.id).filter(
                    BookComment.book_id == book_id,
                    BookComment.parent_id.in_(frontier),
                )
            ]
            frontier = [child_id for child_id in children if child_id not in seen]
            seen.update(frontier)
            descendants.extend(frontier)
        return descendants

    @staticmethod
    def delete_comment(
        db: Session, book: Book, comment_id: str, user: AuthUser
    ) -> int:
        """Hard-delete a comment and all of its descendants.

        Allowed for the comment author and the book owner. Returns the number
        of rows removed.
        """
        book_id = str(book.id)
        comment = None
        if is_valid_id(comment_id):
            comment = (
                _visible(db.query(BookComment), book_id)
                .filter(BookComment.id == comment_id)
                .first()
            )
        if not comment:
            raise NotFoundError("Comment not found")

        if comment.user_id != user.uid and book.user_id != user.uid:
            raise ForbiddenError("Not authorized to delete this comment")

        target_id = str(comment.id)
        ids = [target_id] + CommentService.collect_descendant_ids(db, book_id, target_id)
        deleted = (
            db.query(BookComment)
            .filter(BookComment.id.in_(ids))
            .delete(synchronize_session="fetch")
        )
        if not deleted:
            db.rollback()
            raise OperationFailedError("Failed to delete comment")
        db.commit()

        logger.info(
            "Comment %s deleted by %s with %d descendants",
            target_id,
            user.uid,
            deleted - 1,
        )
        return deleted


def validate_comment_content(content: str | None) -> str:
    """Trimmed comment text, 1 to 1000 characters"""
    content = content.strip() if isinstance(content, str) else ""
    if not content:
        raise ValidationError("Comment content is required")
    if len(content) > MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"Comment is too long (max {MAX_COMMENT_LENGTH} characters)"
        )
    return content
