"""
Database models for the Bnusa Kteb Nus API.
"""

from bnusa.models.book import Book, BookStatus
from bnusa.models.book_comment import BookComment
from bnusa.models.book_like import BookLike
from bnusa.models.chapter import Chapter

__all__ = [
    "Book",
    "BookStatus",
    "Chapter",
    "BookComment",
    "BookLike",
]
