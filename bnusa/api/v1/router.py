from fastapi import APIRouter

from bnusa.api.v1.endpoints import books, chapters, comments, ktebnus, likes, status

api_router = APIRouter()

api_router.include_router(books.router, prefix="/books", tags=["books"])
api_router.include_router(chapters.router, prefix="/chapters", tags=["chapters"])
api_router.include_router(ktebnus.router, prefix="/ktebnus", tags=["ktebnus"])
api_router.include_router(comments.router, prefix="/ktebnus", tags=["comments"])
api_router.include_router(likes.router, prefix="/ktebnus", tags=["likes"])
api_router.include_router(status.router, tags=["status"])
