from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bnusa.api import deps
from bnusa.schemas.auth import AuthUser
from bnusa.schemas.book import ChapterPayload
from bnusa.services.chapters import ChapterService, chapter_to_response

router = APIRouter()


@router.get("/{chapter_id}")
def get_chapter(
    chapter_id: str,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    chapter = ChapterService.get_owned_chapter(db, chapter_id, current_user)
    return {"chapter": chapter_to_response(chapter)}


@router.put("/{chapter_id}")
def update_chapter(
    chapter_id: str,
    chapter_update: ChapterPayload,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    """Update a chapter's title, content or draft flag."""
    chapter = ChapterService.get_owned_chapter(db, chapter_id, current_user)
    chapter = ChapterService.update_chapter(
        db, chapter, chapter_update.model_dump(exclude_unset=True)
    )
    return {
        "chapter": chapter_to_response(chapter),
        "message": "Chapter updated successfully",
    }


@router.delete("/{chapter_id}")
def delete_chapter(
    chapter_id: str,
    db: Session = Depends(deps.get_db),
    current_user: AuthUser = Depends(deps.get_current_user),
):
    chapter = ChapterService.get_owned_chapter(db, chapter_id, current_user)
    ChapterService.delete_chapter(db, chapter)
    return {"message": "Chapter deleted successfully"}
