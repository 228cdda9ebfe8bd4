"""Service status endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bnusa.api import deps

router = APIRouter()


@router.get("/status")
def api_status(db: Session = Depends(deps.get_db)):
    """Status endpoint that also reports whether the database answers."""
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError:
        database = "unavailable"
    return {"status": "operational", "api_version": "v1", "database": database}
