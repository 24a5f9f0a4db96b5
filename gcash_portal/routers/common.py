import logging

from fastapi import HTTPException
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

INSUFFICIENT_PRIVILEGE = "42501"


def commit_or_forbid(db: Session):
    """Commit, turning a row level security rejection into a 403."""
    try:
        db.commit()
    except ProgrammingError as e:
        db.rollback()
        if getattr(e.orig, "pgcode", None) == INSUFFICIENT_PRIVILEGE:
            logger.warning(f"Row level security rejected write: {e.orig}")
            raise HTTPException(status_code=403, detail="Not allowed to write this row")
        raise
