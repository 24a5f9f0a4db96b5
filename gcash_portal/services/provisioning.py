"""
Profile provisioning from Python.

Mirrors the handle_new_user() trigger for identities the trigger never saw
(created before setup ran, or restored from a dump) and for databases without
the trigger. Same contract: idempotent, best effort, never raises.
"""
import logging
import uuid

from sqlalchemy import func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gcash_portal.models import AuthUser, Profile
from gcash_portal.services.notifications import publish_provisioning_error

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def is_unique_violation(error) -> bool:
    if not isinstance(error, IntegrityError):
        return False
    orig = getattr(error, "orig", None)
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


def provision_profile(db: Session, user_id, email):
    """Create the profile for an identity. Returns the profile, or None when provisioning failed."""
    user_id = uuid.UUID(str(user_id))
    try:
        db.execute(insert(Profile).values(id=user_id, email=email, created_at=func.now()))
        db.commit()
    except Exception as e:  # pylint: disable=broad-except
        db.rollback()
        if is_unique_violation(e):
            logger.info(f"Profile for user {user_id} already exists")
            return db.get(Profile, user_id)
        publish_provisioning_error(db.get_bind(), user_id, e)
        return None

    logger.info(f"Created profile for user {user_id}")
    return db.get(Profile, user_id)


def find_identities_without_profile(db: Session):
    stmt = (
        select(AuthUser.id, AuthUser.email)
        .outerjoin(Profile, Profile.id == AuthUser.id)
        .where(Profile.id.is_(None))
    )
    return db.execute(stmt).all()


def backfill_profiles(db: Session) -> int:
    """Provision every identity that has no profile. Returns how many now have one."""
    missing = find_identities_without_profile(db)
    if not missing:
        logger.info("All identities already have a profile")
        return 0

    provisioned = 0
    for user_id, email in missing:
        if provision_profile(db, user_id, email) is not None:
            provisioned += 1
    logger.info(f"Backfilled {provisioned}/{len(missing)} profiles")
    return provisioned
