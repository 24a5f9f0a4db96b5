from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from gcash_portal.models.profile import Profile
from gcash_portal.schemas.profile import ProfileCreate, ProfileOut, ProfileUpdate
from gcash_portal.schemas.user import CurrentUser
from gcash_portal.routers.auth import get_caller_db, get_current_user
from gcash_portal.routers.common import commit_or_forbid

# No delete route: profiles only go away with their auth.users row
router = APIRouter(prefix="/profile", tags=["Profile"])


def _own_profile(db: Session, current_user: CurrentUser):
    return db.query(Profile).filter(Profile.id == current_user.id).first()


@router.get("/", response_model=ProfileOut)
def get_profile(
    db: Session = Depends(get_caller_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    db_profile = _own_profile(db, current_user)
    if not db_profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return db_profile


@router.post("/", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def create_profile(
    profile: ProfileCreate,
    db: Session = Depends(get_caller_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Normally the signup trigger has already done this; covers identities it missed."""
    if _own_profile(db, current_user):
        raise HTTPException(status_code=400, detail="Profile already exists")

    new_profile = Profile(id=current_user.id, email=current_user.email, **profile.model_dump())
    db.add(new_profile)
    try:
        commit_or_forbid(db)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Profile could not be created")
    db.refresh(new_profile)
    return new_profile


@router.put("/", response_model=ProfileOut)
def update_profile(
    profile: ProfileUpdate,
    db: Session = Depends(get_caller_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    db_profile = _own_profile(db, current_user)
    if not db_profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    for field, value in profile.model_dump(exclude_unset=True).items():
        setattr(db_profile, field, value)
    commit_or_forbid(db)
    db.refresh(db_profile)
    return db_profile
