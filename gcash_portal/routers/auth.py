# routers/auth.py
import logging

import jwt
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from gcash_portal.config import settings
from gcash_portal.database import get_db, run_as_caller
from gcash_portal.schemas.user import CurrentUser

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict:
    """Verify a Supabase access token and return its claims."""
    return jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
    )


def get_current_user(credentials: HTTPAuthorizationCredentials = Security(security)) -> CurrentUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception
    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as e:
        logger.info(f"Rejected access token: {e}")
        raise credentials_exception

    # Transactions are owned by email, so a token without one can't own anything
    if not claims.get("sub") or not claims.get("email"):
        raise credentials_exception
    try:
        return CurrentUser(id=claims["sub"], email=claims["email"], role=claims.get("role"), claims=claims)
    except ValueError:
        raise credentials_exception


def get_caller_db(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
) -> Session:
    """Session whose transactions run with the caller's role and claims, so RLS applies."""
    return run_as_caller(db, current_user.claims)
