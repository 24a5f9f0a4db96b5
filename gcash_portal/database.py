import json
import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker

from gcash_portal.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def apply_caller_claims(connection, claims: dict, role: str = settings.CALLER_ROLE):
    """
    Make the current transaction run as the API caller.

    Supabase's auth.uid() and auth.jwt() read these settings, so the RLS
    policies on profiles and transactions see the caller's identity. The
    settings are transaction-local and vanish on commit or rollback.
    """
    if connection.dialect.name != "postgresql":
        return
    connection.execute(
        text(
            "select set_config('request.jwt.claims', :claims, true), "
            "set_config('request.jwt.claim.sub', :sub, true)"
        ),
        {"claims": json.dumps(claims), "sub": str(claims.get("sub", ""))},
    )
    connection.execute(text(f"set local role {connection.dialect.identifier_preparer.quote(role)}"))


def run_as_caller(db, claims: dict):
    """Re-apply the caller's claims at the start of every transaction of this session."""

    @event.listens_for(db, "after_begin")
    def _apply_claims(session, transaction, connection):
        apply_caller_claims(connection, claims)

    return db
