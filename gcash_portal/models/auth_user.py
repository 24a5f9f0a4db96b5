from sqlalchemy import Column, Text, Uuid
from gcash_portal.database import Base
from gcash_portal.models.constant import AUTH_SCHEMA

class AuthUser(Base):
    """
    Supabase's identity table. Mapped so profiles can reference it; the
    auth service owns it and setup never creates or alters it on Postgres.
    """
    __tablename__ = "users"
    __table_args__ = {"schema": AUTH_SCHEMA, "info": {"external": True}}

    id = Column(Uuid, primary_key=True)
    email = Column(Text)
