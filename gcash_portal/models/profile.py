from sqlalchemy import Column, Text, Uuid, ForeignKey, DateTime, func
from gcash_portal.database import Base
from gcash_portal.models.constant import PUBLIC_SCHEMA

class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = {"schema": PUBLIC_SCHEMA}

    id = Column(Uuid, ForeignKey("auth.users.id", ondelete="CASCADE"), primary_key=True)
    email = Column(Text)
    # populated from the sign-up metadata by the frontend
    full_name = Column(Text)
    avatar_url = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
