from pydantic import BaseModel
from typing import Optional
from uuid import UUID

class CurrentUser(BaseModel):
    id: UUID
    email: str
    role: Optional[str] = None
    claims: dict = {}
