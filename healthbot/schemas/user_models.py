"""User related pydantic models.

- UserRecord is what every credential store returns, whatever the backend.
- PublicUser is the only view of a user that leaves the service.
"""
from datetime import datetime
from pydantic import BaseModel
from typing import Optional

class UserRecord(BaseModel):
    id: str
    full_name: str
    email: str
    password_hash: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def public(self) -> "PublicUser":
        return PublicUser(id=self.id, fullName=self.full_name, email=self.email)

class PublicUser(BaseModel):
    id: str
    fullName: str
    email: str
