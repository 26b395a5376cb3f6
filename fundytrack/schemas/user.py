# fundytrack/schemas/user.py
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    # Profile fields refreshed from the identity provider on every login
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None

class UserCreate(UserBase):
    google_id: str # Provider subject id

class UserUpdate(UserBase):
    pass

class User(UserBase):
    id: int
    google_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CurrentUserResponse(BaseModel):
    user: Optional[User] = None
