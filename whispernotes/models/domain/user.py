"""User domain model."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from whispernotes.models.domain.base import RecordModel, utcnow


class SignInRequest(BaseModel):
    """Body of POST /api/auth/login."""
    email: str
    password: str


class SignUpRequest(BaseModel):
    """Body of POST /api/auth/signup."""
    name: str
    email: str
    password: str


class ProfileUpdate(RecordModel):
    """Partial user fields for a profile update. Unset fields are left alone."""
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None

    def changes(self) -> dict:
        # avatar=None clears the avatar; name and email are required on User
        return {
            key: value
            for key, value in self.model_dump(mode="json", by_alias=True, exclude_unset=True).items()
            if value is not None or key == "avatar"
        }


class User(RecordModel):
    """The signed-in user. Owned by the identity store only."""
    id: str
    email: str
    name: str
    avatar: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
