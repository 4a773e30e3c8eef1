"""
Result models for auth service operations.
"""

from pydantic import BaseModel
from typing import Optional

from whispernotes.models.domain.user import User


class AuthResult(BaseModel):
    """Outcome of one auth endpoint call. success=False means use the fallback."""
    success: bool
    user: Optional[User] = None
    token: Optional[str] = None
    error: Optional[str] = None
    status_code: Optional[int] = None
