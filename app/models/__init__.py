"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.issue import Issue
from app.models.refresh_token import RefreshToken
from app.models.user import User
from app.models.user_records import UserAddress, UserPreferences, UserProfile

__all__ = [
    "Base",
    "Issue",
    "RefreshToken",
    "User",
    "UserAddress",
    "UserPreferences",
    "UserProfile",
]
