from typing import Optional

from pydantic import BaseModel


class UserProfile(BaseModel):
    """Public profile fields of a marketplace user."""

    id: str
    username: Optional[str] = None
    profile_picture: Optional[str] = None
