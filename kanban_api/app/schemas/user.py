"""
Pydantic models for user profiles.

Profiles live in the ``profiles`` table and mirror the auth users
managed by Supabase.  They are embedded in friend, collaborator and
shared‑board responses.
"""

from typing import Optional

from pydantic import BaseModel


class UserProfile(BaseModel):
    """Public profile of a user."""

    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileRead(UserProfile):
    updated_at: Optional[str] = None
