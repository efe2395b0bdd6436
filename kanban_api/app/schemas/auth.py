"""
Pydantic models for authentication.

Sign‑up and login are forwarded to Supabase Auth; these schemas only
validate the shape of the request before it leaves the API.  Password
rules match the ones enforced by the frontend forms.
"""

import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


def check_password_strength(value: str) -> str:
    """Require an upper‑case letter, a lower‑case letter and a digit or symbol."""
    if not re.search(r"[A-Z]", value) or not re.search(r"[a-z]", value):
        raise ValueError("Password must contain uppercase, lowercase, number/symbol, and be at least 6 characters")
    if not re.search(r"(\d|\W)", value):
        raise ValueError("Password must contain uppercase, lowercase, number/symbol, and be at least 6 characters")
    return value


class SignUp(BaseModel):
    email: EmailStr = Field(..., examples=["user@example.com"])
    username: str = Field(..., min_length=3, examples=["jdoe"])
    password: str = Field(..., min_length=6, examples=["Str0ngPass"])

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)


class Login(BaseModel):
    """Login payload.  ``identifier`` is an e‑mail address or a username."""

    identifier: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)


class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields keep their stored values."""

    model_config = {"populate_by_name": True}

    username: Optional[str] = Field(None, min_length=3)
    full_name: Optional[str] = Field(None, alias="fullName")
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")


class PasswordUpdate(BaseModel):
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)


class AuthResponse(BaseModel):
    """User and session as returned by Supabase Auth."""

    user: Optional[Dict[str, Any]] = None
    session: Optional[Dict[str, Any]] = None
