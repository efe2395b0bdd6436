"""User lookup endpoints for API v1."""

from typing import List, Optional

from fastapi import APIRouter, Query

from kanban_api.app.core.errors import http_errors
from kanban_api.app.schemas.user import UserProfile
from kanban_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/search", response_model=List[UserProfile])
def search_users(
    q: str = Query(""),
    exclude_user_id: Optional[str] = Query(None, alias="excludeUserId"),
) -> List[UserProfile]:
    """Find users by username or full name (case‑insensitive substring)."""
    return UserService.search_users(q, exclude_user_id)


@router.get("/profile/{user_id}", response_model=UserProfile)
def get_profile(user_id: str) -> UserProfile:
    with http_errors():
        return UserService.get_profile(user_id)
