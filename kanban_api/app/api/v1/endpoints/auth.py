"""
Authentication endpoints for API v1.

Sign‑up, login and logout are proxied to Supabase Auth.  Profile,
password and avatar routes act on the ``profiles`` row of the user
named in the path.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from kanban_api.app.core.errors import http_errors
from kanban_api.app.core.security import get_access_token, get_current_user
from kanban_api.app.schemas.auth import AuthResponse, Login, PasswordUpdate, ProfileUpdate, SignUp
from kanban_api.app.schemas.common import MessageResponse
from kanban_api.app.schemas.user import ProfileRead
from kanban_api.app.services.auth_service import AuthService
from kanban_api.app.services.card_service import read_upload


router = APIRouter()


@router.post("/signup", response_model=AuthResponse)
def signup(payload: SignUp) -> AuthResponse:
    """Зарегистрировать пользователя.

    Returns the created user and, when e‑mail confirmation is disabled
    on the project, an active session.  Raises 409 when the platform
    rejects the registration (for example an e‑mail already in use).
    """
    with http_errors():
        return AuthResponse(**AuthService.sign_up(payload))


@router.post("/login", response_model=AuthResponse)
def login(payload: Login) -> AuthResponse:
    """Log in with an e‑mail address or a username.  Raises 401 on failure."""
    with http_errors():
        return AuthResponse(**AuthService.login(payload))


@router.post("/logout", response_model=MessageResponse)
def logout(token: Optional[str] = Depends(get_access_token)) -> MessageResponse:
    with http_errors():
        AuthService.logout(token)
    return MessageResponse(message="Logged out successfully")


@router.get("/me")
def me(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    """Return the user owning the bearer token."""
    return {key: value for key, value in current_user.items() if key != "access_token"}


@router.patch("/profile/{user_id}", response_model=ProfileRead)
def update_profile(user_id: str, payload: ProfileUpdate) -> ProfileRead:
    with http_errors():
        return AuthService.update_profile(user_id, payload)


@router.patch("/password/{user_id}", response_model=MessageResponse)
def update_password(
    user_id: str,
    payload: PasswordUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> MessageResponse:
    """Change the caller's password.  Raises 403 for anyone else's account."""
    with http_errors():
        AuthService.update_password(current_user, user_id, payload.password)
    return MessageResponse(message="Password updated successfully")


@router.post("/avatar/{user_id}")
def upload_avatar(user_id: str, avatar: UploadFile = File(...)) -> Dict[str, str]:
    """Upload an avatar image (at most 10 MB) and return its public URL."""
    with http_errors():
        content = read_upload(avatar.file, avatar.size)
        return AuthService.upload_avatar(user_id, avatar.filename or "", content, avatar.content_type)
