"""
Authentication and profile management.

Credentials never touch this API's storage: sign‑up, login, logout
and password changes are forwarded to Supabase Auth.  What the service
adds is the username login (a username is resolved to its e‑mail
through ``profiles``), merging the profile into the returned user, and
the profile/avatar writes.
"""

import logging
import time
from typing import Any, Dict, Optional

from supabase import AuthError, PostgrestAPIError, StorageException

from ..core.config import settings
from ..core.errors import AuthenticationError, ConflictError, PermissionDeniedError
from ..core.supabase import get_supabase, to_dict
from ..schemas.auth import Login, ProfileUpdate, SignUp
from ..schemas.user import ProfileRead
from .card_service import check_upload_size
from .helpers import find_one, first_row, now_iso


logger = logging.getLogger(__name__)

_PROFILE_FIELDS = ("username", "full_name", "avatar_url")


class AuthService:
    """Сервис аутентификации и профилей пользователей."""

    @classmethod
    def sign_up(cls, data: SignUp) -> Dict[str, Any]:
        """Register a new account; the username is stored in the user metadata."""
        try:
            response = get_supabase().get_client().auth.sign_up(
                {
                    "email": data.email,
                    "password": data.password,
                    "options": {"data": {"username": data.username}},
                }
            )
        except AuthError as exc:
            raise ConflictError(exc.message) from exc
        logger.info("New account registered for %s", data.email)
        return {"user": to_dict(response.user), "session": to_dict(response.session)}

    @classmethod
    def login(cls, data: Login) -> Dict[str, Any]:
        """Sign in with an e‑mail address or a username.

        Raises ``AuthenticationError`` for unknown usernames and rejected
        credentials alike.
        """
        client = get_supabase().get_client()
        email = data.identifier.strip()
        if "@" not in email:
            profile = find_one(client.table("profiles").select("email").eq("username", email))
            if not profile or not profile.get("email"):
                raise AuthenticationError("Invalid login credentials")
            email = profile["email"]

        try:
            response = client.auth.sign_in_with_password({"email": email, "password": data.password})
        except AuthError as exc:
            logger.info("Login rejected for %s: %s", email, exc.message)
            raise AuthenticationError(exc.message) from exc

        user = to_dict(response.user) or {}
        profile = find_one(client.table("profiles").select(*_PROFILE_FIELDS).eq("id", user.get("id")))
        if profile:
            metadata = dict(user.get("user_metadata") or {})
            for field in _PROFILE_FIELDS:
                if profile.get(field):
                    metadata[field] = profile[field]
            user["user_metadata"] = metadata
        return {"user": user, "session": to_dict(response.session)}

    @classmethod
    def logout(cls, access_token: Optional[str] = None) -> None:
        """End the session identified by ``access_token`` (or the anonymous one)."""
        auth = get_supabase().get_client().auth
        try:
            if access_token:
                auth.admin.sign_out(access_token)
            else:
                auth.sign_out()
        except AuthError as exc:
            raise AuthenticationError(exc.message) from exc

    @classmethod
    def update_profile(cls, user_id: str, data: ProfileUpdate) -> ProfileRead:
        """Create or update the profile; omitted fields keep their stored values."""
        client = get_supabase().get_admin_client()
        existing = find_one(client.table("profiles").select(*_PROFILE_FIELDS).eq("id", user_id)) or {}
        changes = data.model_dump(exclude_none=True)
        payload = {"id": user_id, "updated_at": now_iso()}
        for field in _PROFILE_FIELDS:
            payload[field] = changes.get(field, existing.get(field))
        try:
            row = first_row(client.table("profiles").upsert(payload, on_conflict="id").execute())
        except PostgrestAPIError as exc:
            raise ConflictError(exc.message) from exc
        logger.info("Profile %s updated (%s)", user_id, ", ".join(sorted(changes)) or "no changes")
        return ProfileRead(**row)

    @classmethod
    def update_password(cls, current_user: Dict[str, Any], user_id: str, password: str) -> None:
        """Change the password of ``user_id``; callers may only change their own."""
        if current_user.get("id") != user_id:
            raise PermissionDeniedError("You can only change your own password")
        try:
            get_supabase().get_admin_client().auth.admin.update_user_by_id(user_id, {"password": password})
        except AuthError as exc:
            raise ConflictError(exc.message) from exc
        logger.info("Password changed for user %s", user_id)

    @classmethod
    def upload_avatar(
        cls, user_id: str, filename: str, content: bytes, content_type: Optional[str] = None
    ) -> Dict[str, str]:
        """Store a new avatar image and point the profile at it."""
        check_upload_size(content)
        ext = filename.rsplit(".", 1)[-1] if filename and "." in filename else "png"
        file_path = f"avatars/{user_id}-{int(time.time() * 1000)}.{ext}"
        bucket = get_supabase().get_admin_client().storage.from_(settings.avatar_bucket)
        try:
            bucket.upload(
                file_path,
                content,
                {"content-type": content_type or "application/octet-stream", "upsert": "true"},
            )
        except StorageException as exc:
            raise ConflictError(f"Avatar upload failed: {exc}") from exc
        avatar_url = bucket.get_public_url(file_path)
        cls.update_profile(user_id, ProfileUpdate(avatar_url=avatar_url))
        return {"avatarUrl": avatar_url}
