"""
Business logic for user profiles.

Profiles are searched and read with the admin client so that users can
find people they do not share a board with yet.
"""

import re
from typing import List, Optional

from supabase import PostgrestAPIError

from ..core.config import settings
from ..core.errors import NotFoundError, is_no_rows
from ..core.supabase import get_supabase
from ..schemas.user import UserProfile
from .helpers import PROFILE_COLUMNS, rows


# Characters with meaning inside a PostgREST ``or=(...)`` filter.
_FILTER_SYNTAX = re.compile(r"[,()*%\\]")


class UserService:

    @classmethod
    def _client(cls):
        return get_supabase().get_admin_client()

    @classmethod
    def search_users(cls, query: str, exclude_user_id: Optional[str] = None) -> List[UserProfile]:
        """Case‑insensitive substring search over username and full name.

        A blank query returns an empty list without hitting the database.
        """
        term = _FILTER_SYNTAX.sub(" ", query or "").strip()
        if not term:
            return []
        builder = (
            cls._client()
            .table("profiles")
            .select(*PROFILE_COLUMNS)
            .or_(f"username.ilike.%{term}%,full_name.ilike.%{term}%")
            .limit(settings.search_limit)
        )
        if exclude_user_id:
            builder = builder.neq("id", exclude_user_id)
        return [UserProfile(**row) for row in rows(builder.execute())]

    @classmethod
    def get_profile(cls, user_id: str) -> UserProfile:
        try:
            response = (
                cls._client().table("profiles").select(*PROFILE_COLUMNS).eq("id", user_id).single().execute()
            )
        except PostgrestAPIError as exc:
            if not is_no_rows(exc):
                raise
            raise NotFoundError(f"User {user_id} not found") from exc
        return UserProfile(**response.data)
