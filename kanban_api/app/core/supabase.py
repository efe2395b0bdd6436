"""
Supabase platform access.

``SupabaseService`` hands out clients for the three ways the API talks
to the hosted platform:

* ``get_client()`` – anonymous client, no user session attached.
* ``get_client_for_user(token)`` – anon key plus the caller's JWT in
  the ``Authorization`` header so row level security applies.
* ``get_admin_client()`` – service role client that bypasses RLS.

Anonymous and user clients are created fresh for every call so that
no auth state leaks between requests.  The admin client is stateless
and is therefore created once and reused.  Services obtain the shared
instance through ``get_supabase()``.
"""

import logging
from typing import Any, Dict, Optional

from supabase import Client, ClientOptions, create_client

from .config import Settings, settings


logger = logging.getLogger(__name__)


class SupabaseService:
    """Factory for Supabase clients."""

    def __init__(self, config: Settings) -> None:
        if not config.supabase_url or not config.supabase_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set in the environment")
        self.url = config.supabase_url
        self.key = config.supabase_key
        self.service_key = config.supabase_service_role_key
        self._admin: Optional[Client] = None
        if not self.service_key:
            logger.warning(
                "SUPABASE_SERVICE_ROLE_KEY not set - falling back to anon client for admin operations"
            )

    def _create_client(self, key: str, access_token: Optional[str] = None) -> Client:
        headers = {}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        options = ClientOptions(
            headers=headers,
            auto_refresh_token=False,
            persist_session=False,
        )
        return create_client(self.url, key, options=options)

    def get_client(self) -> Client:
        """Return a fresh client without any user context."""
        return self._create_client(self.key)

    def get_client_for_user(self, access_token: Optional[str]) -> Client:
        """Return a client scoped to ``access_token``.

        Falls back to the anonymous client when no token was supplied,
        which keeps endpoints usable by callers that do not send one.
        """
        if not access_token:
            return self.get_client()
        return self._create_client(self.key, access_token)

    def get_admin_client(self) -> Client:
        """Return the service role client (or the anon client if no service key is configured)."""
        if not self.service_key:
            return self.get_client()
        if self._admin is None:
            self._admin = self._create_client(self.service_key)
            logger.info("Supabase admin client initialised")
        return self._admin


_service: Optional[SupabaseService] = None


def get_supabase() -> SupabaseService:
    """Return the process‑wide ``SupabaseService``, creating it on first use."""
    global _service
    if _service is None:
        _service = SupabaseService(settings)
    return _service


def reset_supabase() -> None:
    """Forget the cached service; the next ``get_supabase()`` builds a new one."""
    global _service
    _service = None


def to_dict(obj: Any) -> Optional[Dict[str, Any]]:
    """Convert an auth model (user, session) returned by the platform into a plain dict."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj
    return obj.model_dump(mode="json")
