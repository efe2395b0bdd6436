"""
Bearer token helpers.

Tokens are issued by Supabase Auth; this API never signs or verifies
them itself.  ``get_access_token`` extracts the raw token from the
``Authorization: Bearer <token>`` header (or returns ``None``) so that
services can scope their queries to the caller.  ``get_current_user``
additionally asks the platform who the token belongs to and rejects
the request with 401 when it cannot.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import AuthError

from .supabase import get_supabase, to_dict


logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Dependency returning the bearer token, or ``None`` when absent."""
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


def get_current_user(token: Optional[str] = Depends(get_access_token)) -> Dict[str, Any]:
    """Dependency that resolves the authenticated user.

    Raises an HTTP 401 error when no token was sent or the platform
    does not recognise it.  On success returns the user as a dict with
    at least ``id`` and ``email``; the raw token is attached under
    ``access_token`` for services that need to act on the user's
    behalf.
    """
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = resolve_user(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user["access_token"] = token
    return user


def get_optional_user(token: Optional[str] = Depends(get_access_token)) -> Optional[Dict[str, Any]]:
    """Like ``get_current_user`` but returns ``None`` instead of failing."""
    if token is None:
        return None
    user = resolve_user(token)
    if user is not None:
        user["access_token"] = token
    return user


def resolve_user(token: str) -> Optional[Dict[str, Any]]:
    """Ask Supabase Auth for the user owning ``token``."""
    try:
        response = get_supabase().get_client().auth.get_user(token)
    except AuthError as exc:
        logger.info("Rejected bearer token: %s", exc)
        return None
    if response is None or response.user is None:
        return None
    return to_dict(response.user)
