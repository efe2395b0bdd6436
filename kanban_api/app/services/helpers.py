"""Query helpers shared by the service classes."""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional


PROFILE_COLUMNS = ("id", "username", "email", "full_name", "avatar_url")


def now_iso() -> str:
    """Current UTC time as an ISO‑8601 string, the format Postgres timestamps use."""
    return datetime.now(timezone.utc).isoformat()


def rows(response: Any) -> List[Dict[str, Any]]:
    """Return the rows of a query response (never ``None``)."""
    return list(response.data or [])


def first_row(response: Any) -> Optional[Dict[str, Any]]:
    data = rows(response)
    return data[0] if data else None


def find_one(query: Any) -> Optional[Dict[str, Any]]:
    """Execute ``query`` limited to one row and return it, or ``None``.

    Used for existence checks where "no row" is a normal outcome rather
    than an error (``.single()`` raises in that case).
    """
    return first_row(query.limit(1).execute())


def fetch_profiles(client: Any, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    """Load the profiles for ``user_ids`` keyed by id."""
    ids = sorted({uid for uid in user_ids if uid})
    if not ids:
        return {}
    response = client.table("profiles").select(*PROFILE_COLUMNS).in_("id", ids).execute()
    return {row["id"]: row for row in rows(response)}
