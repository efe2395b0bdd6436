"""
Notification service.

Notifications are written by other services (friend requests, board
invitations) and read by their recipient.  All access goes through the
admin client because a notification is created on behalf of a user
other than the one receiving it.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.config import settings
from ..core.errors import NotFoundError
from ..core.supabase import get_supabase
from ..schemas.notification import NotificationRead
from .helpers import first_row, rows


logger = logging.getLogger(__name__)


def _to_read(row: Dict[str, Any]) -> NotificationRead:
    row = dict(row)
    row["data"] = row.get("data") or {}
    return NotificationRead(**row)


class NotificationService:
    """Read, mark and delete notifications; single write path for other services."""

    @classmethod
    def _client(cls):
        return get_supabase().get_admin_client()

    @classmethod
    def create(cls, user_id: str, type_: str, data: Optional[Dict[str, Any]] = None) -> NotificationRead:
        """Insert an unread notification for ``user_id``."""
        row = first_row(
            cls._client()
            .table("notifications")
            .insert({"user_id": user_id, "type": type_, "data": data or {}, "read": False})
            .execute()
        )
        logger.info("Notification %s queued for user %s", type_, user_id)
        return _to_read(row)

    @classmethod
    def list_notifications(cls, user_id: str, limit: Optional[int] = None) -> List[NotificationRead]:
        """Return the user's notifications, newest first."""
        response = (
            cls._client()
            .table("notifications")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit or settings.notification_limit)
            .execute()
        )
        return [_to_read(row) for row in rows(response)]

    @classmethod
    def unread_count(cls, user_id: str) -> int:
        response = (
            cls._client()
            .table("notifications")
            .select("*", count="exact", head=True)
            .eq("user_id", user_id)
            .eq("read", False)
            .execute()
        )
        return response.count or 0

    @classmethod
    def mark_read(cls, notification_id: str) -> NotificationRead:
        row = first_row(
            cls._client().table("notifications").update({"read": True}).eq("id", notification_id).execute()
        )
        if row is None:
            raise NotFoundError("Notification not found")
        return _to_read(row)

    @classmethod
    def mark_all_read(cls, user_id: str) -> None:
        (
            cls._client()
            .table("notifications")
            .update({"read": True})
            .eq("user_id", user_id)
            .eq("read", False)
            .execute()
        )

    @classmethod
    def delete(cls, notification_id: str) -> None:
        cls._client().table("notifications").delete().eq("id", notification_id).execute()
