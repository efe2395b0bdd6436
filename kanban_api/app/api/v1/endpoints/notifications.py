"""
Notification endpoints for API v1.

``/{user_id}/...`` routes address a user's inbox, ``/{notification_id}``
routes a single notification.  The two share a path segment, so the
literal suffixes (``unread-count``, ``read-all``, ``read``) decide which
one a request targets.
"""

from typing import List

from fastapi import APIRouter

from kanban_api.app.core.errors import http_errors
from kanban_api.app.schemas.common import CountResponse, MessageResponse
from kanban_api.app.schemas.notification import NotificationRead
from kanban_api.app.services.notification_service import NotificationService


router = APIRouter()


@router.get("/{user_id}", response_model=List[NotificationRead])
def list_notifications(user_id: str) -> List[NotificationRead]:
    """Последние уведомления пользователя (не более 50)."""
    return NotificationService.list_notifications(user_id)


@router.get("/{user_id}/unread-count", response_model=CountResponse)
def unread_count(user_id: str) -> CountResponse:
    return CountResponse(count=NotificationService.unread_count(user_id))


@router.patch("/{user_id}/read-all", response_model=MessageResponse)
def mark_all_read(user_id: str) -> MessageResponse:
    NotificationService.mark_all_read(user_id)
    return MessageResponse(message="All notifications marked as read")


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_read(notification_id: str) -> NotificationRead:
    with http_errors():
        return NotificationService.mark_read(notification_id)


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(notification_id: str) -> MessageResponse:
    NotificationService.delete(notification_id)
    return MessageResponse(message="Notification deleted")
