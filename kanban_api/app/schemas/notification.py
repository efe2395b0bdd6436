"""
Pydantic schemas for in‑app notifications.

Notification ``type`` is one of ``friend_request``, ``friend_accepted``,
``friend_rejected``, ``board_invite`` or ``board_removed``; ``data``
carries the ids and display names the frontend needs to render it.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class NotificationRead(BaseModel):
    id: str
    user_id: str
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    read: bool = False
    created_at: Optional[str] = None
