"""
Pydantic schemas for friend requests and friendships.

A friend request moves from ``pending`` to ``accepted`` or
``rejected``.  Accepted requests produce a pair of ``friendships``
rows, one per direction.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from .user import UserProfile


FriendRequestStatus = Literal["pending", "accepted", "rejected"]


class FriendRequestCreate(BaseModel):
    model_config = {"populate_by_name": True}

    from_user_id: str = Field(..., alias="fromUserId", min_length=1)
    to_user_id: str = Field(..., alias="toUserId", min_length=1)


class FriendRequestRespond(BaseModel):
    """Answer to a pending request.

    ``user_id`` is optional; when given it must be the recipient of the
    request.
    """

    model_config = {"populate_by_name": True}

    status: Literal["accepted", "rejected"]
    user_id: Optional[str] = Field(None, alias="userId")


class FriendRequestRead(BaseModel):
    id: str
    from_user_id: str
    to_user_id: str
    status: FriendRequestStatus
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    from_user: Optional[UserProfile] = None
    to_user: Optional[UserProfile] = None


class FriendshipRead(BaseModel):
    id: str
    user_id: str
    friend_id: str
    created_at: Optional[str] = None
    friend: Optional[UserProfile] = None
