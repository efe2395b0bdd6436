"""
Friend endpoints for API v1.

``POST /friends/request`` answers 201 when a new request was created
and 409 when a pending request from the other user was accepted
instead.  Literal routes are declared before ``/{user_id}``.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from kanban_api.app.core.errors import http_errors
from kanban_api.app.schemas.common import MessageResponse
from kanban_api.app.schemas.friend import (
    FriendRequestCreate,
    FriendRequestRead,
    FriendRequestRespond,
    FriendshipRead,
)
from kanban_api.app.schemas.user import UserProfile
from kanban_api.app.services.friend_service import FriendService
from kanban_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/search", response_model=List[UserProfile])
def search_users(
    q: str = Query(""),
    exclude_user_id: Optional[str] = Query(None, alias="excludeUserId"),
) -> List[UserProfile]:
    """Поиск пользователей по имени пользователя или полному имени."""
    return UserService.search_users(q, exclude_user_id)


@router.get("/profile/{user_id}", response_model=UserProfile)
def get_profile(user_id: str) -> UserProfile:
    with http_errors():
        return UserService.get_profile(user_id)


@router.get("/requests/{user_id}/incoming", response_model=List[FriendRequestRead])
def incoming_requests(user_id: str) -> List[FriendRequestRead]:
    return FriendService.incoming_requests(user_id)


@router.get("/requests/{user_id}/outgoing", response_model=List[FriendRequestRead])
def outgoing_requests(user_id: str) -> List[FriendRequestRead]:
    return FriendService.outgoing_requests(user_id)


@router.post("/request", response_model=FriendRequestRead, status_code=status.HTTP_201_CREATED)
def send_request(payload: FriendRequestCreate) -> FriendRequestRead:
    """Отправить заявку в друзья.

    Sending to yourself answers 400.  Sending to a friend, or sending
    twice, answers 409.  If the other user already asked first, their
    request is accepted and the answer is 409 as well.
    """
    with http_errors():
        return FriendService.send_request(payload.from_user_id, payload.to_user_id)


@router.patch("/request/{request_id}", response_model=FriendRequestRead)
def respond_to_request(request_id: str, payload: FriendRequestRespond) -> FriendRequestRead:
    """Accept or reject a pending request.

    Raises 404 for an unknown request, 409 when it was already answered
    and 403 when ``userId`` is not the recipient.
    """
    with http_errors():
        return FriendService.respond(request_id, payload.status, payload.user_id)


@router.get("/{user_id}", response_model=List[FriendshipRead])
def list_friends(user_id: str) -> List[FriendshipRead]:
    return FriendService.get_friends(user_id)


@router.delete("/{user_id}/{friend_id}", response_model=MessageResponse)
def remove_friend(user_id: str, friend_id: str) -> MessageResponse:
    FriendService.remove_friend(user_id, friend_id)
    return MessageResponse(message="Friend removed")
