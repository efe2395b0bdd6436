"""
Friend requests and friendships.

Sending a request reconciles it against whatever already exists
between the two users:

* already friends → conflict;
* a pending request in the same direction → conflict;
* finished (accepted/rejected) requests in either direction are
  deleted so the pair can start over;
* a pending request in the opposite direction wins: it is accepted
  instead of creating a second, mirrored request, and the sender is
  told so with a conflict.

Accepting a request writes the friendship in both directions, so
"friends of X" is a single equality filter on ``friendships.user_id``.
All queries use the admin client; the rules above are enforced here
rather than by row level security.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import PostgrestAPIError

from ..core.errors import BadRequestError, ConflictError, NotFoundError, PermissionDeniedError
from ..core.supabase import get_supabase
from ..schemas.friend import FriendRequestRead, FriendshipRead
from .helpers import fetch_profiles, find_one, first_row, now_iso, rows
from .notification_service import NotificationService


logger = logging.getLogger(__name__)


class FriendService:
    """Сервис дружбы: заявки, их обработка и список друзей."""

    @classmethod
    def _client(cls):
        return get_supabase().get_admin_client()

    @classmethod
    def get_friends(cls, user_id: str) -> List[FriendshipRead]:
        """Return the user's friendships with the friend's profile attached."""
        client = cls._client()
        friendships = rows(
            client.table("friendships")
            .select("id", "user_id", "friend_id", "created_at")
            .eq("user_id", user_id)
            .execute()
        )
        if not friendships:
            return []
        profiles = fetch_profiles(client, (f["friend_id"] for f in friendships))
        return [FriendshipRead(**f, friend=profiles.get(f["friend_id"])) for f in friendships]

    @classmethod
    def send_request(cls, from_user_id: str, to_user_id: str) -> FriendRequestRead:
        """Send (or reconcile) a friend request and return the new pending request.

        When the other user already has a pending request to the sender,
        that request is accepted and ``ConflictError`` is raised so the
        caller knows no new request was created.
        """
        if from_user_id == to_user_id:
            raise BadRequestError("Cannot send a friend request to yourself")
        client = cls._client()

        already_friends = find_one(
            client.table("friendships").select("id").eq("user_id", from_user_id).eq("friend_id", to_user_id)
        )
        if already_friends:
            raise ConflictError("Already friends with this user")

        outgoing = find_one(
            client.table("friend_requests")
            .select("id")
            .eq("from_user_id", from_user_id)
            .eq("to_user_id", to_user_id)
            .eq("status", "pending")
        )
        if outgoing:
            raise ConflictError("Friend request already sent")

        # Finished requests in either direction would block a new one.
        for sender, recipient in ((from_user_id, to_user_id), (to_user_id, from_user_id)):
            (
                client.table("friend_requests")
                .delete()
                .eq("from_user_id", sender)
                .eq("to_user_id", recipient)
                .neq("status", "pending")
                .execute()
            )

        incoming = find_one(
            client.table("friend_requests")
            .select("id")
            .eq("from_user_id", to_user_id)
            .eq("to_user_id", from_user_id)
            .eq("status", "pending")
        )
        if incoming:
            logger.info(
                "User %s already has a pending request from %s; accepting it", from_user_id, to_user_id
            )
            cls.respond(incoming["id"], "accepted")
            raise ConflictError("Pending request from this user exists - automatically accepted")

        request = first_row(
            client.table("friend_requests")
            .insert({"from_user_id": from_user_id, "to_user_id": to_user_id, "status": "pending"})
            .execute()
        )
        logger.info("Friend request %s sent from %s to %s", request["id"], from_user_id, to_user_id)
        cls._notify(to_user_id, "friend_request", {"request_id": request["id"], "from_user_id": from_user_id})
        return FriendRequestRead(**request)

    @classmethod
    def respond(
        cls, request_id: str, status: str, responder_id: Optional[str] = None
    ) -> FriendRequestRead:
        """Accept or reject a pending request.

        Raises ``NotFoundError`` for an unknown request,
        ``PermissionDeniedError`` when ``responder_id`` is not the
        recipient and ``ConflictError`` when the request was already
        answered.
        """
        client = cls._client()
        request = find_one(client.table("friend_requests").select("*").eq("id", request_id))
        if request is None:
            raise NotFoundError("Friend request not found")
        if responder_id and responder_id != request["to_user_id"]:
            raise PermissionDeniedError("Only the recipient can respond to this friend request")
        if request["status"] != "pending":
            raise ConflictError("Request already processed")

        sender, recipient = request["from_user_id"], request["to_user_id"]
        if status == "accepted":
            updated = first_row(
                client.table("friend_requests")
                .update({"status": "accepted", "updated_at": now_iso()})
                .eq("id", request_id)
                .execute()
            )
            client.table("friendships").upsert(
                [
                    {"user_id": sender, "friend_id": recipient},
                    {"user_id": recipient, "friend_id": sender},
                ],
                on_conflict="user_id,friend_id",
            ).execute()
            cls._notify(sender, "friend_accepted", {"request_id": request_id, "friend_id": recipient})
        else:
            # Declined requests are deleted outright.
            client.table("friend_requests").delete().eq("id", request_id).execute()
            updated = dict(request, status="rejected", updated_at=now_iso())
            cls._notify(sender, "friend_rejected", {"request_id": request_id, "friend_id": recipient})
        logger.info("Friend request %s %s", request_id, status)
        return FriendRequestRead(**(updated or dict(request, status=status)))

    @classmethod
    def _notify(cls, user_id: str, type_: str, data: Dict[str, Any]) -> None:
        # Best effort: the request or friendship is already stored.
        try:
            NotificationService.create(user_id, type_, data)
        except PostgrestAPIError as exc:
            logger.error("Failed to create %s notification for %s: %s", type_, user_id, exc)

    @classmethod
    def incoming_requests(cls, user_id: str) -> List[FriendRequestRead]:
        """Pending requests addressed to the user, newest first, with sender profiles."""
        return cls._pending(user_id, "to_user_id", "from_user_id", "from_user")

    @classmethod
    def outgoing_requests(cls, user_id: str) -> List[FriendRequestRead]:
        """Pending requests sent by the user, newest first, with recipient profiles."""
        return cls._pending(user_id, "from_user_id", "to_user_id", "to_user")

    @classmethod
    def _pending(
        cls, user_id: str, own_column: str, other_column: str, profile_key: str
    ) -> List[FriendRequestRead]:
        client = cls._client()
        pending = rows(
            client.table("friend_requests")
            .select("id", "from_user_id", "to_user_id", "status", "created_at")
            .eq(own_column, user_id)
            .eq("status", "pending")
            .order("created_at", desc=True)
            .execute()
        )
        if not pending:
            return []
        profiles = fetch_profiles(client, (r[other_column] for r in pending))
        return [FriendRequestRead(**r, **{profile_key: profiles.get(r[other_column])}) for r in pending]

    @classmethod
    def remove_friend(cls, user_id: str, friend_id: str) -> None:
        """Delete the friendship in both directions."""
        client = cls._client()
        for owner, friend in ((user_id, friend_id), (friend_id, user_id)):
            client.table("friendships").delete().eq("user_id", owner).eq("friend_id", friend).execute()
        logger.info("Friendship between %s and %s removed", user_id, friend_id)
