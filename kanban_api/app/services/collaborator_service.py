"""
Board collaborators.

Only the owner of a board may invite collaborators, change their role
or remove them; a collaborator may always remove themselves.  An
invitation is a ``pending`` row in ``board_collaborators``: accepting
it flips the status to ``accepted``, declining deletes the row.

Invitees and removed users are told through notifications.  A failure
to notify never undoes the membership change.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import PostgrestAPIError

from ..core.errors import ConflictError, NotFoundError, PermissionDeniedError, is_unique_violation
from ..core.supabase import get_supabase
from ..schemas.collaborator import CollaboratorRead, SharedBoardRead
from .helpers import fetch_profiles, find_one, first_row, rows
from .notification_service import NotificationService


logger = logging.getLogger(__name__)

COLLABORATOR_COLUMNS = ("id", "board_id", "user_id", "role", "status", "invited_by", "created_at")


def _display_name(profile: Optional[Dict[str, Any]], fallback: str) -> str:
    if not profile:
        return fallback
    return profile.get("full_name") or profile.get("username") or fallback


class CollaboratorService:
    """Сервис совместного доступа к доскам."""

    @classmethod
    def _client(cls):
        return get_supabase().get_admin_client()

    @classmethod
    def _board(cls, client: Any, board_id: str) -> Dict[str, Any]:
        board = find_one(client.table("boards").select("id", "user_id", "title").eq("id", board_id))
        if board is None:
            raise NotFoundError("Board not found")
        return board

    @classmethod
    def _membership(cls, client: Any, board_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        return find_one(
            client.table("board_collaborators")
            .select(*COLLABORATOR_COLUMNS)
            .eq("board_id", board_id)
            .eq("user_id", user_id)
        )

    @classmethod
    def get_collaborators(cls, board_id: str) -> List[CollaboratorRead]:
        client = cls._client()
        collaborators = rows(
            client.table("board_collaborators")
            .select(*COLLABORATOR_COLUMNS)
            .eq("board_id", board_id)
            .order("created_at")
            .execute()
        )
        if not collaborators:
            return []
        profiles = fetch_profiles(client, (c["user_id"] for c in collaborators))
        return [CollaboratorRead(**c, user=profiles.get(c["user_id"])) for c in collaborators]

    @classmethod
    def add_collaborator(
        cls, board_id: str, user_id: str, invited_by: str, role: str = "editor"
    ) -> CollaboratorRead:
        """Invite ``user_id`` to the board on behalf of its owner.

        Raises ``NotFoundError`` for an unknown board,
        ``PermissionDeniedError`` when ``invited_by`` is not the owner and
        ``ConflictError`` when the user is already on the board.
        """
        client = cls._client()
        board = cls._board(client, board_id)
        if board["user_id"] != invited_by:
            raise PermissionDeniedError("Only the board owner can add collaborators")
        if cls._membership(client, board_id, user_id) is not None:
            raise ConflictError("User is already a collaborator on this board")

        try:
            row = first_row(
                client.table("board_collaborators")
                .insert(
                    {
                        "board_id": board_id,
                        "user_id": user_id,
                        "role": role,
                        "status": "pending",
                        "invited_by": invited_by,
                    }
                )
                .execute()
            )
        except PostgrestAPIError as exc:
            if is_unique_violation(exc):
                raise ConflictError("User is already a collaborator on this board") from exc
            raise
        logger.info("User %s invited to board %s as %s", user_id, board_id, role)

        inviter = fetch_profiles(client, [invited_by]).get(invited_by)
        try:
            NotificationService.create(
                user_id,
                "board_invite",
                {
                    "board_id": board_id,
                    "board_title": board["title"],
                    "invited_by": invited_by,
                    "inviter_name": _display_name(inviter, "Someone"),
                },
            )
        except PostgrestAPIError as exc:
            logger.error("Failed to create board_invite notification for %s: %s", user_id, exc)
        return CollaboratorRead(**row)

    @classmethod
    def respond(cls, board_id: str, user_id: str, accept: bool) -> Optional[CollaboratorRead]:
        """Accept (returns the updated row) or decline (returns ``None``) an invitation."""
        client = cls._client()
        if cls._membership(client, board_id, user_id) is None:
            raise NotFoundError("Invitation not found")
        query = client.table("board_collaborators")
        if not accept:
            query.delete().eq("board_id", board_id).eq("user_id", user_id).execute()
            logger.info("User %s declined the invitation to board %s", user_id, board_id)
            return None
        row = first_row(
            query.update({"status": "accepted"}).eq("board_id", board_id).eq("user_id", user_id).execute()
        )
        logger.info("User %s joined board %s", user_id, board_id)
        return CollaboratorRead(**row)

    @classmethod
    def update_role(cls, board_id: str, user_id: str, role: str, requester_id: str) -> CollaboratorRead:
        client = cls._client()
        board = cls._board(client, board_id)
        if board["user_id"] != requester_id:
            raise PermissionDeniedError("Only the board owner can change collaborator roles")
        row = first_row(
            client.table("board_collaborators")
            .update({"role": role})
            .eq("board_id", board_id)
            .eq("user_id", user_id)
            .execute()
        )
        if row is None:
            raise NotFoundError("Collaborator not found")
        logger.info("Role of %s on board %s set to %s", user_id, board_id, role)
        return CollaboratorRead(**row)

    @classmethod
    def remove(cls, board_id: str, user_id: str, requester_id: str) -> None:
        """Remove a collaborator.

        The owner may remove anyone and the removed user is notified; any
        collaborator may remove themselves.
        """
        client = cls._client()
        board = cls._board(client, board_id)
        if board["user_id"] != requester_id and user_id != requester_id:
            raise PermissionDeniedError("Not authorized to remove this collaborator")
        (
            client.table("board_collaborators")
            .delete()
            .eq("board_id", board_id)
            .eq("user_id", user_id)
            .execute()
        )
        logger.info("User %s removed from board %s by %s", user_id, board_id, requester_id)
        if user_id == requester_id:
            return

        remover = fetch_profiles(client, [requester_id]).get(requester_id)
        try:
            NotificationService.create(
                user_id,
                "board_removed",
                {
                    "board_id": board_id,
                    "board_title": board["title"],
                    "removed_by": requester_id,
                    "remover_name": _display_name(remover, "Board owner"),
                },
            )
        except PostgrestAPIError as exc:
            logger.error("Failed to create board_removed notification for %s: %s", user_id, exc)

    @classmethod
    def shared_boards(cls, user_id: str) -> List[SharedBoardRead]:
        """Boards the user collaborates on, most recently opened first."""
        client = cls._client()
        memberships = rows(
            client.table("board_collaborators")
            .select("board_id", "role", "status")
            .eq("user_id", user_id)
            .execute()
        )
        if not memberships:
            return []
        by_board = {m["board_id"]: m for m in memberships}
        boards = rows(
            client.table("boards")
            .select("id", "title", "description", "color", "created_at", "last_opened_at", "user_id")
            .in_("id", list(by_board))
            .order("last_opened_at", desc=True, nullsfirst=False)
            .execute()
        )
        owners = fetch_profiles(client, (b["user_id"] for b in boards))
        shared = []
        for board in boards:
            membership = by_board[board["id"]]
            shared.append(
                SharedBoardRead(
                    id=board["id"],
                    title=board["title"],
                    description=board.get("description"),
                    color=board.get("color"),
                    created_at=board.get("created_at"),
                    last_opened_at=board.get("last_opened_at"),
                    owner=owners.get(board["user_id"]),
                    role=membership["role"],
                    status=membership["status"],
                )
            )
        return shared

    @classmethod
    def has_access(cls, board_id: str, user_id: str) -> bool:
        """True for the board's owner and for any collaborator row, pending or not."""
        client = cls._client()
        board = find_one(client.table("boards").select("user_id").eq("id", board_id))
        if board is None:
            return False
        if board["user_id"] == user_id:
            return True
        return cls._membership(client, board_id, user_id) is not None
