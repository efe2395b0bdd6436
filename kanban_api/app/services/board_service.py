"""
Business logic for boards.

Boards are stored in the ``boards`` table.  Every new board is seeded
with three default lists.  Reading a single board stamps its
``last_opened_at`` column so that board pickers can show the most
recently used boards first.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from supabase import PostgrestAPIError

from ..core.errors import NotFoundError, is_no_rows
from ..core.supabase import get_supabase
from ..schemas.board import BoardCreate, BoardRead
from .helpers import first_row, now_iso, rows


logger = logging.getLogger(__name__)


class BoardService:
    """Сервис для работы с досками."""

    DEFAULT_LISTS = (
        ("To Do", "#3b82f6"),
        ("In Progress", "#f97316"),
        ("Done", "#22c55e"),
    )

    # Same palette as the frontend color picker.
    PALETTE = (
        "#8b5cf6",
        "#06b6d4",
        "#10b981",
        "#f43f5e",
        "#f59e0b",
        "#6366f1",
        "#d946ef",
        "#0ea5e9",
    )

    @classmethod
    def _client(cls, access_token: Optional[str] = None):
        return get_supabase().get_client_for_user(access_token)

    @classmethod
    def list_boards(
        cls, user_id: Optional[str] = None, access_token: Optional[str] = None
    ) -> List[BoardRead]:
        """Return boards, most recently opened first (never‑opened boards last).

        When ``user_id`` is given only that user's boards are returned.
        """
        query = (
            cls._client(access_token)
            .table("boards")
            .select("*")
            .order("last_opened_at", desc=True, nullsfirst=False)
        )
        if user_id:
            query = query.eq("user_id", user_id)
        response = query.execute()
        return [BoardRead(**row) for row in rows(response)]

    @classmethod
    def get_board(cls, board_id: str, access_token: Optional[str] = None) -> BoardRead:
        """Retrieve a board and record that it was opened.

        Raises ``NotFoundError`` if the board does not exist.
        """
        client = cls._client(access_token)
        try:
            response = client.table("boards").select("*").eq("id", board_id).single().execute()
        except PostgrestAPIError as exc:
            if not is_no_rows(exc):
                raise
            raise NotFoundError(f"Board with ID {board_id} not found") from exc
        opened_at = now_iso()
        client.table("boards").update({"last_opened_at": opened_at}).eq("id", board_id).execute()
        board = dict(response.data)
        board["last_opened_at"] = opened_at
        return BoardRead(**board)

    @classmethod
    def create_board(
        cls,
        data: BoardCreate,
        owner_id: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> BoardRead:
        """Insert a board and seed it with the default lists.

        ``owner_id`` is used when the payload does not name an owner.
        """
        payload = data.model_dump(exclude_none=True)
        if "user_id" not in payload and owner_id:
            payload["user_id"] = owner_id
        logger.info("Creating board '%s' for user %s", data.title, payload.get("user_id"))
        client = cls._client(access_token)
        board = first_row(client.table("boards").insert(payload).execute())
        cls._seed_lists(board["id"])
        return BoardRead(**board)

    @classmethod
    def _seed_lists(cls, board_id: str) -> None:
        lists = [
            {"board_id": board_id, "title": title, "position": position, "color": color}
            for position, (title, color) in enumerate(cls.DEFAULT_LISTS)
        ]
        get_supabase().get_admin_client().table("lists").insert(lists).execute()

    @classmethod
    def create_default_board(cls, user_id: str, access_token: Optional[str] = None) -> BoardRead:
        """Return the user's first board, creating a welcome board if they have none."""
        existing = cls.list_boards(user_id=user_id, access_token=access_token)
        if existing:
            return existing[0]
        data = BoardCreate(
            title="My First Board",
            description="Welcome to your first board!",
            color=random.choice(cls.PALETTE),
            user_id=user_id,
        )
        return cls.create_board(data, access_token=access_token)

    @classmethod
    def update_board(
        cls, board_id: str, updates: Dict[str, Any], access_token: Optional[str] = None
    ) -> BoardRead:
        """Apply a partial update.  Raises ``NotFoundError`` if nothing matched."""
        query = cls._client(access_token).table("boards")
        if updates:
            updates = dict(updates, updated_at=now_iso())
            board = first_row(query.update(updates).eq("id", board_id).execute())
        else:
            board = first_row(query.select("*").eq("id", board_id).execute())
        if board is None:
            raise NotFoundError(f"Board with ID {board_id} not found")
        return BoardRead(**board)

    @classmethod
    def delete_board(cls, board_id: str, access_token: Optional[str] = None) -> None:
        """Delete a board.  Lists, cards and collaborators cascade in the database."""
        logger.info("Deleting board %s", board_id)
        cls._client(access_token).table("boards").delete().eq("id", board_id).execute()
