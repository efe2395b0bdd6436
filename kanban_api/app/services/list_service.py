"""
Business logic for lists.

Lists are read and written with the admin client: board collaborators
need to manage the columns of boards they do not own, which the row
level security policies on ``lists`` do not allow for the anon role.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import PostgrestAPIError

from ..core.errors import NotFoundError, is_no_rows
from ..core.supabase import get_supabase
from ..schemas.board_list import ListCreate, ListRead
from .helpers import first_row, now_iso, rows


logger = logging.getLogger(__name__)


class ListService:
    """CRUD operations for the ``lists`` table."""

    @classmethod
    def _client(cls):
        return get_supabase().get_admin_client()

    @classmethod
    def list_lists(cls, board_id: Optional[str] = None) -> List[ListRead]:
        query = cls._client().table("lists").select("*").order("position")
        if board_id:
            query = query.eq("board_id", board_id)
        return [ListRead(**row) for row in rows(query.execute())]

    @classmethod
    def get_list(cls, list_id: str) -> ListRead:
        try:
            response = cls._client().table("lists").select("*").eq("id", list_id).single().execute()
        except PostgrestAPIError as exc:
            if not is_no_rows(exc):
                raise
            raise NotFoundError(f"List with ID {list_id} not found") from exc
        return ListRead(**response.data)

    @classmethod
    def create_list(cls, data: ListCreate) -> ListRead:
        logger.info("Creating list '%s' on board %s", data.title, data.board_id)
        row = first_row(cls._client().table("lists").insert(data.model_dump(exclude_none=True)).execute())
        return ListRead(**row)

    @classmethod
    def update_list(cls, list_id: str, updates: Dict[str, Any]) -> ListRead:
        if not updates:
            return cls.get_list(list_id)
        updates = dict(updates, updated_at=now_iso())
        row = first_row(cls._client().table("lists").update(updates).eq("id", list_id).execute())
        if row is None:
            raise NotFoundError(f"List with ID {list_id} not found")
        return ListRead(**row)

    @classmethod
    def delete_list(cls, list_id: str) -> None:
        logger.info("Deleting list %s", list_id)
        cls._client().table("lists").delete().eq("id", list_id).execute()
