"""Business logic for board labels."""

import logging
from typing import Any, Dict, List, Optional

from supabase import PostgrestAPIError

from ..core.errors import NotFoundError, is_no_rows
from ..core.supabase import get_supabase
from ..schemas.label import LabelCreate, LabelRead
from .helpers import first_row, rows


logger = logging.getLogger(__name__)


class LabelService:

    @classmethod
    def _client(cls, access_token: Optional[str] = None):
        return get_supabase().get_client_for_user(access_token)

    @classmethod
    def list_labels(
        cls, board_id: Optional[str] = None, access_token: Optional[str] = None
    ) -> List[LabelRead]:
        """Return labels ordered by name, optionally restricted to one board."""
        query = cls._client(access_token).table("labels").select("*").order("name")
        if board_id:
            query = query.eq("board_id", board_id)
        return [LabelRead(**row) for row in rows(query.execute())]

    @classmethod
    def get_label(cls, label_id: str, access_token: Optional[str] = None) -> LabelRead:
        try:
            response = (
                cls._client(access_token).table("labels").select("*").eq("id", label_id).single().execute()
            )
        except PostgrestAPIError as exc:
            if not is_no_rows(exc):
                raise
            raise NotFoundError(f"Label with ID {label_id} not found") from exc
        return LabelRead(**response.data)

    @classmethod
    def create_label(cls, data: LabelCreate, access_token: Optional[str] = None) -> LabelRead:
        row = first_row(cls._client(access_token).table("labels").insert(data.model_dump()).execute())
        return LabelRead(**row)

    @classmethod
    def update_label(
        cls, label_id: str, updates: Dict[str, Any], access_token: Optional[str] = None
    ) -> LabelRead:
        if not updates:
            return cls.get_label(label_id, access_token)
        row = first_row(
            cls._client(access_token).table("labels").update(updates).eq("id", label_id).execute()
        )
        if row is None:
            raise NotFoundError(f"Label with ID {label_id} not found")
        return LabelRead(**row)

    @classmethod
    def delete_label(cls, label_id: str, access_token: Optional[str] = None) -> None:
        cls._client(access_token).table("labels").delete().eq("id", label_id).execute()
