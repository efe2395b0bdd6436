"""
Business logic for cards.

Besides CRUD on the ``cards`` table this service maintains the card's
many‑to‑many relations (``card_labels``, ``card_members``) and its file
attachments.  Attachment bytes go to Supabase Storage; the
``card_attachments`` table keeps the metadata and public URL.
"""

import logging
import re
import time
from typing import Any, BinaryIO, Dict, Iterable, List, Optional

from supabase import PostgrestAPIError, StorageException

from ..core.config import settings
from ..core.errors import BadRequestError, ConflictError, NotFoundError, PayloadTooLargeError, is_no_rows
from ..core.supabase import get_supabase
from ..schemas.card import AttachmentRead, CardCreate, CardRead
from .helpers import find_one, first_row, now_iso, rows


logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _too_large() -> PayloadTooLargeError:
    limit_mb = settings.max_upload_bytes // (1024 * 1024)
    return PayloadTooLargeError(f"File exceeds the {limit_mb}MB upload limit")


def check_upload_size(content: bytes) -> None:
    """Reject empty uploads and uploads above ``settings.max_upload_bytes``."""
    if not content:
        raise BadRequestError("Uploaded file is empty")
    if len(content) > settings.max_upload_bytes:
        raise _too_large()


def read_upload(stream: BinaryIO, size: Optional[int] = None) -> bytes:
    """Read an uploaded file, never more than one byte past the upload limit.

    ``size`` is the length announced by the client, when known; larger
    files are refused without reading them.
    """
    if size is not None and size > settings.max_upload_bytes:
        raise _too_large()
    content = stream.read(settings.max_upload_bytes + 1)
    check_upload_size(content)
    return content


class CardService:
    """Сервис для работы с карточками."""

    @classmethod
    def _client(cls, access_token: Optional[str] = None):
        return get_supabase().get_client_for_user(access_token)

    @classmethod
    def list_cards(
        cls, list_id: Optional[str] = None, access_token: Optional[str] = None
    ) -> List[CardRead]:
        query = cls._client(access_token).table("cards").select("*").order("position")
        if list_id:
            query = query.eq("list_id", list_id)
        return [CardRead(**row) for row in rows(query.execute())]

    @classmethod
    def get_card(cls, card_id: str, access_token: Optional[str] = None) -> CardRead:
        try:
            response = (
                cls._client(access_token).table("cards").select("*").eq("id", card_id).single().execute()
            )
        except PostgrestAPIError as exc:
            if not is_no_rows(exc):
                raise
            raise NotFoundError(f"Card with ID {card_id} not found") from exc
        return CardRead(**response.data)

    @classmethod
    def create_card(cls, data: CardCreate, access_token: Optional[str] = None) -> CardRead:
        payload = data.model_dump(exclude_none=True)
        row = first_row(cls._client(access_token).table("cards").insert(payload).execute())
        return CardRead(**row)

    @classmethod
    def update_card(
        cls, card_id: str, updates: Dict[str, Any], access_token: Optional[str] = None
    ) -> CardRead:
        """Apply a partial update.

        ``label_ids`` and ``member_ids`` are not card columns; when
        present they replace the card's label and member relations.
        """
        updates = dict(updates)
        label_ids = updates.pop("label_ids", None)
        member_ids = updates.pop("member_ids", None)
        client = cls._client(access_token)

        if updates:
            updates["updated_at"] = now_iso()
            row = first_row(client.table("cards").update(updates).eq("id", card_id).execute())
            if row is None:
                raise NotFoundError(f"Card with ID {card_id} not found")
            card = CardRead(**row)
        else:
            card = cls.get_card(card_id, access_token)

        if label_ids is not None:
            cls._replace_relation(client, "card_labels", "label_id", card_id, label_ids)
        if member_ids is not None:
            cls._replace_relation(client, "card_members", "user_id", card_id, member_ids)
        return card

    @classmethod
    def _replace_relation(
        cls, client: Any, table: str, column: str, card_id: str, values: Iterable[str]
    ) -> None:
        client.table(table).delete().eq("card_id", card_id).execute()
        unique_values = list(dict.fromkeys(values))
        if unique_values:
            client.table(table).insert(
                [{"card_id": card_id, column: value} for value in unique_values]
            ).execute()

    @classmethod
    def get_card_label_ids(cls, card_id: str, access_token: Optional[str] = None) -> List[str]:
        response = (
            cls._client(access_token).table("card_labels").select("label_id").eq("card_id", card_id).execute()
        )
        return [row["label_id"] for row in rows(response)]

    @classmethod
    def get_card_member_ids(cls, card_id: str, access_token: Optional[str] = None) -> List[str]:
        response = (
            cls._client(access_token).table("card_members").select("user_id").eq("card_id", card_id).execute()
        )
        return [row["user_id"] for row in rows(response)]

    @classmethod
    def delete_card(cls, card_id: str, access_token: Optional[str] = None) -> None:
        cls._client(access_token).table("cards").delete().eq("id", card_id).execute()

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    @classmethod
    def list_attachments(cls, card_id: str, access_token: Optional[str] = None) -> List[AttachmentRead]:
        response = (
            cls._client(access_token)
            .table("card_attachments")
            .select("*")
            .eq("card_id", card_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [AttachmentRead(**row) for row in rows(response)]

    @classmethod
    def add_attachment(
        cls,
        card_id: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> AttachmentRead:
        """Upload a file to storage and record it against the card.

        Raises ``NotFoundError`` for an unknown card,
        ``PayloadTooLargeError`` above the upload limit and
        ``ConflictError`` when storage rejects the upload.
        """
        check_upload_size(content)
        client = cls._client(access_token)
        if find_one(client.table("cards").select("id").eq("id", card_id)) is None:
            raise NotFoundError(f"Card with ID {card_id} not found")

        safe_name = _UNSAFE_FILENAME_CHARS.sub("_", filename or "file").strip("_") or "file"
        file_path = f"{card_id}/{int(time.time() * 1000)}-{safe_name}"
        bucket = client.storage.from_(settings.attachment_bucket)
        try:
            bucket.upload(
                file_path,
                content,
                {"content-type": content_type or "application/octet-stream", "upsert": "false"},
            )
        except StorageException as exc:
            raise ConflictError(f"Attachment upload failed: {exc}") from exc
        file_url = bucket.get_public_url(file_path)

        record = {
            "card_id": card_id,
            "file_name": filename or safe_name,
            "file_path": file_path,
            "file_url": file_url,
            "file_size": len(content),
            "mime_type": content_type,
        }
        row = first_row(client.table("card_attachments").insert(record).execute())
        logger.info("Attached %s (%d bytes) to card %s", file_path, len(content), card_id)
        return AttachmentRead(**row)

    @classmethod
    def remove_attachment(cls, attachment_id: str, access_token: Optional[str] = None) -> None:
        """Delete the stored object and then its metadata row."""
        client = cls._client(access_token)
        attachment = find_one(client.table("card_attachments").select("*").eq("id", attachment_id))
        if attachment is None:
            raise NotFoundError(f"Attachment with ID {attachment_id} not found")
        try:
            client.storage.from_(settings.attachment_bucket).remove([attachment["file_path"]])
        except StorageException as exc:
            # Metadata row is deleted regardless.
            logger.warning("Could not remove stored file %s: %s", attachment["file_path"], exc)
        client.table("card_attachments").delete().eq("id", attachment_id).execute()
