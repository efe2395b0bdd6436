"""
Card endpoints for API v1.

Cards belong to a list.  Their labels and members are many‑to‑many
relations: ``PUT /cards/{card_id}`` with ``labelIds``/``memberIds``
replaces them, ``GET /cards/{card_id}/labels|members`` reads them back.
Attachments are uploaded as multipart form data (field ``file``).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status

from kanban_api.app.core.errors import http_errors
from kanban_api.app.core.security import get_access_token
from kanban_api.app.schemas.card import AttachmentRead, CardCreate, CardRead, CardUpdate
from kanban_api.app.services.card_service import CardService, read_upload


router = APIRouter()


@router.get("", response_model=List[CardRead])
def list_cards(
    list_id: Optional[str] = Query(None, alias="listId"),
    token: Optional[str] = Depends(get_access_token),
) -> List[CardRead]:
    return CardService.list_cards(list_id, access_token=token)


@router.post("", response_model=CardRead, status_code=status.HTTP_201_CREATED)
def create_card(payload: CardCreate, token: Optional[str] = Depends(get_access_token)) -> CardRead:
    return CardService.create_card(payload, access_token=token)


@router.delete("/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attachment(attachment_id: str, token: Optional[str] = Depends(get_access_token)) -> Response:
    """Remove the stored file and its metadata.  Raises 404 if unknown."""
    with http_errors():
        CardService.remove_attachment(attachment_id, access_token=token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{card_id}", response_model=CardRead)
def get_card(card_id: str, token: Optional[str] = Depends(get_access_token)) -> CardRead:
    with http_errors():
        return CardService.get_card(card_id, access_token=token)


@router.put("/{card_id}", response_model=CardRead)
def update_card(
    card_id: str,
    updates: CardUpdate,
    token: Optional[str] = Depends(get_access_token),
) -> CardRead:
    """Обновить карточку.

    Moving a card between lists is an update of ``list_id`` and
    ``position``.  ``label_ids``/``member_ids`` replace the card's
    relations when present.
    """
    with http_errors():
        return CardService.update_card(card_id, updates.model_dump(exclude_unset=True), access_token=token)


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_card(card_id: str, token: Optional[str] = Depends(get_access_token)) -> Response:
    CardService.delete_card(card_id, access_token=token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{card_id}/labels", response_model=List[str])
def card_labels(card_id: str, token: Optional[str] = Depends(get_access_token)) -> List[str]:
    return CardService.get_card_label_ids(card_id, access_token=token)


@router.get("/{card_id}/members", response_model=List[str])
def card_members(card_id: str, token: Optional[str] = Depends(get_access_token)) -> List[str]:
    return CardService.get_card_member_ids(card_id, access_token=token)


@router.get("/{card_id}/attachments", response_model=List[AttachmentRead])
def list_attachments(card_id: str, token: Optional[str] = Depends(get_access_token)) -> List[AttachmentRead]:
    return CardService.list_attachments(card_id, access_token=token)


@router.post(
    "/{card_id}/attachments",
    response_model=AttachmentRead,
    status_code=status.HTTP_201_CREATED,
)
def upload_attachment(
    card_id: str,
    file: UploadFile = File(...),
    token: Optional[str] = Depends(get_access_token),
) -> AttachmentRead:
    """Attach a file (at most 10 MB) to the card."""
    with http_errors():
        content = read_upload(file.file, file.size)
        return CardService.add_attachment(
            card_id, file.filename or "file", content, file.content_type, access_token=token
        )
