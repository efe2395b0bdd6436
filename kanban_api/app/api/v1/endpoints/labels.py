"""Label endpoints for API v1."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from kanban_api.app.core.errors import http_errors
from kanban_api.app.core.security import get_access_token
from kanban_api.app.schemas.label import LabelCreate, LabelRead, LabelUpdate
from kanban_api.app.services.label_service import LabelService


router = APIRouter()


@router.get("", response_model=List[LabelRead])
def list_labels(
    board_id: Optional[str] = Query(None, alias="boardId"),
    token: Optional[str] = Depends(get_access_token),
) -> List[LabelRead]:
    """Метки доски, отсортированные по названию."""
    return LabelService.list_labels(board_id, access_token=token)


@router.get("/{label_id}", response_model=LabelRead)
def get_label(label_id: str, token: Optional[str] = Depends(get_access_token)) -> LabelRead:
    with http_errors():
        return LabelService.get_label(label_id, access_token=token)


@router.post("", response_model=LabelRead, status_code=status.HTTP_201_CREATED)
def create_label(payload: LabelCreate, token: Optional[str] = Depends(get_access_token)) -> LabelRead:
    return LabelService.create_label(payload, access_token=token)


@router.put("/{label_id}", response_model=LabelRead)
def update_label(
    label_id: str,
    updates: LabelUpdate,
    token: Optional[str] = Depends(get_access_token),
) -> LabelRead:
    with http_errors():
        return LabelService.update_label(
            label_id, updates.model_dump(exclude_unset=True), access_token=token
        )


@router.delete("/{label_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_label(label_id: str, token: Optional[str] = Depends(get_access_token)) -> Response:
    LabelService.delete_label(label_id, access_token=token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
