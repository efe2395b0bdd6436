"""
List endpoints for API v1.

Lists are the columns of a board.  ``GET /lists`` returns them ordered
by ``position`` so the frontend can render columns without sorting.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from kanban_api.app.core.errors import http_errors
from kanban_api.app.schemas.board_list import ListCreate, ListRead, ListUpdate
from kanban_api.app.services.list_service import ListService


router = APIRouter()


@router.get("", response_model=List[ListRead])
def list_lists(board_id: Optional[str] = Query(None, alias="boardId")) -> List[ListRead]:
    return ListService.list_lists(board_id)


@router.get("/{list_id}", response_model=ListRead)
def get_list(list_id: str) -> ListRead:
    with http_errors():
        return ListService.get_list(list_id)


@router.post("", response_model=ListRead, status_code=status.HTTP_201_CREATED)
def create_list(payload: ListCreate) -> ListRead:
    return ListService.create_list(payload)


@router.put("/{list_id}", response_model=ListRead)
def update_list(list_id: str, updates: ListUpdate) -> ListRead:
    """Rename, recolor or move a list.  Raises 404 if the list does not exist."""
    with http_errors():
        return ListService.update_list(list_id, updates.model_dump(exclude_unset=True))


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_list(list_id: str) -> Response:
    ListService.delete_list(list_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
