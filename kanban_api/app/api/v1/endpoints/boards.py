"""
Board endpoints for API v1.

Besides CRUD on boards this router exposes the collaboration routes
(``/boards/{board_id}/collaborators/...``), the boards shared with a
user and the access check used by the frontend before opening a board.
Literal paths (``/default``, ``/shared/...``) are declared before
``/{board_id}`` so they are not captured by it.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from kanban_api.app.core.errors import http_errors
from kanban_api.app.core.security import get_access_token, get_optional_user
from kanban_api.app.schemas.board import BoardCreate, BoardRead, BoardUpdate, DefaultBoardRequest
from kanban_api.app.schemas.collaborator import (
    AccessRead,
    CollaboratorCreate,
    CollaboratorRead,
    CollaboratorRemove,
    CollaboratorRespond,
    CollaboratorRoleUpdate,
    SharedBoardRead,
)
from kanban_api.app.services.board_service import BoardService
from kanban_api.app.services.collaborator_service import CollaboratorService


router = APIRouter()


@router.get("", response_model=List[BoardRead])
def list_boards(
    user_id: Optional[str] = Query(None, alias="userId"),
    current_user: Optional[Dict[str, Any]] = Depends(get_optional_user),
) -> List[BoardRead]:
    """Список досок, последние открытые первыми.

    Filtered by ``userId`` when given, otherwise by the caller identified
    by the bearer token (if any).
    """
    token = current_user["access_token"] if current_user else None
    if user_id is None and current_user:
        user_id = current_user["id"]
    return BoardService.list_boards(user_id=user_id, access_token=token)


@router.post("", response_model=BoardRead, status_code=status.HTTP_201_CREATED)
def create_board(
    board: BoardCreate,
    current_user: Optional[Dict[str, Any]] = Depends(get_optional_user),
) -> BoardRead:
    """Create a board together with its three default lists."""
    owner_id = current_user["id"] if current_user else None
    token = current_user["access_token"] if current_user else None
    return BoardService.create_board(board, owner_id=owner_id, access_token=token)


@router.post("/default", response_model=BoardRead)
def default_board(
    payload: DefaultBoardRequest,
    current_user: Optional[Dict[str, Any]] = Depends(get_optional_user),
) -> BoardRead:
    """Return the user's first board, creating "My First Board" when they have none."""
    user_id = payload.user_id or (current_user["id"] if current_user else None)
    if not user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="userId is required")
    token = current_user["access_token"] if current_user else None
    return BoardService.create_default_board(user_id, access_token=token)


@router.get("/shared/{user_id}", response_model=List[SharedBoardRead])
def shared_boards(user_id: str) -> List[SharedBoardRead]:
    """Boards other users shared with ``user_id``."""
    return CollaboratorService.shared_boards(user_id)


@router.get("/{board_id}", response_model=BoardRead)
def get_board(board_id: str, token: Optional[str] = Depends(get_access_token)) -> BoardRead:
    """Retrieve a board and mark it as opened.  Raises 404 if missing."""
    with http_errors():
        return BoardService.get_board(board_id, access_token=token)


@router.put("/{board_id}", response_model=BoardRead)
def update_board(
    board_id: str,
    updates: BoardUpdate,
    token: Optional[str] = Depends(get_access_token),
) -> BoardRead:
    """Partially update a board; unspecified fields remain unchanged."""
    with http_errors():
        return BoardService.update_board(
            board_id, updates.model_dump(exclude_unset=True), access_token=token
        )


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_board(board_id: str, token: Optional[str] = Depends(get_access_token)) -> Response:
    BoardService.delete_board(board_id, access_token=token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@router.get("/{board_id}/collaborators", response_model=List[CollaboratorRead])
def list_collaborators(board_id: str) -> List[CollaboratorRead]:
    return CollaboratorService.get_collaborators(board_id)


@router.post(
    "/{board_id}/collaborators",
    response_model=CollaboratorRead,
    status_code=status.HTTP_201_CREATED,
)
def add_collaborator(board_id: str, payload: CollaboratorCreate) -> CollaboratorRead:
    """Пригласить пользователя к доске.

    Only the owner may invite (403).  Inviting someone already on the
    board answers 409.  The invitee receives a ``board_invite``
    notification.
    """
    with http_errors():
        return CollaboratorService.add_collaborator(
            board_id, payload.user_id, payload.invited_by, payload.role
        )


@router.post("/{board_id}/collaborators/respond", response_model=Optional[CollaboratorRead])
def respond_to_invitation(board_id: str, payload: CollaboratorRespond) -> Optional[CollaboratorRead]:
    """Accept (returns the collaborator) or decline (returns ``null``) an invitation."""
    with http_errors():
        return CollaboratorService.respond(board_id, payload.user_id, payload.accept)


@router.patch("/{board_id}/collaborators/{user_id}/role", response_model=CollaboratorRead)
def update_collaborator_role(
    board_id: str, user_id: str, payload: CollaboratorRoleUpdate
) -> CollaboratorRead:
    with http_errors():
        return CollaboratorService.update_role(board_id, user_id, payload.role, payload.requester_id)


@router.delete("/{board_id}/collaborators/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_collaborator(board_id: str, user_id: str, payload: CollaboratorRemove) -> Response:
    """Remove a collaborator (owner) or leave the board (the collaborator themselves)."""
    with http_errors():
        CollaboratorService.remove(board_id, user_id, payload.requester_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{board_id}/access/{user_id}", response_model=AccessRead)
def check_access(board_id: str, user_id: str) -> AccessRead:
    return AccessRead(has_access=CollaboratorService.has_access(board_id, user_id))
