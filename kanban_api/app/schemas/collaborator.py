"""
Pydantic schemas for board collaborators.

A collaborator row grants a non‑owner access to a board.  Rows start
``pending`` when the owner invites someone and become ``accepted``
when the invitee responds; declining deletes the row.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from .user import UserProfile


CollaboratorRole = Literal["owner", "editor", "viewer"]
AssignableRole = Literal["editor", "viewer"]
CollaboratorStatus = Literal["pending", "accepted"]


class CollaboratorCreate(BaseModel):
    model_config = {"populate_by_name": True}

    user_id: str = Field(..., alias="userId")
    invited_by: str = Field(..., alias="invitedBy")
    role: AssignableRole = "editor"


class CollaboratorRespond(BaseModel):
    model_config = {"populate_by_name": True}

    user_id: str = Field(..., alias="userId")
    accept: bool


class CollaboratorRoleUpdate(BaseModel):
    model_config = {"populate_by_name": True}

    role: AssignableRole
    requester_id: str = Field(..., alias="requesterId")


class CollaboratorRemove(BaseModel):
    model_config = {"populate_by_name": True}

    requester_id: str = Field(..., alias="requesterId")


class CollaboratorRead(BaseModel):
    id: str
    board_id: str
    user_id: str
    role: CollaboratorRole
    status: CollaboratorStatus
    invited_by: Optional[str] = None
    created_at: Optional[str] = None
    user: Optional[UserProfile] = None


class SharedBoardRead(BaseModel):
    """A board seen from a collaborator's side."""

    id: str
    title: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[str] = None
    last_opened_at: Optional[str] = None
    owner: Optional[UserProfile] = None
    role: CollaboratorRole
    status: CollaboratorStatus


class AccessRead(BaseModel):
    has_access: bool
