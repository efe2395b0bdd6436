"""
Pydantic models for boards.

``BoardBase`` contains the editable fields; ``BoardCreate`` adds the
owner and ``BoardRead`` the columns maintained by the database.
"""

from typing import Optional

from pydantic import BaseModel, Field


class BoardBase(BaseModel):
    title: str = Field(..., min_length=1, examples=["Sprint 12"])
    description: Optional[str] = Field(None, examples=["Work planned for the sprint"])
    color: Optional[str] = Field(None, examples=["#8b5cf6"])


class BoardCreate(BoardBase):
    """Schema for creating a board.

    ``user_id`` may be omitted when the request carries a bearer token;
    the authenticated user then becomes the owner.
    """

    model_config = {"populate_by_name": True}

    user_id: Optional[str] = Field(None, alias="userId")


class BoardUpdate(BaseModel):
    """All fields are optional; only provided fields will be updated."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None


class BoardRead(BoardBase):
    id: str
    user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    last_opened_at: Optional[str] = None


class DefaultBoardRequest(BaseModel):
    model_config = {"populate_by_name": True}

    user_id: Optional[str] = Field(None, alias="userId")
