"""Pydantic models for lists (the columns of a board)."""

from typing import Optional

from pydantic import BaseModel, Field


class ListCreate(BaseModel):
    model_config = {"populate_by_name": True}

    board_id: str = Field(..., alias="boardId")
    title: str = Field(..., min_length=1, examples=["To Do"])
    position: int = Field(0, examples=[0])
    color: Optional[str] = Field(None, examples=["#3b82f6"])


class ListUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    position: Optional[int] = None
    color: Optional[str] = None


class ListRead(BaseModel):
    id: str
    board_id: str
    title: str
    position: int
    color: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
