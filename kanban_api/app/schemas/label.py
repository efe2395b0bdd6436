"""Pydantic models for board labels."""

from typing import Optional

from pydantic import BaseModel, Field


class LabelCreate(BaseModel):
    model_config = {"populate_by_name": True}

    board_id: str = Field(..., alias="boardId")
    name: str = Field(..., min_length=1, examples=["Bug"])
    color: str = Field(..., examples=["#f43f5e"])


class LabelUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = None


class LabelRead(BaseModel):
    id: str
    board_id: str
    name: str
    color: str
    created_at: Optional[str] = None
