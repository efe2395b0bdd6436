"""
Pydantic models for cards and card attachments.

Labels and members are many‑to‑many relations stored in the
``card_labels`` and ``card_members`` tables.  ``CardUpdate`` accepts
``label_ids`` / ``member_ids`` which replace those relations wholesale.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class CardCreate(BaseModel):
    model_config = {"populate_by_name": True}

    list_id: str = Field(..., alias="listId")
    title: str = Field(..., min_length=1, examples=["Write release notes"])
    description: Optional[str] = None
    position: int = Field(0, examples=[0])
    label_id: Optional[str] = Field(None, alias="labelId")
    due_date: Optional[str] = Field(None, alias="dueDate", examples=["2025-09-01T10:00:00Z"])


class CardUpdate(BaseModel):
    """All fields are optional; only provided fields will be updated."""

    model_config = {"populate_by_name": True}

    list_id: Optional[str] = Field(None, alias="listId")
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    position: Optional[int] = None
    label_id: Optional[str] = Field(None, alias="labelId")
    due_date: Optional[str] = Field(None, alias="dueDate")
    label_ids: Optional[List[str]] = Field(None, alias="labelIds")
    member_ids: Optional[List[str]] = Field(None, alias="memberIds")


class CardRead(BaseModel):
    id: str
    list_id: str
    title: str
    description: Optional[str] = None
    position: int
    label_id: Optional[str] = None
    due_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AttachmentRead(BaseModel):
    id: str
    card_id: str
    file_name: str
    file_path: str
    file_url: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    created_at: Optional[str] = None
