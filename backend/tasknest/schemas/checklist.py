"""
TaskNest Backend — Checklist Request/Response Schemas
=======================================================
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class ChecklistCreate(BaseModel):
    profile_id: uuid.UUID = Field(description="Owning profile")
    title: str = Field(min_length=1, max_length=255)


class ChecklistUpdate(BaseModel):
    title: str = Field(min_length=1, max_length=255)


class ChecklistDeleteConfirm(BaseModel):
    """Credentials re-checked before a password-confirmed delete."""
    profile_id: uuid.UUID
    password: str = Field(min_length=1)


class ChecklistResponse(BaseModel):
    id: uuid.UUID
    profile_id: uuid.UUID
    title: str
    is_shared_copy: bool = Field(description="True when produced by accepting a share request")
    created_at: datetime

    model_config = {"from_attributes": True}
