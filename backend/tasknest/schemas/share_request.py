"""
TaskNest Backend — Share Request Schemas
==========================================

What:  Contract for sending, listing and answering share requests.

The pending list mirrors the joined shape the frontend renders:
    {
        "id": "...", "status": "pending", "created_at": "...", "checklist_id": "...",
        "checklist": {"title": "Trip"},
        "sender": {"name": "alice", "avatar_url": null}
    }
`checklist` / `sender` are null when the referenced row no longer exists.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ShareCreate(BaseModel):
    sender_id: uuid.UUID
    receiver_name: str = Field(min_length=1, description="Display name of the receiving profile")


class ShareRespond(BaseModel):
    action: str = Field(description="'accept' or 'reject'")


class ShareRequestResponse(BaseModel):
    id: uuid.UUID
    checklist_id: uuid.UUID
    sender_id: uuid.UUID
    receiver_id: uuid.UUID
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ChecklistTitle(BaseModel):
    title: str


class SenderSummary(BaseModel):
    name: str
    avatar_url: Optional[str] = None


class PendingShareRequest(BaseModel):
    id: uuid.UUID
    status: str
    created_at: datetime
    checklist_id: uuid.UUID
    checklist: Optional[ChecklistTitle] = None
    sender: Optional[SenderSummary] = None
