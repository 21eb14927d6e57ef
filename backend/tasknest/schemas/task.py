"""
TaskNest Backend — Task Request/Response Schemas
==================================================

What:  Pydantic models for task creation, partial update and output.

TaskUpdate relies on Pydantic's "fields set" tracking: the service applies
`model_dump(exclude_unset=True)`, so a field omitted from the JSON body is
left alone while a field sent as null is written as null.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    checklist_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = Field(
        default=None,
        description="Parent task; must belong to the same checklist",
    )
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    order_num: int = Field(default=0, description="Sort position among siblings")
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    allocated_time: Optional[int] = Field(default=None, ge=0, description="Time budget in minutes")


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    is_completed: Optional[bool] = None
    order_num: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    allocated_time: Optional[int] = Field(default=None, ge=0)


class TaskResponse(BaseModel):
    id: uuid.UUID
    checklist_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    title: str
    description: Optional[str] = None
    order_num: int
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    allocated_time: Optional[int] = None
    is_completed: bool
    created_at: datetime

    model_config = {"from_attributes": True}
