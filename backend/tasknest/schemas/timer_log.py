"""
TaskNest Backend — Timer Log Schemas
======================================
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class TimerLogCreate(BaseModel):
    elapsed_seconds: int = Field(ge=0, description="Seconds spent on the checklist")


class TimerLogResponse(BaseModel):
    id: uuid.UUID
    checklist_id: uuid.UUID
    elapsed_seconds: int
    created_at: datetime

    model_config = {"from_attributes": True}
