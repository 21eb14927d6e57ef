"""
TaskNest Backend — Profile Request/Response Schemas
=====================================================

What:  Pydantic models defining the profile API contract.

ProfileResponse is the only shape a profile ever leaves the API in. It has
no password field, so `model_validate(profile_row)` cannot leak the hash.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ProfileCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100, description="Unique display name")
    password: str = Field(min_length=1, description="Plain-text password (hashed on arrival)")
    avatar_url: Optional[str] = Field(default=None, description="Avatar image URL")


class ProfileUpdate(BaseModel):
    """
    Partial update. Only fields present in the request body are applied;
    a null `name` or `password` is ignored, a null `avatar_url` clears it.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    password: Optional[str] = Field(default=None, min_length=1)
    avatar_url: Optional[str] = None


class LoginRequest(BaseModel):
    """Identify the profile by id or by name, plus the password."""
    profile_id: Optional[uuid.UUID] = None
    name: Optional[str] = Field(default=None, min_length=1)
    password: str = Field(min_length=1)

    @model_validator(mode="after")
    def require_identity(self) -> "LoginRequest":
        if self.profile_id is None and not self.name:
            raise ValueError("Profile ID or name required")
        return self


class ProfileResponse(BaseModel):
    id: uuid.UUID = Field(description="Unique profile identifier")
    name: str = Field(description="Display name")
    avatar_url: Optional[str] = Field(default=None, description="Avatar image URL")
    created_at: datetime = Field(description="Creation timestamp (UTC)")

    model_config = {"from_attributes": True}
