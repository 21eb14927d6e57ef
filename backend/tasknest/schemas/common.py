"""
TaskNest Backend — Shared Response Schemas
============================================

What:  Response models used across every resource: the error envelope,
       simple acknowledgement messages and the health report.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "Profile name already exists",
            "code": "conflict",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    """Acknowledgement for actions that do not return a resource."""
    message: str = Field(description="Human-readable outcome")
    checklist_id: Optional[UUID] = Field(
        default=None,
        description="Checklist created by the action, when there is one",
    )


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
