"""
TaskNest Backend — Share Request Route Handlers
=================================================

What:  Send a checklist to another profile, list a profile's pending
       requests and answer them.

Request Flow (accept):
    POST /api/share-requests/{id}/respond {"action": "accept"}
      → ShareService.respond(): pending check, conditional status update
      → ChecklistCloner.clone(): copy checklist + task tree to the receiver
      → 200 {"message": "Accepted and cloned checklist", "checklist_id": ...}
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.database import get_db_session
from tasknest.schemas.common import ErrorResponse, MessageResponse
from tasknest.schemas.share_request import (
    PendingShareRequest,
    ShareCreate,
    ShareRequestResponse,
    ShareRespond,
)
from tasknest.services.share_service import share_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Share Requests"])


@router.post(
    "/checklists/{checklist_id}/share",
    status_code=201,
    response_model=ShareRequestResponse,
    responses={
        400: {"description": "Sender ID or receiver name missing", "model": ErrorResponse},
        404: {"description": "Checklist or receiver not found", "model": ErrorResponse},
    },
    summary="Offer a checklist to another profile by name",
)
async def share_checklist(
    checklist_id: UUID,
    body: ShareCreate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ShareRequestResponse:
    return await share_service.create_request(db, checklist_id, body)


@router.get(
    "/profiles/{profile_id}/share-requests",
    response_model=List[PendingShareRequest],
    summary="Pending share requests addressed to a profile",
)
async def list_pending_requests(
    profile_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[PendingShareRequest]:
    return await share_service.list_pending(db, profile_id)


@router.post(
    "/share-requests/{request_id}/respond",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid action or request already processed", "model": ErrorResponse},
        404: {"description": "Request not found", "model": ErrorResponse},
    },
    summary="Accept or reject a share request",
)
async def respond_to_request(
    request_id: UUID,
    body: ShareRespond,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> MessageResponse:
    return await share_service.respond(db, request_id, body.action)
