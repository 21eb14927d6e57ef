"""
TaskNest Backend — Checklist Route Handlers
=============================================

What:  Checklist CRUD plus the password-confirmed delete.

Delete variants:
    DELETE /api/checklists/{id}          plain delete
    POST   /api/checklists/{id}/delete   body {profile_id, password};
                                         401 on a wrong password
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.database import get_db_session
from tasknest.schemas.checklist import (
    ChecklistCreate,
    ChecklistDeleteConfirm,
    ChecklistResponse,
    ChecklistUpdate,
)
from tasknest.schemas.common import ErrorResponse
from tasknest.services.checklist_service import checklist_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Checklists"])


@router.post(
    "/checklists",
    status_code=201,
    response_model=ChecklistResponse,
    responses={
        400: {"description": "Profile ID or title missing", "model": ErrorResponse},
        404: {"description": "Owner profile not found", "model": ErrorResponse},
    },
    summary="Create a checklist",
)
async def create_checklist(
    body: ChecklistCreate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ChecklistResponse:
    return await checklist_service.create_checklist(db, body)


@router.get(
    "/checklists",
    response_model=List[ChecklistResponse],
    responses={400: {"description": "Profile ID missing", "model": ErrorResponse}},
    summary="List a profile's checklists (newest first)",
)
async def list_checklists(
    profile_id: UUID = Query(..., description="Owner profile"),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[ChecklistResponse]:
    return await checklist_service.list_checklists(db, profile_id)


@router.get(
    "/checklists/{checklist_id}",
    response_model=ChecklistResponse,
    responses={404: {"description": "Checklist not found", "model": ErrorResponse}},
    summary="Get a checklist",
)
async def get_checklist(
    checklist_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ChecklistResponse:
    return await checklist_service.get_checklist(db, checklist_id)


@router.put(
    "/checklists/{checklist_id}",
    response_model=ChecklistResponse,
    responses={404: {"description": "Checklist not found", "model": ErrorResponse}},
    summary="Rename a checklist",
)
async def update_checklist(
    checklist_id: UUID,
    body: ChecklistUpdate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ChecklistResponse:
    return await checklist_service.update_checklist(db, checklist_id, body)


@router.delete(
    "/checklists/{checklist_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a checklist",
)
async def delete_checklist(
    checklist_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await checklist_service.delete_checklist(db, checklist_id)
    return Response(status_code=204)


@router.post(
    "/checklists/{checklist_id}/delete",
    status_code=204,
    response_class=Response,
    responses={
        400: {"description": "Profile ID or password missing", "model": ErrorResponse},
        401: {"description": "Invalid password", "model": ErrorResponse},
        404: {"description": "Profile not found", "model": ErrorResponse},
    },
    summary="Delete a checklist after re-entering the password",
)
async def delete_checklist_confirmed(
    checklist_id: UUID,
    body: ChecklistDeleteConfirm,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await checklist_service.delete_checklist_with_password(
        db, checklist_id, body.profile_id, body.password
    )
    return Response(status_code=204)
