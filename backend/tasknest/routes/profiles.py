"""
TaskNest Backend — Profile Route Handlers
===========================================

What:  Profile creation, listing, login, update and deletion.
Who:   Called by the frontend profile picker and settings screens.

No route in this module ever returns the password hash: every handler
returns ProfileResponse, which does not declare it.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.database import get_db_session
from tasknest.schemas.common import ErrorResponse
from tasknest.schemas.profile import (
    LoginRequest,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
)
from tasknest.services.profile_service import profile_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Profiles"])


@router.post(
    "/profiles",
    status_code=201,
    response_model=ProfileResponse,
    responses={
        400: {"description": "Name or password missing", "model": ErrorResponse},
        409: {"description": "Profile name already exists", "model": ErrorResponse},
    },
    summary="Create a profile",
)
async def create_profile(
    body: ProfileCreate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ProfileResponse:
    return await profile_service.create_profile(db, body)


@router.get(
    "/profiles",
    response_model=List[ProfileResponse],
    summary="List all profiles (newest first)",
)
async def list_profiles(
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[ProfileResponse]:
    return await profile_service.list_profiles(db)


@router.post(
    "/profiles/login",
    response_model=ProfileResponse,
    responses={
        400: {"description": "Profile ID/name or password missing", "model": ErrorResponse},
        401: {"description": "Invalid password", "model": ErrorResponse},
        404: {"description": "Profile not found", "model": ErrorResponse},
    },
    summary="Check a profile's password",
    description=(
        "Identify the profile by `profile_id` or `name` and send its password. "
        "Returns the profile on success. No session or token is issued."
    ),
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ProfileResponse:
    return await profile_service.login(db, body)


@router.put(
    "/profiles/{profile_id}",
    response_model=ProfileResponse,
    responses={
        404: {"description": "Profile not found", "model": ErrorResponse},
        409: {"description": "Profile name already exists", "model": ErrorResponse},
    },
    summary="Update name, password or avatar",
)
async def update_profile(
    profile_id: UUID,
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ProfileResponse:
    return await profile_service.update_profile(db, profile_id, body)


@router.delete(
    "/profiles/{profile_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a profile",
)
async def delete_profile(
    profile_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await profile_service.delete_profile(db, profile_id)
    return Response(status_code=204)
