"""
TaskNest Backend — Checklist Service
======================================

What:  Create, list, fetch, rename and delete checklists.

Two delete variants exist:
    delete_checklist()                plain delete by id
    delete_checklist_with_password()  re-checks the deleting profile's
                                      password first (404 / 401 on failure)

Neither variant removes the checklist's tasks, timer logs or share requests.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.exceptions import DatabaseError, NotFoundError
from tasknest.models.checklist import Checklist
from tasknest.schemas.checklist import (
    ChecklistCreate,
    ChecklistResponse,
    ChecklistUpdate,
)
from tasknest.services.profile_service import ProfileService, profile_service as default_profiles

logger = logging.getLogger(__name__)


class ChecklistService:

    def __init__(self, profiles: ProfileService = default_profiles):
        self.profiles = profiles

    async def create_checklist(self, db: AsyncSession, data: ChecklistCreate) -> ChecklistResponse:
        # Owner must exist
        await self.profiles.get_profile_row(db, data.profile_id)
        checklist = Checklist(profile_id=data.profile_id, title=data.title)
        try:
            db.add(checklist)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating checklist: %s", e, exc_info=True)
            raise DatabaseError(message="Could not create the checklist. Please try again.")
        logger.info("Checklist created: %s (owner=%s)", checklist.id, data.profile_id)
        return ChecklistResponse.model_validate(checklist)

    async def list_checklists(self, db: AsyncSession, profile_id: UUID) -> List[ChecklistResponse]:
        """Checklists owned by `profile_id`, newest first."""
        try:
            result = await db.execute(
                select(Checklist)
                .where(Checklist.profile_id == profile_id)
                .order_by(Checklist.created_at.desc())
            )
            checklists = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing checklists for %s: %s", profile_id, e)
            raise DatabaseError(message="Could not retrieve checklists. Please try again.")
        return [ChecklistResponse.model_validate(c) for c in checklists]

    async def get_checklist(self, db: AsyncSession, checklist_id: UUID) -> ChecklistResponse:
        return ChecklistResponse.model_validate(await self.get_checklist_row(db, checklist_id))

    async def update_checklist(
        self, db: AsyncSession, checklist_id: UUID, data: ChecklistUpdate
    ) -> ChecklistResponse:
        checklist = await self.get_checklist_row(db, checklist_id)
        checklist.title = data.title
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error renaming checklist %s: %s", checklist_id, e)
            raise DatabaseError(context={"checklist_id": str(checklist_id)})
        return ChecklistResponse.model_validate(checklist)

    async def delete_checklist(self, db: AsyncSession, checklist_id: UUID) -> None:
        try:
            await db.execute(delete(Checklist).where(Checklist.id == checklist_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting checklist %s: %s", checklist_id, e)
            raise DatabaseError(context={"checklist_id": str(checklist_id)})
        logger.info("Checklist deleted: %s", checklist_id)

    async def delete_checklist_with_password(
        self,
        db: AsyncSession,
        checklist_id: UUID,
        profile_id: UUID,
        password: str,
    ) -> None:
        """
        Delete after re-verifying the requesting profile's password.

        Raises:
            NotFoundError: Profile does not exist.
            AuthenticationError: Password mismatch; nothing is deleted.
        """
        await self.profiles.verify_credentials(db, profile_id, password)
        await self.delete_checklist(db, checklist_id)

    async def get_checklist_row(self, db: AsyncSession, checklist_id: UUID) -> Checklist:
        try:
            checklist = await db.get(Checklist, checklist_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching checklist %s: %s", checklist_id, e)
            raise DatabaseError(context={"checklist_id": str(checklist_id)})
        if checklist is None:
            raise NotFoundError(resource="checklist", resource_id=str(checklist_id))
        return checklist


checklist_service = ChecklistService()
