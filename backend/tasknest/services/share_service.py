"""
TaskNest Backend — Share Request Service
==========================================

What:  Send, list and answer checklist share requests.
How:   Thin orchestration around ChecklistCloner.

State machine:
    ┌─────────┐  accept  ┌──────────┐
    │ pending │ ───────▶ │ accepted │  (clone checklist into receiver)
    └─────────┘          └──────────┘
         │      reject   ┌──────────┐
         └─────────────▶ │ rejected │
                         └──────────┘

    The transition is written as `UPDATE ... WHERE id = :id AND status =
    'pending'`. If another request answered first, zero rows change and the
    caller gets ShareRequestProcessedError before any cloning happens, so a
    request produces at most one copy.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.exceptions import (
    DatabaseError,
    NotFoundError,
    ShareRequestProcessedError,
    ValidationError,
)
from tasknest.models.checklist import Checklist
from tasknest.models.profile import Profile
from tasknest.models.share_request import (
    STATUS_ACCEPTED,
    STATUS_PENDING,
    STATUS_REJECTED,
    ShareRequest,
)
from tasknest.schemas.common import MessageResponse
from tasknest.schemas.share_request import (
    ChecklistTitle,
    PendingShareRequest,
    SenderSummary,
    ShareCreate,
    ShareRequestResponse,
)
from tasknest.services.checklist_service import ChecklistService, checklist_service as default_checklists
from tasknest.services.cloner import ChecklistCloner, checklist_cloner as default_cloner
from tasknest.services.profile_service import ProfileService, profile_service as default_profiles

logger = logging.getLogger(__name__)

ACTIONS = {"accept": STATUS_ACCEPTED, "reject": STATUS_REJECTED}


class ShareService:
    """Share-request workflow. Collaborators are injected for testing."""

    def __init__(
        self,
        cloner: ChecklistCloner = default_cloner,
        profiles: ProfileService = default_profiles,
        checklists: ChecklistService = default_checklists,
    ):
        self.cloner = cloner
        self.profiles = profiles
        self.checklists = checklists

    async def create_request(
        self, db: AsyncSession, checklist_id: UUID, data: ShareCreate
    ) -> ShareRequestResponse:
        """
        Offer checklist `checklist_id` to the profile named `receiver_name`.

        Raises:
            NotFoundError: Checklist or receiver profile does not exist.
        """
        await self.checklists.get_checklist_row(db, checklist_id)

        receiver = await self.profiles.get_profile_by_name(db, data.receiver_name)
        if receiver is None:
            raise NotFoundError(
                resource="receiver profile",
                context={"receiver_name": data.receiver_name},
            )

        request = ShareRequest(
            checklist_id=checklist_id,
            sender_id=data.sender_id,
            receiver_id=receiver.id,
        )
        try:
            db.add(request)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating share request: %s", e, exc_info=True)
            raise DatabaseError(message="Could not send the share request. Please try again.")

        logger.info(
            "Share request %s: checklist %s from %s to %s",
            request.id, checklist_id, data.sender_id, receiver.id,
        )
        return ShareRequestResponse.model_validate(request)

    async def list_pending(self, db: AsyncSession, profile_id: UUID) -> List[PendingShareRequest]:
        """Pending requests addressed to `profile_id`, newest first, with checklist title and sender."""
        query = (
            select(ShareRequest, Checklist.title, Profile.name, Profile.avatar_url)
            .outerjoin(Checklist, Checklist.id == ShareRequest.checklist_id)
            .outerjoin(Profile, Profile.id == ShareRequest.sender_id)
            .where(
                ShareRequest.receiver_id == profile_id,
                ShareRequest.status == STATUS_PENDING,
            )
            .order_by(ShareRequest.created_at.desc())
        )
        try:
            rows = (await db.execute(query)).all()
        except SQLAlchemyError as e:
            logger.error("Database error listing share requests for %s: %s", profile_id, e)
            raise DatabaseError(message="Could not retrieve share requests. Please try again.")

        return [
            PendingShareRequest(
                id=request.id,
                status=request.status,
                created_at=request.created_at,
                checklist_id=request.checklist_id,
                checklist=ChecklistTitle(title=title) if title is not None else None,
                sender=(
                    SenderSummary(name=sender_name, avatar_url=sender_avatar)
                    if sender_name is not None
                    else None
                ),
            )
            for request, title, sender_name, sender_avatar in rows
        ]

    async def respond(self, db: AsyncSession, request_id: UUID, action: str) -> MessageResponse:
        """
        Accept or reject a pending request.

        Raises:
            ValidationError: `action` is not 'accept' or 'reject'.
            NotFoundError: No such request, or (on accept) its checklist is gone.
            ShareRequestProcessedError: The request is no longer pending.
        """
        new_status = ACTIONS.get(action)
        if new_status is None:
            raise ValidationError(message="Invalid action", field="action")

        try:
            request = await db.get(ShareRequest, request_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching share request %s: %s", request_id, e)
            raise DatabaseError(context={"request_id": str(request_id)})
        if request is None:
            raise NotFoundError(resource="request", resource_id=str(request_id))
        if request.status != STATUS_PENDING:
            raise ShareRequestProcessedError(request_id=str(request_id), status=request.status)

        try:
            result = await db.execute(
                update(ShareRequest)
                .where(
                    ShareRequest.id == request_id,
                    ShareRequest.status == STATUS_PENDING,
                )
                .values(status=new_status)
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating share request %s: %s", request_id, e)
            raise DatabaseError(context={"request_id": str(request_id)})
        if result.rowcount == 0:
            # Answered concurrently between our read and our write
            raise ShareRequestProcessedError(request_id=str(request_id))

        logger.info("Share request %s → %s", request_id, new_status)

        if new_status == STATUS_REJECTED:
            return MessageResponse(message="Rejected share request")

        outcome = await self.cloner.clone(db, request.checklist_id, request.receiver_id)
        return MessageResponse(
            message="Accepted and cloned checklist",
            checklist_id=outcome.checklist.id,
        )


share_service = ShareService()
