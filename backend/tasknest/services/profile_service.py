"""
TaskNest Backend — Profile Service
====================================

What:  Profile CRUD, login and password re-verification.
Who:   Profile routes; ChecklistService (password-confirmed delete) and
       ShareService (receiver lookup by name).

Password handling:
    Passwords are hashed with bcrypt before they reach the session and are
    only ever compared through `verify_password`. Every method that returns
    profile data returns a ProfileResponse, which has no hash field.

Error Translation:
    IntegrityError from the unique `name` constraint → ConflictError (409)
    Any other SQLAlchemyError                       → DatabaseError (500)
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
    is_unique_violation,
)
from tasknest.models.profile import Profile
from tasknest.schemas.profile import (
    LoginRequest,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
)
from tasknest.security import hash_password, verify_password

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password and refuses longer input
MAX_PASSWORD_BYTES = 72


def _check_password_length(password: str) -> None:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
            field="password",
        )


class ProfileService:
    """Business logic for profiles."""

    async def create_profile(self, db: AsyncSession, data: ProfileCreate) -> ProfileResponse:
        """
        Create a profile with a hashed password.

        Raises:
            ValidationError: Password too long for bcrypt.
            ConflictError: Name already taken.
        """
        _check_password_length(data.password)
        profile = Profile(
            name=data.name,
            password_hash=await hash_password(data.password),
            avatar_url=data.avatar_url,
        )
        await self._flush_profile(db, profile, new=True)
        logger.info("Profile created: %s", profile.id)
        return ProfileResponse.model_validate(profile)

    async def list_profiles(self, db: AsyncSession) -> List[ProfileResponse]:
        """All profiles, newest first (profile picker screen)."""
        try:
            result = await db.execute(select(Profile).order_by(Profile.created_at.desc()))
            profiles = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing profiles: %s", e, exc_info=True)
            raise DatabaseError(message="Could not retrieve profiles. Please try again.")
        return [ProfileResponse.model_validate(p) for p in profiles]

    async def login(self, db: AsyncSession, data: LoginRequest) -> ProfileResponse:
        """
        Check a password for a profile identified by id or name.

        Raises:
            NotFoundError: No such profile (404).
            AuthenticationError: Wrong password (401).
        """
        if data.profile_id is not None:
            profile = await self.get_profile_row(db, data.profile_id)
        else:
            profile = await self.get_profile_by_name(db, data.name)
            if profile is None:
                raise NotFoundError(resource="profile", context={"name": data.name})

        if not await verify_password(data.password, profile.password_hash):
            logger.info("Failed login for profile %s", profile.id)
            raise AuthenticationError()
        return ProfileResponse.model_validate(profile)

    async def verify_credentials(self, db: AsyncSession, profile_id: UUID, password: str) -> Profile:
        """Return the profile if `password` matches, else raise 404/401."""
        profile = await self.get_profile_row(db, profile_id)
        if not await verify_password(password, profile.password_hash):
            raise AuthenticationError()
        return profile

    async def update_profile(
        self, db: AsyncSession, profile_id: UUID, data: ProfileUpdate
    ) -> ProfileResponse:
        """
        Apply the fields present in `data`.

        A new password is re-hashed; a name change can collide with another
        profile (409).
        """
        profile = await self.get_profile_row(db, profile_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("name"):
            profile.name = changes["name"]
        if "avatar_url" in changes:
            profile.avatar_url = changes["avatar_url"]
        if changes.get("password"):
            _check_password_length(changes["password"])
            profile.password_hash = await hash_password(changes["password"])

        await self._flush_profile(db, profile, new=False)
        return ProfileResponse.model_validate(profile)

    async def delete_profile(self, db: AsyncSession, profile_id: UUID) -> None:
        """Delete one profile row. Owned checklists are not touched."""
        try:
            await db.execute(delete(Profile).where(Profile.id == profile_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting profile %s: %s", profile_id, e)
            raise DatabaseError(context={"profile_id": str(profile_id)})
        logger.info("Profile deleted: %s", profile_id)

    # ── Lookups shared with other services ───────────────────────────────

    async def get_profile_row(self, db: AsyncSession, profile_id: UUID) -> Profile:
        try:
            profile = await db.get(Profile, profile_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching profile %s: %s", profile_id, e)
            raise DatabaseError(context={"profile_id": str(profile_id)})
        if profile is None:
            raise NotFoundError(resource="profile", resource_id=str(profile_id))
        return profile

    async def get_profile_by_name(self, db: AsyncSession, name: str) -> Optional[Profile]:
        try:
            result = await db.execute(select(Profile).where(Profile.name == name))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up profile by name: %s", e)
            raise DatabaseError()

    async def _flush_profile(self, db: AsyncSession, profile: Profile, new: bool) -> None:
        try:
            if new:
                db.add(profile)
            await db.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise ConflictError(
                    message="Profile name already exists",
                    context={"name": profile.name},
                )
            logger.error("Integrity error saving profile: %s", e)
            raise DatabaseError(context={"error_type": type(e).__name__})
        except SQLAlchemyError as e:
            logger.error("Database error saving profile: %s", e, exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})


profile_service = ProfileService()
