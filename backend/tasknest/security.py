"""
TaskNest Backend — Password Hashing
=====================================

What:  bcrypt hashing and verification for profile passwords.
Who:   ProfileService (create, update, login) and ChecklistService
       (password-confirmed delete).

bcrypt is CPU-bound (~50ms at cost 10), so both helpers run the work in a
worker thread via `asyncio.to_thread` to keep the event loop responsive.
"""

import asyncio
import logging

import bcrypt

from tasknest.config import settings

logger = logging.getLogger(__name__)


def _hash(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _check(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage: treat as a mismatch, never as a match
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


async def hash_password(password: str) -> str:
    """Return a bcrypt hash of `password` using the configured cost."""
    return await asyncio.to_thread(_hash, password, settings.bcrypt_rounds)


async def verify_password(password: str, password_hash: str) -> bool:
    """Check `password` against a stored bcrypt hash."""
    if not password_hash:
        return False
    return await asyncio.to_thread(_check, password, password_hash)
