"""
Request dependencies
Caller identity and store handles for the endpoints.
"""
import logging

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ledger.app.core.exceptions import AuthenticationError
from ledger.app.db.session import get_db, get_session_factory
from ledger.app.models.profile import Profile

logger = logging.getLogger(__name__)

__all__ = ["get_db", "get_session_factory", "get_profile"]


async def get_profile(
    profile_id: str | None = Header(None, convert_underscores=False),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> Profile:
    """
    Resolve the caller from the `profile_id` header

    The profile is loaded in its own session, which is closed before the
    endpoint runs, so no connection is held while a payment or deposit
    opens its transaction.

    Raises:
        AuthenticationError: header missing, malformed or unknown profile
    """
    if profile_id is None or not profile_id.strip().isdecimal():
        raise AuthenticationError("Missing or malformed profile_id header")
    try:
        caller_id = int(profile_id)
    except ValueError:
        raise AuthenticationError("Missing or malformed profile_id header")

    async with session_factory() as session:
        profile = await session.get(Profile, caller_id)

    if profile is None:
        logger.info(f"Request with unknown profile_id {profile_id}")
        raise AuthenticationError()
    return profile
