"""
AI Productivity Hub Backend — Profile Lookups
==============================================

What:  Loads a single `profiles` row for admin reads.
How:   SELECT by primary key. A malformed id or a missing row is a 404;
       driver errors become UpstreamError so SQL never reaches the caller.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from prodhub.exceptions import NotFoundError, UpstreamError
from prodhub.models import Profile

logger = logging.getLogger(__name__)


class ProfileService:
    async def get_profile(self, db: AsyncSession, user_id: str) -> Profile:
        """
        Raises:
            NotFoundError:  `user_id` is not a UUID or has no profile row (→ 404)
            UpstreamError:  the query itself failed (→ 500)
        """
        # Why: profiles.id is a UUID column; anything else cannot match a row
        try:
            profile_id = uuid.UUID(user_id)
        except ValueError:
            raise NotFoundError(resource="user", resource_id=user_id)

        stmt = select(Profile).where(Profile.id == profile_id)
        try:
            result = await db.execute(stmt)
            profile = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Profile query failed for %s: %s", user_id, type(e).__name__)
            raise UpstreamError(
                message="Failed to load user profile.",
                context={"error_type": type(e).__name__, "user_id": user_id},
            )

        if profile is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return profile


profile_service = ProfileService()
