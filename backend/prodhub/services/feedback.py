"""
AI Productivity Hub Backend — Feedback Service
===============================================

What:  Reads in-app feedback submissions for the admin dashboard.
How:   One SELECT ordered newest first; driver errors are wrapped in
       UpstreamError so the route answers 500 {"ok": false, "error": ...}
       without exposing SQL to the caller.
"""

import logging
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from prodhub.exceptions import UpstreamError
from prodhub.models import Feedback
from prodhub.schemas.responses import FeedbackItem

logger = logging.getLogger(__name__)


class FeedbackService:
    async def list_feedback(self, db: AsyncSession) -> List[FeedbackItem]:
        stmt = select(Feedback).order_by(desc(Feedback.created_at))
        try:
            result = await db.execute(stmt)
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Feedback query failed: %s", str(e))
            raise UpstreamError(
                message="Failed to load feedback",
                context={"error_type": type(e).__name__},
            )

        return [FeedbackItem.model_validate(row) for row in rows]


feedback_service = FeedbackService()
