"""
AI Productivity Hub Backend — Admin Route Handlers
===================================================

What:  Admin-only reads for the dashboard.
How:   Router-level `require_admin_key` dependency checks the x-admin-key
       header before any handler (or database session) runs.

Endpoints:
    GET /api/admin/feedback                    all feedback, newest first
    GET /api/admin/users/{user_id}/ai-usage    today's AI usage vs plan limit
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from prodhub.database import get_db_session
from prodhub.dependencies import get_usage_meter
from prodhub.schemas.responses import (
    ErrorResponse,
    FeedbackListResponse,
    UsageToday,
    UsageTodayResponse,
)
from prodhub.security import require_admin_key
from prodhub.services.feedback import feedback_service
from prodhub.services.profiles import profile_service
from prodhub.services.usage import UsageMeter

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin_key)],
    responses={
        401: {"description": "Missing or invalid x-admin-key", "model": ErrorResponse},
        404: {"description": "Unknown user", "model": ErrorResponse},
        500: {"description": "Database failure", "model": ErrorResponse},
    },
)


@router.get(
    "/feedback",
    response_model=FeedbackListResponse,
    summary="List feedback submissions",
)
async def list_feedback(
    db: AsyncSession = Depends(get_db_session),
) -> FeedbackListResponse:
    data = await feedback_service.list_feedback(db)
    return FeedbackListResponse(data=data)


@router.get(
    "/users/{user_id}/ai-usage",
    response_model=UsageTodayResponse,
    summary="A user's AI usage today",
)
async def user_ai_usage(
    user_id: str,
    plan: Optional[str] = Query(
        default=None,
        description="Evaluate against this plan instead of the user's own",
    ),
    db: AsyncSession = Depends(get_db_session),
    meter: UsageMeter = Depends(get_usage_meter),
) -> UsageTodayResponse:
    """
    The limit follows the plan stored on the user's profile; `?plan=` only
    previews another plan's limit. The counter is read through the usage
    meter, so an unreachable counter reports zero usage instead of failing
    the admin page.
    """
    profile = await profile_service.get_profile(db, user_id)
    effective_plan = plan or profile.plan or "free"

    quota = await meter.check_quota(user_id, effective_plan)
    return UsageTodayResponse(
        data=UsageToday(
            user_id=user_id,
            plan=effective_plan,
            used_today=quota.used,
            daily_limit=quota.limit,
            remaining=quota.remaining,
        )
    )
