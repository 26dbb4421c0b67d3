"""
AI Productivity Hub Backend — Scheduled Job Route Handlers
===========================================================

What:  HTTP entry points fired by the external scheduler.
How:   Every route in this router passes the cron authentication gate first
       (router-level dependency), then delegates to run_job() and renders the
       JobOutcome.

Endpoints:
    GET /api/cron/notifications   reminders due this minute (?force=1 ignores times)
    GET /api/notifications        same job, path kept for older scheduler configs
    GET /api/cron-weekly          weekly report
    GET /api/cron-daily           daily digest

Responses:
    200 {"ok": true, "processed": n}
    401 {"ok": false, "error": "Unauthorized"}   (gate)
    500 {"ok": false, "error": "<message>"}      (job raised)
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from prodhub.config import Settings
from prodhub.database import get_db_session
from prodhub.dependencies import get_app_settings
from prodhub.schemas.responses import ErrorResponse, JobResult
from prodhub.security import require_cron_auth
from prodhub.services.jobs import (
    JobOutcome,
    daily_digest_job,
    notifications_job,
    run_job,
    weekly_report_job,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Cron"], dependencies=[Depends(require_cron_auth)])

JOB_RESPONSES = {
    200: {"description": "Job completed", "model": JobResult},
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    500: {"description": "Job failed or server misconfigured", "model": ErrorResponse},
}


def render_outcome(outcome: JobOutcome) -> Union[JobResult, JSONResponse]:
    """Done → 200 JobResult; Failed → 500 error envelope."""
    if outcome.ok:
        return JobResult(processed=outcome.processed)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=outcome.error or "Internal error").model_dump(),
    )


@router.get(
    "/api/cron/notifications",
    response_model=JobResult,
    responses=JOB_RESPONSES,
    summary="Send due reminder notifications",
)
@router.get("/api/notifications", include_in_schema=False)
async def cron_notifications(
    force: bool = Query(default=False, description="Ignore reminder times (testing)"),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    outcome = await run_job(notifications_job, db, settings, force=force)
    return render_outcome(outcome)


@router.get(
    "/api/cron-weekly",
    response_model=JobResult,
    responses=JOB_RESPONSES,
    summary="Run the weekly report job",
)
async def cron_weekly(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    outcome = await run_job(weekly_report_job, db, settings)
    return render_outcome(outcome)


@router.get(
    "/api/cron-daily",
    response_model=JobResult,
    responses=JOB_RESPONSES,
    summary="Run the daily digest job",
)
async def cron_daily(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    outcome = await run_job(daily_digest_job, db, settings)
    return render_outcome(outcome)
