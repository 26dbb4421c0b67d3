"""
AI Productivity Hub Backend — Scheduled Jobs
=============================================

What:  The common shell every time-triggered job runs in, plus the three jobs:
       notifications, weekly report and daily digest.
Why:   Each job endpoint follows the same lifecycle; keeping it in one place
       means the route handlers only pick a job and render the outcome.
How:   `run_job()` executes a ScheduledJob once and converts its result (or
       exception) into a JobOutcome. Routes turn that into HTTP 200 or 500.
Who:   Called by routes/cron.py after the cron authentication gate passed.

Per-invocation state machine (nothing is persisted):

    Start ──gate rejects──▶ Unauthorized (401, handled by the gate)
      │
      └──gate passes──▶ Running ──returns n──▶ Done   (200 {"ok": true, "processed": n})
                            │
                            └──raises──▶ Failed (logged; 500 {"ok": false, "error": msg})

    Every invocation is independent: no retry, no idempotency key, no job-run
    ledger. If the scheduler fires twice, the job runs twice.

Delivery:
    Email sending lives in the hosted project's edge functions. The jobs here
    select who is due and log each dispatch; `processed` counts dispatches.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, time as dt_time, timezone
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import Select, or_, select
from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from prodhub.config import Settings
from prodhub.exceptions import ProdHubError, UpstreamError
from prodhub.models import Profile, UserNotificationSettings

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Job Shell
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class JobOutcome:
    """Terminal state of one job invocation (Done or Failed)."""

    job: str
    ok: bool
    processed: int = 0
    error: Optional[str] = None


class ScheduledJob(ABC):
    """
    A unit of work fired by the external scheduler.

    Implementations return how many items they handled and raise on failure;
    they never build HTTP responses themselves.
    """

    name: str = "job"

    @abstractmethod
    async def run(self, session: AsyncSession, settings: Settings, *, force: bool = False) -> int:
        ...


def _error_message(exc: Exception) -> str:
    # Only app errors carry caller-safe messages; driver errors are wrapped
    # into UpstreamError by _query() before they get here
    if isinstance(exc, ProdHubError):
        return exc.message
    return str(exc) or type(exc).__name__


async def _query(session: AsyncSession, stmt: Select, job: str, what: str) -> Result:
    """Execute a job query; driver errors become a generic UpstreamError."""
    try:
        return await session.execute(stmt)
    except SQLAlchemyError as e:
        logger.error("[%s] %s query failed: %s", job, what, type(e).__name__)
        raise UpstreamError(
            message=f"Failed to load {what}",
            context={"job": job, "error_type": type(e).__name__},
        ) from e


async def run_job(
    job: ScheduledJob,
    session: AsyncSession,
    settings: Settings,
    *,
    force: bool = False,
) -> JobOutcome:
    """
    Run `job` once and report how it ended.

    Never raises: any exception from the job is logged with its stack trace
    and returned as a failed outcome carrying the error message.
    """
    start_time = time.perf_counter()
    logger.info("[%s] START force=%s", job.name, force)

    try:
        processed = await job.run(session, settings, force=force)
    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.error(
            "[%s] FAILED after %.0fms: %s",
            job.name,
            duration_ms,
            str(e),
            exc_info=True,
        )
        return JobOutcome(job=job.name, ok=False, error=_error_message(e))

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.info("[%s] DONE processed=%d in %.0fms", job.name, processed, duration_ms)
    return JobOutcome(job=job.name, ok=True, processed=processed)


# ══════════════════════════════════════════════════════════════════════════
# Notifications
# ══════════════════════════════════════════════════════════════════════════

DEFAULT_DAILY_SUCCESS_TIME = "09:00"
DEFAULT_EVENING_REFLECTION_TIME = "21:30"


def _hhmm(value, default: str) -> str:
    """Normalize a TIME column (time, "HH:MM:SS" string or NULL) to "HH:MM"."""
    if value is None:
        return default
    if isinstance(value, dt_time):
        return value.strftime("%H:%M")
    return str(value)[:5]


def local_hhmm(now_utc: datetime, timezone_name: str) -> str:
    """Wall-clock "HH:MM" of `now_utc` in `timezone_name` (UTC if unknown)."""
    try:
        tz = ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC", timezone_name)
        tz = timezone.utc
    return now_utc.astimezone(tz).strftime("%H:%M")


def due_reminders(
    row: UserNotificationSettings,
    now_utc: datetime,
    default_timezone: str,
    force: bool = False,
) -> List[str]:
    """
    Which reminders are due for `row` at `now_utc`.

    A reminder is due when it is enabled and the user's local time equals its
    configured time to the minute. Task reminders piggyback on the daily
    success time. `force` skips the time comparison.
    """
    # Minute granularity: the scheduler fires every minute, so an exact
    # HH:MM match fires each reminder once per day
    now_local = local_hhmm(now_utc, row.timezone or default_timezone)
    daily_time = _hhmm(row.daily_success_time, DEFAULT_DAILY_SUCCESS_TIME)
    evening_time = _hhmm(row.evening_reflection_time, DEFAULT_EVENING_REFLECTION_TIME)

    due = []
    if row.daily_success_enabled and (force or now_local == daily_time):
        due.append("daily_success")
    if row.evening_reflection_enabled and (force or now_local == evening_time):
        due.append("evening_reflection")
    if row.task_reminders_enabled and (force or now_local == daily_time):
        due.append("task_reminder")
    return due


class NotificationsJob(ScheduledJob):
    """
    Sends the daily-success, evening-reflection and task reminders that are
    due this minute. Meant to be fired every minute (or every few minutes
    with `force` for testing).
    """

    name = "notifications"

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def run(self, session: AsyncSession, settings: Settings, *, force: bool = False) -> int:
        stmt = select(UserNotificationSettings, Profile.email).join(
            Profile, Profile.id == UserNotificationSettings.user_id
        )
        rows = (await _query(session, stmt, self.name, "notification settings")).all()

        if not rows:
            logger.info("[%s] no user_notification_settings rows found", self.name)
            return 0

        now_utc = self.clock()
        processed = 0

        for row, email in rows:
            # No address, nowhere to deliver
            if not email:
                continue
            for kind in due_reminders(row, now_utc, settings.default_timezone, force=force):
                logger.info("[%s] dispatch %s to %s (user %s)", self.name, kind, email, row.user_id)
                processed += 1

        return processed


# ══════════════════════════════════════════════════════════════════════════
# Weekly Report & Daily Digest
# ══════════════════════════════════════════════════════════════════════════

class WeeklyReportJob(ScheduledJob):
    """Weekly AI productivity report for every opted-in profile with an email."""

    name = "cron-weekly"

    async def run(self, session: AsyncSession, settings: Settings, *, force: bool = False) -> int:
        stmt = select(Profile).where(Profile.weekly_report_enabled.is_(True))
        profiles = (await _query(session, stmt, self.name, "profiles")).scalars().all()

        eligible = [p for p in profiles if p.email]
        logger.info(
            "[%s] eligible users: %d, raw rows: %d", self.name, len(eligible), len(profiles)
        )

        for profile in eligible:
            logger.info(
                "[%s] dispatch weekly report to %s (user %s, focus=%s)",
                self.name,
                profile.email,
                profile.id,
                profile.focus_area or profile.onboarding_weekly_focus,
            )
        return len(eligible)


class DailyDigestJob(ScheduledJob):
    # either opt-in column counts; see Profile.wants_digest
    name = "cron-daily"

    async def run(self, session: AsyncSession, settings: Settings, *, force: bool = False) -> int:
        stmt = select(Profile).where(
            or_(
                Profile.daily_digest_enabled.is_(True),
                Profile.wants_daily_digest.is_(True),
            )
        )
        profiles = (await _query(session, stmt, self.name, "profiles")).scalars().all()

        eligible = [p for p in profiles if p.email and p.wants_digest]
        logger.info(
            "[%s] profiles total=%d eligible=%d", self.name, len(profiles), len(eligible)
        )

        for profile in eligible:
            logger.info("[%s] dispatch daily digest to %s (user %s)", self.name, profile.email, profile.id)
        return len(eligible)


notifications_job = NotificationsJob()
weekly_report_job = WeeklyReportJob()
daily_digest_job = DailyDigestJob()
