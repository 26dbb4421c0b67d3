"""
AI Productivity Hub Backend — AI Usage Metering
================================================

What:  Tracks how many AI-assistant invocations a user made on the current
       UTC calendar day, and checks that count against the plan's daily limit.
Why:   The AI features are rate limited per plan (free vs pro/founder).
How:   Two stored procedures in the hosted database own the counter:

           increment_ai_usage(p_user_id, p_inc)  : creates/increments today's row
           get_ai_usage_today(p_user_id)         : returns today's count

       `SqlUsageStore` calls them; `UsageMeter` wraps the store so that no
       metering failure can ever break the request that triggered it.

Failure policy:
    Metering must never block or fail the primary request path. Instead of
    swallowing exceptions, every meter call returns a MeterOutcome:

        outcome = await meter.bump(user_id)        # MeterOutcome.ok is False on failure
        _ = await meter.bump(user_id)              # caller explicitly discards it
        used = await meter.get_today(user_id)      # failure degrades to 0

    Failures are logged once, inside the meter.

Concurrency:
    Atomicity of concurrent increments is the stored procedure's job. Each
    store call runs inside a SAVEPOINT so that a failed call does not poison
    the rest of the request's transaction.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from prodhub.config import Settings

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Result Type
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MeterOutcome:
    """
    Tagged success/failure result of one metering call.

    ok=True:  `value` holds the result (the count for reads, None for bumps)
    ok=False: `error` holds the exception raised by the store
    """

    ok: bool
    value: Optional[int] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: Optional[int] = None) -> "MeterOutcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "MeterOutcome":
        return cls(ok=False, error=error)

    def value_or(self, default: int) -> int:
        if self.ok and self.value is not None:
            return self.value
        return default


@dataclass(frozen=True)
class QuotaStatus:
    """A user's usage today against their plan's daily limit."""

    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)

    @property
    def allowed(self) -> bool:
        return self.used < self.limit


# ══════════════════════════════════════════════════════════════════════════
# Store
# ══════════════════════════════════════════════════════════════════════════

class UsageStore(Protocol):
    """Port for the external per-user daily counter."""

    async def increment(self, user_id: str, inc: int) -> None:
        """Add `inc` to today's count for `user_id`, creating the row if needed."""
        ...

    async def today(self, user_id: str) -> Optional[int]:
        """Today's count for `user_id` (None when no row exists yet)."""
        ...


class SqlUsageStore:
    """UsageStore backed by the hosted database's stored procedures."""

    INCREMENT_SQL = text("SELECT increment_ai_usage(:p_user_id, :p_inc)")
    TODAY_SQL = text("SELECT get_ai_usage_today(:p_user_id)")

    def __init__(self, session: AsyncSession):
        self._session = session

    async def increment(self, user_id: str, inc: int) -> None:
        # Why savepoint: a failed procedure call rolls back only itself, so the
        # request transaction stays usable after the meter reports the failure
        async with self._session.begin_nested():
            await self._session.execute(
                self.INCREMENT_SQL, {"p_user_id": user_id, "p_inc": inc}
            )

    async def today(self, user_id: str) -> Optional[int]:
        async with self._session.begin_nested():
            result = await self._session.execute(self.TODAY_SQL, {"p_user_id": user_id})
            return result.scalar()


# ══════════════════════════════════════════════════════════════════════════
# Meter
# ══════════════════════════════════════════════════════════════════════════

def _as_count(raw) -> int:
    """Coerce whatever the procedure returned into a non-negative int."""
    if raw is None:
        return 0
    return max(int(raw), 0)


class UsageMeter:
    """
    Fire-and-forget usage metering on top of a UsageStore.

    Operations:
        bump(user_id, increment=1) → MeterOutcome
        fetch_today(user_id)       → MeterOutcome (value = count)
        get_today(user_id)         → int, 0 on empty id or failure
        check_quota(user_id, plan) → QuotaStatus

    An empty user id is treated as "nobody to meter": no remote call is made
    and the outcome is a success.
    """

    PRO_PLANS = frozenset({"pro", "founder"})

    def __init__(self, store: UsageStore, settings: Settings):
        self.store = store
        self.settings = settings

    async def bump(self, user_id: str, increment: int = 1) -> MeterOutcome:
        # No user, nothing to meter: skip the round trip entirely
        if not user_id:
            return MeterOutcome.success()

        try:
            await self.store.increment(user_id, increment)
        except Exception as e:
            logger.error("[ai-usage] increment error for user %s: %s", user_id, e)
            return MeterOutcome.failure(e)
        return MeterOutcome.success()

    async def fetch_today(self, user_id: str) -> MeterOutcome:
        if not user_id:
            return MeterOutcome.success(0)

        try:
            raw = await self.store.today(user_id)
            count = _as_count(raw)
        except Exception as e:
            logger.error("[ai-usage] get today error for user %s: %s", user_id, e)
            return MeterOutcome.failure(e)
        return MeterOutcome.success(count)

    async def get_today(self, user_id: str) -> int:
        outcome = await self.fetch_today(user_id)
        return outcome.value_or(0)

    def daily_limit(self, plan: Optional[str]) -> int:
        if (plan or "").lower() in self.PRO_PLANS:
            return self.settings.pro_ai_daily_limit
        return self.settings.free_ai_daily_limit

    async def check_quota(self, user_id: str, plan: Optional[str] = "free") -> QuotaStatus:
        """
        Today's usage against the plan's limit.

        Reads degrade to zero usage on failure, so an unreachable counter
        never locks a user out.
        """
        used = await self.get_today(user_id)
        return QuotaStatus(used=used, limit=self.daily_limit(plan))
