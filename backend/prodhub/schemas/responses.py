"""
AI Productivity Hub Backend — Pydantic Response Schemas
========================================================

What:  Pydantic models defining the JSON envelopes this service returns.
Why:   Validation of outgoing data, automatic serialization and OpenAPI docs.
How:   Every protected endpoint answers with an `ok` flag; success envelopes
       add `processed` (jobs) or `data` (admin reads), failures add `error`.

Envelope shapes (kept byte-compatible with what the web client and the
external scheduler already parse):
    Job success:     {"ok": true, "processed": 3}
    Admin success:   {"ok": true, "data": [...]}
    Any failure:     {"ok": false, "error": "Unauthorized"}
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Job Responses
# ══════════════════════════════════════════════════════════════════════════


class JobResult(BaseModel):
    """
    What:  Result of one successful scheduled job invocation.
    Who:   Returned by every /api/cron* endpoint with HTTP 200.
    """
    ok: bool = Field(default=True, description="Always true on success")
    processed: int = Field(ge=0, description="Number of items the job handled")


# ══════════════════════════════════════════════════════════════════════════
# Admin Responses
# ══════════════════════════════════════════════════════════════════════════


class FeedbackItem(BaseModel):
    id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    email: Optional[str] = None
    message: str
    source: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class FeedbackListResponse(BaseModel):
    """
    What:  All feedback submissions, newest first.
    Who:   Returned by GET /api/admin/feedback.
    """
    ok: bool = Field(default=True)
    data: List[FeedbackItem] = Field(description="Feedback rows ordered by created_at desc")


class UsageToday(BaseModel):
    """A user's AI usage for the current UTC day against their plan's daily limit."""
    user_id: str
    plan: str
    used_today: int = Field(ge=0)
    daily_limit: int = Field(ge=0)
    remaining: int = Field(ge=0)


class UsageTodayResponse(BaseModel):
    ok: bool = Field(default=True)
    data: UsageToday


# ══════════════════════════════════════════════════════════════════════════
# Error & Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Failure envelope used by every endpoint.
    Why:   The scheduler and the admin page both branch on `ok` only.

    The request correlation ID is sent in the X-Request-ID response header,
    not in the body.
    """
    ok: bool = Field(default=False)
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
