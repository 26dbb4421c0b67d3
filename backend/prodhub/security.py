"""
AI Productivity Hub Backend — Cron/Admin Authentication Gate
=============================================================

What:  Decides, for one inbound request, whether it may trigger a scheduled
       job or read admin-only data.
Why:   Job endpoints are public URLs hit by an external scheduler; the only
       thing separating them from the internet is a shared secret.
How:   Two pure comparison helpers plus two FastAPI dependencies that apply
       them to the request headers and the injected Settings.
Who:   Attached as router dependencies in routes/cron.py and routes/admin.py.

Credentials:
    Job endpoints:    Authorization: Bearer <CRON_SECRET>
    Admin endpoints:  x-admin-key: <ADMIN_KEY>

Outcomes:
    authorized    → dependency returns None, handler runs
    wrong/missing → UnauthorizedError  → 401 {"ok": false, "error": "Unauthorized"}
    no secret set → ConfigurationError → 500 {"ok": false, "error": "Server misconfigured"}

    A gate with no configured secret never lets a request through. The app
    also refuses to start in that state (Settings.validate_required_for_production).

The gate never mutates state; its only side effect is a log line.
"""

import logging
from secrets import compare_digest
from typing import Optional

from fastapi import Depends, Header, Request

from prodhub.config import Settings
from prodhub.dependencies import get_app_settings
from prodhub.exceptions import ConfigurationError, UnauthorizedError

logger = logging.getLogger(__name__)


def _constant_time_equals(provided: str, expected: str) -> bool:
    # Why compare_digest: timing of == leaks how many leading characters matched
    # bytes so non-ASCII header values compare instead of raising TypeError
    return compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def bearer_token_matches(authorization: Optional[str], secret: str) -> bool:
    """True iff `authorization` is exactly "Bearer <secret>"."""
    if not authorization or not secret:
        return False
    return _constant_time_equals(authorization, f"Bearer {secret}")


def admin_key_matches(provided: Optional[str], admin_key: str) -> bool:
    """True iff the x-admin-key value equals the configured admin key."""
    if not provided or not admin_key:
        return False
    return _constant_time_equals(provided, admin_key)


async def require_cron_auth(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """
    Gate for scheduled job endpoints.

    Accepts the bearer header; when CRON_ALLOW_QUERY_SECRET is on, also
    accepts ?secret=<CRON_SECRET> so a job can be fired from a browser.
    """
    secret = settings.cron_secret
    if not secret:
        logger.error("CRON_SECRET is not set; refusing %s", request.url.path)
        raise ConfigurationError(context={"missing": ["CRON_SECRET"]})

    # What: exact "Bearer <secret>" only; no case folding, no trimming
    if bearer_token_matches(authorization, secret):
        return

    # Query strings end up in proxy logs, hence opt-in only
    if settings.cron_allow_query_secret:
        query_secret = request.query_params.get("secret")
        if query_secret and _constant_time_equals(query_secret, secret):
            return

    logger.warning(
        "Unauthorized cron call to %s (authorization header %s)",
        request.url.path,
        "present" if authorization else "missing",
    )
    raise UnauthorizedError(gate="cron", context={"path": request.url.path})


async def require_admin_key(
    request: Request,
    x_admin_key: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Gate for admin-only reads."""
    admin_key = settings.admin_key
    if not admin_key:
        logger.error("ADMIN_KEY is not set; refusing %s", request.url.path)
        raise ConfigurationError(context={"missing": ["ADMIN_KEY"]})

    if admin_key_matches(x_admin_key, admin_key):
        return

    logger.warning("Unauthorized admin call to %s", request.url.path)
    raise UnauthorizedError(gate="admin", context={"path": request.url.path})
