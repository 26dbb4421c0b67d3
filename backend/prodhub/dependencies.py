"""
AI Productivity Hub Backend — Shared FastAPI Dependencies
==========================================================

What:  Small providers that hand request-scoped collaborators to route handlers.
Why:   Handlers declare what they need (settings, a usage meter) instead of
       reaching for module-level globals, which keeps every handler a plain
       function of (request, settings, session) and easy to override in tests.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from prodhub.config import Settings
from prodhub.database import get_db_session
from prodhub.services.usage import SqlUsageStore, UsageMeter


def get_app_settings(request: Request) -> Settings:
    """The Settings instance the running app was created with."""
    return request.app.state.settings


def get_usage_meter(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> UsageMeter:
    """A UsageMeter bound to this request's database session."""
    return UsageMeter(SqlUsageStore(db), settings)
