"""
AI Productivity Hub Backend — Profile & Notification Settings Models
=====================================================================

What:  ORM mappings of the `profiles` and `user_notification_settings` tables.
Why:   The scheduled jobs select their recipients from these two tables.
How:   Read-only mappings; only the columns the jobs use are declared.
Who:   Queried by the jobs in services/jobs.py.

Both tables are owned by the hosted database (one `profiles` row per auth
user, created by a trigger on sign-up). Columns not declared here exist but
are irrelevant to this service.
"""

import uuid
from datetime import time
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Time
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from prodhub.database import Base


class Profile(Base):
    """
    A user's profile row.

    Opt-in flags:
        daily_digest_enabled / wants_daily_digest: either one opts into the
            daily digest (two flags exist because the onboarding flow and the
            settings page historically wrote different columns)
        weekly_report_enabled: opts into the weekly report
    """

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # 'free' | 'pro' | 'founder'
    plan: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    daily_digest_enabled: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    wants_daily_digest: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    daily_digest_hour: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    weekly_report_enabled: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    focus_area: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    onboarding_weekly_focus: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def wants_digest(self) -> bool:
        return bool(self.daily_digest_enabled) or bool(self.wants_daily_digest)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, plan='{self.plan}')>"


class UserNotificationSettings(Base):
    """
    Per-user reminder preferences.

    Times are local wall-clock times in `timezone`; NULL times fall back to
    09:00 (daily success) and 21:30 (evening reflection).
    """

    __tablename__ = "user_notification_settings"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id"),
        primary_key=True,
    )

    daily_success_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    daily_success_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)

    evening_reflection_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    evening_reflection_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)

    task_reminders_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    weekly_report_enabled: Mapped[bool] = mapped_column(Boolean, default=False)

    timezone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<UserNotificationSettings(user_id={self.user_id}, timezone='{self.timezone}')>"
