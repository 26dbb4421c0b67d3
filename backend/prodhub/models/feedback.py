"""
AI Productivity Hub Backend — Feedback Model
=============================================

What:  ORM mapping of the `feedback` table (in-app feedback form submissions).
Who:   Read by the admin feedback listing; rows are inserted by the web client.

Query pattern: the admin view lists everything newest first, so the only
ordering used is created_at DESC.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from prodhub.database import Base


class Feedback(Base):
    __tablename__ = "feedback"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)

    # Anonymous visitors can leave feedback, so both identity columns are optional
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    message: Mapped[str] = mapped_column(Text, nullable=False)

    # Which screen the form was opened from, e.g. "dashboard", "settings"
    source: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Feedback(id={self.id}, source='{self.source}', created_at='{self.created_at}')>"
