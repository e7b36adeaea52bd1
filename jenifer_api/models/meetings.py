"""Meeting model — calendar events, attendees and the AI meeting brief."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from jenifer_api.core.database import JSONType
from jenifer_api.models.base import BaseModel, OrgScopedMixin
from jenifer_api.models.enums import MeetingStatus


class Meeting(OrgScopedMixin, BaseModel):
    __tablename__ = "meetings"
    __table_args__ = (
        Index("ix_meetings_org_start", "org_id", "start_time"),
    )

    executive_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")
    is_all_day: Mapped[bool] = mapped_column(default=False, nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=MeetingStatus.SCHEDULED.value)
    # virtual | in_person | phone | hybrid
    location_type: Mapped[str | None] = mapped_column(String(20))
    location: Mapped[str | None] = mapped_column(String(500))
    meeting_type: Mapped[str | None] = mapped_column(String(50))

    # [{email, name, status, is_organizer, is_optional}, ...]
    attendees: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)

    ai_brief: Mapped[str | None] = mapped_column(Text)
    ai_brief_generated: Mapped[bool] = mapped_column(default=False, nullable=False)

    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
