"""AI Context — Pydantic schemas for the per-request context snapshot."""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContextBuilderOptions(BaseModel):
    user_id: uuid.UUID
    org_id: uuid.UUID
    executive_id: uuid.UUID | None = None
    timezone: str = "UTC"
    include_patterns: bool = True
    include_temporal: bool = True


# ── Identity blocks ───────────────────────────────────────────────────────────


class UserContext(BaseModel):
    id: uuid.UUID
    full_name: str | None = None
    timezone: str = "UTC"


class OrganizationContext(BaseModel):
    id: uuid.UUID
    name: str
    ai_settings: dict[str, Any] = Field(default_factory=dict)


class ExecutiveContext(BaseModel):
    id: uuid.UUID
    full_name: str
    # scheduling, communication_style, travel, dietary, office_address, home_address
    preferences: dict[str, Any] = Field(default_factory=dict)


# ── Temporal bundle ───────────────────────────────────────────────────────────


class MeetingItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    start_time: dt.datetime
    end_time: dt.datetime
    location_type: str | None = None
    location: str | None = None
    meeting_type: str | None = None
    status: str | None = None


class TaskItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    status: str
    priority: str
    category: str | None = None
    due_date: dt.date | None = None


class ApprovalItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    approval_type: str | None = None
    urgency: str
    amount: Decimal | None = None
    currency: str | None = None
    due_date: dt.date | None = None


class KeyDateItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    date: dt.date
    category: str | None = None
    related_person: str | None = None


class TemporalContext(BaseModel):
    current_time: dt.datetime
    timezone: str
    todays_meetings: list[MeetingItem] = Field(default_factory=list)
    upcoming_tasks: list[TaskItem] = Field(default_factory=list)
    pending_approvals: list[ApprovalItem] = Field(default_factory=list)
    upcoming_key_dates: list[KeyDateItem] = Field(default_factory=list)


class PatternItem(BaseModel):
    id: uuid.UUID
    org_id: uuid.UUID
    executive_id: uuid.UUID | None = None
    pattern_type: str
    pattern_data: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(ge=0.0, le=1.0)
    sample_count: int = 0
    last_updated_at: dt.datetime | None = None
    created_at: dt.datetime | None = None


class ContextSnapshot(BaseModel):
    user: UserContext
    organization: OrganizationContext
    executive: ExecutiveContext | None = None
    temporal: TemporalContext
    patterns: list[PatternItem] | None = None


class ContextResponse(BaseModel):
    context: ContextSnapshot
    prompt: str
