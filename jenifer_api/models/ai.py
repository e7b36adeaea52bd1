"""AI models: AIPattern (learned behaviour), AIInsight (generated notes)."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Float, Index, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from jenifer_api.models.base import BaseModel, OrgScopedMixin
from jenifer_api.models.enums import InsightPriority, InsightStatus


class AIPattern(OrgScopedMixin, BaseModel):
    """A behavioural pattern learned from the org's history.

    Written by the pattern learner; this service only reads it.
    """

    __tablename__ = "ai_patterns"
    __table_args__ = (
        Index("ix_ai_patterns_org_active", "org_id", "is_active"),
    )

    executive_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    pattern_type: Mapped[str] = mapped_column(String(50), nullable=False)
    pattern_data: Mapped[dict[str, Any]] = mapped_column(nullable=False, default=dict)
    confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    sample_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    last_updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class AIInsight(OrgScopedMixin, BaseModel):
    __tablename__ = "ai_insights"
    __table_args__ = (
        Index("ix_ai_insights_org_type", "org_id", "insight_type"),
    )

    executive_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    insight_type: Mapped[str] = mapped_column(String(30), nullable=False)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default=InsightPriority.MEDIUM.value)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=InsightStatus.ACTIVE.value)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    confidence_score: Mapped[float | None] = mapped_column(Float)
    reasoning: Mapped[str | None] = mapped_column(Text)
    valid_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
