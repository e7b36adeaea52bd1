"""Task and Approval models — the assistant's open work queue."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from jenifer_api.models.base import BaseModel, OrgScopedMixin
from jenifer_api.models.enums import ApprovalStatus, ApprovalUrgency, TaskPriority, TaskStatus


class Task(OrgScopedMixin, BaseModel):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_org_status", "org_id", "status"),
    )

    executive_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskStatus.TODO.value)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskPriority.MEDIUM.value)
    category: Mapped[str | None] = mapped_column(String(50))
    due_date: Mapped[date | None] = mapped_column(Date)
    related_meeting_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(Uuid)


class Approval(OrgScopedMixin, BaseModel):
    __tablename__ = "approvals"
    __table_args__ = (
        Index("ix_approvals_org_status", "org_id", "status"),
    )

    executive_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    # expense | calendar | document | travel | purchase | time_off | other
    approval_type: Mapped[str] = mapped_column(String(30), nullable=False, default="other")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ApprovalStatus.PENDING.value)
    urgency: Mapped[str] = mapped_column(String(20), nullable=False, default=ApprovalUrgency.MEDIUM.value)
    amount: Mapped[Decimal | None] = mapped_column()
    currency: Mapped[str | None] = mapped_column(String(3))
    due_date: Mapped[date | None] = mapped_column(Date)
    submitted_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
