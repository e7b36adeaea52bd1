"""Contact model — the org's relationship directory."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, SmallInteger, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from jenifer_api.models.base import BaseModel, OrgScopedMixin


class Contact(OrgScopedMixin, BaseModel):
    __tablename__ = "contacts"
    __table_args__ = (
        Index("ix_contacts_org_email", "org_id", "email"),
    )

    executive_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str | None] = mapped_column(String(255))
    company: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(320))
    # vip | client | vendor | partner | personal | colleague | other
    category: Mapped[str | None] = mapped_column(String(30))
    relationship_notes: Mapped[str | None] = mapped_column(Text)
    relationship_strength: Mapped[int | None] = mapped_column(SmallInteger)  # 1-10
    last_contacted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
