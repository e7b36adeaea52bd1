"""KeyDate model — birthdays, anniversaries, deadlines and other dates to watch."""

import datetime
import uuid

from sqlalchemy import Date, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from jenifer_api.models.base import BaseModel, OrgScopedMixin


class KeyDate(OrgScopedMixin, BaseModel):
    __tablename__ = "key_dates"
    __table_args__ = (
        Index("ix_key_dates_org_date", "org_id", "date"),
    )

    executive_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    # birthday | anniversary | deadline | milestone | travel | financial | ...
    category: Mapped[str | None] = mapped_column(String(30))
    related_person: Mapped[str | None] = mapped_column(String(255))
    related_contact_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
