"""Core models: Organization, User, ExecutiveProfile."""

import uuid
from typing import Any

from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from jenifer_api.models.base import BaseModel, OrgScopedMixin


class Organization(BaseModel):
    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # Org-level AI switches (tone, enabled modules, ...); never interpreted here
    ai_settings: Mapped[dict[str, Any]] = mapped_column(nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r})>"


class User(OrgScopedMixin, BaseModel):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)


class ExecutiveProfile(OrgScopedMixin, BaseModel):
    """An executive supported by one or more assistants in the org."""

    __tablename__ = "executive_profiles"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(320))
    timezone: Mapped[str | None] = mapped_column(String(64))
    main_office_location: Mapped[str | None] = mapped_column(String(255))

    # Preference bundles are free-form JSON edited from the profile screens
    scheduling_preferences: Mapped[dict[str, Any] | None] = mapped_column()
    communication_style: Mapped[str | None] = mapped_column(Text)
    travel_preferences: Mapped[dict[str, Any] | None] = mapped_column()
    dietary_preferences: Mapped[dict[str, Any] | None] = mapped_column()
    office_address: Mapped[dict[str, Any] | None] = mapped_column()
    home_address: Mapped[dict[str, Any] | None] = mapped_column()

    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
