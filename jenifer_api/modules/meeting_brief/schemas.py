"""Meeting Brief — Pydantic schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field


class BriefDraft(BaseModel):
    """Raw data document handed to the generator, with counts of what it contains."""

    text: str
    attendee_count: int = 0  # contacts matched
    related_task_count: int = 0
    past_meeting_count: int = 0


class BriefResult(BaseModel):
    meeting_id: uuid.UUID
    meeting_title: str
    brief: str
    attendee_count: int = Field(description="Attendees matched to a contact record")
    related_task_count: int
    past_meeting_count: int


class StoredBriefResponse(BaseModel):
    meeting_id: uuid.UUID
    meeting_title: str
    brief: str
    ai_brief_generated: bool = True
