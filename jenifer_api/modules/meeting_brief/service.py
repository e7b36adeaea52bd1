"""Meeting Brief service — gather meeting data and generate an AI brief.

The pipeline is a strict chain: meeting -> attendee emails -> contacts,
past meetings, related tasks, key dates -> draft -> generation -> persistence.
It runs sequentially on one session, with each section query in its own
SAVEPOINT so a failed statement cannot abort the outer transaction. Only a
missing meeting or a failed generation call is fatal; every other gap just
drops its section.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jenifer_api.core.errors import GenerationError, NotFoundError
from jenifer_api.core.timezones import as_utc, format_clock, local_today, zone_or_utc
from jenifer_api.middleware.tenant import scope_filter
from jenifer_api.models.contacts import Contact
from jenifer_api.models.enums import LocationType
from jenifer_api.models.key_dates import KeyDate
from jenifer_api.models.meetings import Meeting
from jenifer_api.models.tasks import Task
from jenifer_api.modules.ai_context.service import key_date_window_stmt, severity_rank
from jenifer_api.modules.meeting_brief.schemas import BriefDraft, BriefResult
from jenifer_api.services.ai_gateway import GatewayAIClient, TextGenerator, get_ai_config
from jenifer_api.services.prompts import BRIEF_GENERATOR_SYSTEM_PROMPT, BRIEF_REQUEST_PREAMBLE

logger = structlog.get_logger()

PAST_MEETING_CANDIDATES = 10
PAST_MEETING_LIMIT = 5
PAST_MEETING_SNIPPET = 120
TASK_SNIPPET = 100
KEY_DATE_HORIZON_DAYS = 14
KEY_DATE_LIMIT = 5


# ── Data gathering helpers ────────────────────────────────────────────────────


async def get_meeting(db: AsyncSession, meeting_id: uuid.UUID, org_id: uuid.UUID) -> Meeting | None:
    result = await db.execute(
        scope_filter(select(Meeting).where(Meeting.id == meeting_id), org_id, Meeting)
    )
    return result.scalar_one_or_none()


def _normalize_attendees(raw: Any) -> list[dict[str, Any]]:
    attendees: list[dict[str, Any]] = []
    for entry in raw or []:
        if isinstance(entry, dict):
            attendees.append(entry)
        elif isinstance(entry, str) and entry:
            attendees.append({"email": entry})
    return attendees


def _attendee_emails(attendees: list[dict[str, Any]]) -> list[str]:
    emails: list[str] = []
    for a in attendees:
        email = a.get("email")
        if email and email not in emails:
            emails.append(email)
    return emails


def _format_when(value: datetime, tz_name: str) -> str:
    zone = zone_or_utc(tz_name)
    local = as_utc(value).astimezone(zone)
    return f"{local:%a, %b} {local.day}, {format_clock(local, zone)}"


def _render_header(meeting: Meeting) -> list[str]:
    lines = [
        f"# Meeting Brief: {meeting.title}",
        f"**Time:** {_format_when(meeting.start_time, meeting.timezone)} - "
        f"{_format_when(meeting.end_time, meeting.timezone)}",
        f"**Location:** {meeting.location or 'Not specified'} ({meeting.location_type or LocationType.VIRTUAL.value})",
        f"**Type:** {meeting.meeting_type or 'General'}",
    ]
    if meeting.description:
        lines.append(f"**Description:** {meeting.description}")
    return lines


def _contact_line(contact: Contact) -> str:
    if contact.last_contacted_at:
        last_contact = f"last contact: {as_utc(contact.last_contacted_at).date().isoformat()}"
    else:
        last_contact = "no prior contact on record"
    strength = contact.relationship_strength if contact.relationship_strength is not None else "?"
    line = (
        f"- **{contact.full_name}** - {contact.title or 'No title'} at {contact.company or 'Unknown'} "
        f"({contact.category or 'uncategorized'}, strength: {strength}/10, {last_contact})"
    )
    if contact.relationship_notes:
        line += f"\n  _Notes: {contact.relationship_notes}_"
    return line


async def _render_attendees(
    db: AsyncSession,
    org_id: uuid.UUID,
    attendees: list[dict[str, Any]],
    emails: list[str],
) -> tuple[list[str], int]:
    if not attendees:
        return [], 0

    contacts: list[Contact] = []
    if emails:
        try:
            async with db.begin_nested():
                stmt = (
                    scope_filter(select(Contact), org_id, Contact)
                    .where(Contact.email.in_(emails))
                    .order_by(Contact.full_name.asc())
                )
                contacts = list((await db.execute(stmt)).scalars().all())
        except Exception as exc:
            logger.warning("meeting_brief.contacts_fetch_failed", org_id=str(org_id), error=str(exc))

    found = {c.email for c in contacts}
    unmatched = [a for a in attendees if not a.get("email") or a["email"] not in found]

    lines = ["## Attendees"]
    lines.extend(_contact_line(c) for c in contacts)
    if unmatched:
        labels = ", ".join(a.get("name") or a.get("email") or "unnamed attendee" for a in unmatched)
        lines.append(f"- _{len(unmatched)} attendee(s) not in contacts: {labels}_")
    return lines, len(contacts)


async def _render_past_meetings(
    db: AsyncSession,
    org_id: uuid.UUID,
    meeting: Meeting,
    emails: list[str],
) -> tuple[list[str], int]:
    """Earlier meetings whose serialized row mentions any attendee email.

    Plain substring matching over the whole row: an email that happens to
    appear in an unrelated field still counts as a match.
    """
    if not emails:
        return [], 0
    try:
        async with db.begin_nested():
            stmt = (
                scope_filter(select(Meeting), org_id, Meeting)
                .where(Meeting.id != meeting.id, Meeting.start_time < meeting.start_time)
                .order_by(Meeting.start_time.desc())
                .limit(PAST_MEETING_CANDIDATES)
            )
            candidates = (await db.execute(stmt)).scalars().all()
    except Exception as exc:
        logger.warning("meeting_brief.past_meetings_fetch_failed", org_id=str(org_id), error=str(exc))
        return [], 0

    related = [
        m for m in candidates
        if any(email in json.dumps(m.to_dict(), default=str) for email in emails)
    ][:PAST_MEETING_LIMIT]
    if not related:
        return [], 0

    lines = ["## Previous Meetings with These Attendees"]
    for m in related:
        line = f"- **{as_utc(m.start_time).date().isoformat()}:** {m.title}"
        if m.description:
            line += f" - {m.description[:PAST_MEETING_SNIPPET]}"
        lines.append(line)
    return lines, len(related)


async def _render_related_tasks(
    db: AsyncSession, org_id: uuid.UUID, meeting_id: uuid.UUID
) -> tuple[list[str], int]:
    try:
        async with db.begin_nested():
            stmt = (
                scope_filter(select(Task), org_id, Task)
                .where(Task.related_meeting_id == meeting_id)
                .order_by(
                    severity_rank(Task.priority).desc(),
                    Task.due_date.asc().nulls_last(),
                    Task.created_at.asc(),
                )
            )
            tasks = (await db.execute(stmt)).scalars().all()
    except Exception as exc:
        logger.warning("meeting_brief.tasks_fetch_failed", meeting_id=str(meeting_id), error=str(exc))
        return [], 0
    if not tasks:
        return [], 0

    lines = ["## Related Action Items"]
    for t in tasks:
        line = f"- [{t.priority}] **{t.title}** - {t.status}"
        if t.due_date:
            line += f" (due: {t.due_date.isoformat()})"
        if t.description:
            line += f"\n  {t.description[:TASK_SNIPPET]}"
        lines.append(line)
    return lines, len(tasks)


async def _render_key_dates(
    db: AsyncSession, org_id: uuid.UUID, meeting: Meeting, now: datetime
) -> list[str]:
    today = local_today(now, zone_or_utc(meeting.timezone))
    try:
        async with db.begin_nested():
            stmt = key_date_window_stmt(org_id, None, today, KEY_DATE_HORIZON_DAYS, KEY_DATE_LIMIT)
            key_dates: list[KeyDate] = list((await db.execute(stmt)).scalars().all())
    except Exception as exc:
        logger.warning("meeting_brief.key_dates_fetch_failed", org_id=str(org_id), error=str(exc))
        return []
    if not key_dates:
        return []

    lines = ["## Upcoming Key Dates (for context)"]
    for kd in key_dates:
        line = f"- **{kd.date.isoformat()}:** {kd.title} [{kd.category or 'other'}]"
        if kd.related_person:
            line += f" - {kd.related_person}"
        lines.append(line)
    return lines


async def assemble_brief_draft(
    db: AsyncSession,
    meeting: Meeting,
    org_id: uuid.UUID,
    now: datetime,
) -> BriefDraft:
    """Render every available section of the brief draft in fixed order."""
    attendees = _normalize_attendees(meeting.attendees)
    emails = _attendee_emails(attendees)

    header = _render_header(meeting)
    attendee_lines, contact_count = await _render_attendees(db, org_id, attendees, emails)
    past_lines, past_count = await _render_past_meetings(db, org_id, meeting, emails)
    task_lines, task_count = await _render_related_tasks(db, org_id, meeting.id)
    key_date_lines = await _render_key_dates(db, org_id, meeting, now)

    sections = [header, attendee_lines, past_lines, task_lines, key_date_lines]
    return BriefDraft(
        text="\n\n".join("\n".join(s) for s in sections if s),
        attendee_count=contact_count,
        related_task_count=task_count,
        past_meeting_count=past_count,
    )


# ── Generation ────────────────────────────────────────────────────────────────


async def generate_brief(
    db: AsyncSession,
    meeting_id: uuid.UUID,
    org_id: uuid.UUID,
    generator: TextGenerator | None = None,
    now: datetime | None = None,
) -> BriefResult:
    """Generate, persist and return the brief for one meeting.

    Raises NotFoundError before any generation or write when the meeting is
    not in the org, and GenerationError (nothing persisted) when generation
    fails.
    """
    meeting = await get_meeting(db, meeting_id, org_id)
    if meeting is None:
        raise NotFoundError("Meeting", meeting_id)

    draft = await assemble_brief_draft(db, meeting, org_id, now or datetime.now(timezone.utc))

    config = get_ai_config("generation")
    generator = generator or GatewayAIClient()
    try:
        brief = await generator.generate(
            model=config.model,
            system=BRIEF_GENERATOR_SYSTEM_PROMPT,
            prompt=f"{BRIEF_REQUEST_PREAMBLE}\n\n{draft.text}",
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            task_type="meeting_brief",
        )
    except GenerationError:
        logger.error("meeting_brief.generation_failed", meeting_id=str(meeting_id), org_id=str(org_id))
        raise

    # Last write wins on concurrent regeneration
    meeting.ai_brief = brief
    meeting.ai_brief_generated = True
    await db.flush()

    logger.info(
        "meeting_brief.generated",
        meeting_id=str(meeting_id),
        contacts=draft.attendee_count,
        related_tasks=draft.related_task_count,
        past_meetings=draft.past_meeting_count,
    )
    return BriefResult(
        meeting_id=meeting.id,
        meeting_title=meeting.title,
        brief=brief,
        attendee_count=draft.attendee_count,
        related_task_count=draft.related_task_count,
        past_meeting_count=draft.past_meeting_count,
    )


async def get_stored_brief(
    db: AsyncSession, meeting_id: uuid.UUID, org_id: uuid.UUID
) -> Meeting | None:
    """The meeting if it exists in the org and already has a generated brief."""
    meeting = await get_meeting(db, meeting_id, org_id)
    if meeting is None or not meeting.ai_brief:
        return None
    return meeting
