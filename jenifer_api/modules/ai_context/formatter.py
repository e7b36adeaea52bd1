"""Render a context snapshot as bounded prompt text.

Pure functions only: the output depends on the snapshot alone (the current
time comes from ``snapshot.temporal.current_time``), and every list section
prints at most a fixed number of lines regardless of how much data exists.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo

from jenifer_api.core.timezones import as_utc, format_clock, zone_or_utc
from jenifer_api.modules.ai_context.schemas import (
    ApprovalItem,
    ContextSnapshot,
    ExecutiveContext,
    KeyDateItem,
    MeetingItem,
    PatternItem,
    TaskItem,
)
from jenifer_api.services.prompts import ASSISTANT_SYSTEM_PROMPT

TASK_DISPLAY_LIMIT = 10
KEY_DATE_DISPLAY_LIMIT = 8
PATTERN_DISPLAY_LIMIT = 5

NO_MEETINGS_LINE = "- No meetings scheduled today."
CONTEXT_DIVIDER = "--- Current Context ---"

_ADDRESS_FIELDS = ("line1", "line2", "city", "state", "postal_code", "country")


def _json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str, ensure_ascii=False)


def _format_address(address: Any) -> str:
    if isinstance(address, dict):
        parts = [str(address[k]) for k in _ADDRESS_FIELDS if address.get(k)]
        return ", ".join(parts) if parts else _json(address)
    return str(address)


def _format_amount(amount: Decimal, currency: str | None) -> str:
    formatted = f"{amount:,.2f}"
    return f"{currency} {formatted}" if currency else formatted


# ── Section renderers (shared with the daily brief job) ──────────────────────


def render_header(snapshot: ContextSnapshot) -> list[str]:
    zone = zone_or_utc(snapshot.temporal.timezone)
    local = as_utc(snapshot.temporal.current_time).astimezone(zone)
    return [
        f"Current Time: {local:%A, %B} {local.day}, {local.year} {format_clock(local, zone)}",
        f"Timezone: {snapshot.temporal.timezone}",
        f"User: {snapshot.user.full_name or 'User'}",
    ]


def render_executive(executive: ExecutiveContext) -> list[str]:
    lines = [f"Executive: {executive.full_name}"]
    prefs = executive.preferences
    if prefs.get("scheduling"):
        lines.append(f"Scheduling Preferences: {_json(prefs['scheduling'])}")
    if prefs.get("communication_style"):
        lines.append(f"Communication Style: {prefs['communication_style']}")
    if prefs.get("office_address"):
        lines.append(f"Office Address: {_format_address(prefs['office_address'])}")
    return lines


def render_schedule(meetings: Sequence[MeetingItem], zone: ZoneInfo) -> list[str]:
    lines = ["Today's Schedule:"]
    if not meetings:
        lines.append(NO_MEETINGS_LINE)
        return lines
    for m in meetings:
        line = f"- {format_clock(m.start_time, zone)} - {format_clock(m.end_time, zone)}: {m.title}"
        if m.location_type:
            line += f" [{m.location_type}]"
        if m.location:
            line += f" @ {m.location}"
        lines.append(line)
    return lines


def render_tasks(tasks: Sequence[TaskItem]) -> list[str]:
    if not tasks:
        return []
    lines = [f"Pending Tasks ({len(tasks)}):"]
    for t in tasks[:TASK_DISPLAY_LIMIT]:
        detail = t.status
        if t.due_date:
            detail += f", due {t.due_date.isoformat()}"
        lines.append(f"- [{t.priority}] {t.title} ({detail})")
    remaining = len(tasks) - TASK_DISPLAY_LIMIT
    if remaining > 0:
        lines.append(f"... and {remaining} more")
    return lines


def render_approvals(approvals: Sequence[ApprovalItem]) -> list[str]:
    if not approvals:
        return []
    lines = [f"Pending Approvals ({len(approvals)}):"]
    for a in approvals:
        line = f"- [{a.urgency}] {a.title}"
        if a.amount is not None:
            line += f" - {_format_amount(a.amount, a.currency)}"
        if a.due_date:
            line += f" (due {a.due_date.isoformat()})"
        lines.append(line)
    return lines


def render_key_dates(key_dates: Sequence[KeyDateItem]) -> list[str]:
    if not key_dates:
        return []
    lines = ["Upcoming Key Dates:"]
    for k in key_dates[:KEY_DATE_DISPLAY_LIMIT]:
        line = f"- {k.date.isoformat()}: {k.title}"
        if k.category:
            line += f" [{k.category}]"
        if k.related_person:
            line += f" ({k.related_person})"
        lines.append(line)
    return lines


def render_patterns(patterns: Sequence[PatternItem] | None) -> list[str]:
    if not patterns:
        return []
    lines = ["Known Patterns:"]
    for p in patterns[:PATTERN_DISPLAY_LIMIT]:
        percent = int(p.confidence * 100 + 0.5)
        lines.append(f"- {p.pattern_type}: {_json(p.pattern_data)} (confidence: {percent}%)")
    return lines


# ── Entry points ──────────────────────────────────────────────────────────────


def format_context_for_prompt(snapshot: ContextSnapshot) -> str:
    """Serialize a snapshot into prompt text with a fixed section order."""
    temporal = snapshot.temporal
    zone = zone_or_utc(temporal.timezone)

    sections = [
        render_header(snapshot),
        render_executive(snapshot.executive) if snapshot.executive else [],
        render_schedule(temporal.todays_meetings, zone),
        render_tasks(temporal.upcoming_tasks),
        render_approvals(temporal.pending_approvals),
        render_key_dates(temporal.upcoming_key_dates),
        render_patterns(snapshot.patterns),
    ]
    return "\n\n".join("\n".join(section) for section in sections if section)


def compose_system_prompt(snapshot: ContextSnapshot) -> str:
    """Assistant persona prompt followed by the formatted current context."""
    return f"{ASSISTANT_SYSTEM_PROMPT}\n\n{CONTEXT_DIVIDER}\n{format_context_for_prompt(snapshot)}"
