"""AI Context service — assemble a point-in-time snapshot for one actor.

Every fetcher owns its degrade policy: it logs its own failure and returns the
placeholder for its entity, so a single broken query never fails the snapshot.
Fetches run concurrently, each on its own session.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Any
from zoneinfo import ZoneInfo

import structlog
from sqlalchemy import Select, case, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jenifer_api.core.timezones import local_day_bounds, local_today, resolve_timezone
from jenifer_api.middleware.tenant import scope_filter, tenant_filter
from jenifer_api.models.ai import AIPattern
from jenifer_api.models.core import ExecutiveProfile, Organization, User
from jenifer_api.models.enums import SEVERITY_RANK, TERMINAL_TASK_STATUSES, ApprovalStatus
from jenifer_api.models.key_dates import KeyDate
from jenifer_api.models.meetings import Meeting
from jenifer_api.models.tasks import Approval, Task
from jenifer_api.modules.ai_context.schemas import (
    ApprovalItem,
    ContextBuilderOptions,
    ContextSnapshot,
    ExecutiveContext,
    KeyDateItem,
    MeetingItem,
    OrganizationContext,
    PatternItem,
    TaskItem,
    TemporalContext,
    UserContext,
)

logger = structlog.get_logger()

SessionFactory = async_sessionmaker[AsyncSession]

TASK_LIMIT = 20
APPROVAL_LIMIT = 10
KEY_DATE_LIMIT = 15
KEY_DATE_HORIZON_DAYS = 30
PATTERN_LIMIT = 20

PLACEHOLDER_USER_NAME = "User"
PLACEHOLDER_ORG_NAME = "Organization"


def severity_rank(column: Any) -> Any:
    """SQL expression ranking urgent > high > medium > low (unknown sorts last)."""
    return case(SEVERITY_RANK, value=column, else_=0)


# ── Identity fetchers ─────────────────────────────────────────────────────────


async def fetch_user(
    session_factory: SessionFactory, user_id: uuid.UUID, org_id: uuid.UUID
) -> UserContext:
    placeholder = UserContext(id=user_id, full_name=PLACEHOLDER_USER_NAME, timezone="UTC")
    try:
        async with session_factory() as db:
            stmt = tenant_filter(
                select(User).where(User.id == user_id, User.is_deleted.is_(False)), org_id, User
            )
            user = (await db.execute(stmt)).scalar_one_or_none()
    except Exception as exc:
        logger.warning("ai_context.user_fetch_failed", user_id=str(user_id), error=str(exc))
        return placeholder
    if user is None:
        logger.info("ai_context.user_missing", user_id=str(user_id), org_id=str(org_id))
        return placeholder
    return UserContext(id=user.id, full_name=user.full_name, timezone=user.timezone or "UTC")


async def fetch_organization(session_factory: SessionFactory, org_id: uuid.UUID) -> OrganizationContext:
    placeholder = OrganizationContext(id=org_id, name=PLACEHOLDER_ORG_NAME, ai_settings={})
    try:
        async with session_factory() as db:
            org = (
                await db.execute(
                    select(Organization).where(
                        Organization.id == org_id, Organization.is_deleted.is_(False)
                    )
                )
            ).scalar_one_or_none()
    except Exception as exc:
        logger.warning("ai_context.organization_fetch_failed", org_id=str(org_id), error=str(exc))
        return placeholder
    if org is None:
        logger.info("ai_context.organization_missing", org_id=str(org_id))
        return placeholder
    return OrganizationContext(id=org.id, name=org.name, ai_settings=dict(org.ai_settings or {}))


def _executive_context(profile: ExecutiveProfile) -> ExecutiveContext:
    return ExecutiveContext(
        id=profile.id,
        full_name=profile.full_name,
        preferences={
            "scheduling": profile.scheduling_preferences,
            "communication_style": profile.communication_style,
            "travel": profile.travel_preferences,
            "dietary": profile.dietary_preferences,
            "office_address": profile.office_address,
            "home_address": profile.home_address,
        },
    )


async def fetch_executive(
    session_factory: SessionFactory, executive_id: uuid.UUID, org_id: uuid.UUID
) -> ExecutiveContext | None:
    """Active executive in the org, or None (missing, inactive, or fetch error)."""
    try:
        async with session_factory() as db:
            stmt = scope_filter(
                select(ExecutiveProfile).where(
                    ExecutiveProfile.id == executive_id,
                    ExecutiveProfile.is_active.is_(True),
                ),
                org_id,
                ExecutiveProfile,
            )
            profile = (await db.execute(stmt)).scalar_one_or_none()
    except Exception as exc:
        logger.warning("ai_context.executive_fetch_failed", executive_id=str(executive_id), error=str(exc))
        return None
    if profile is None:
        logger.info("ai_context.executive_unavailable", executive_id=str(executive_id), org_id=str(org_id))
        return None
    return _executive_context(profile)


# ── Temporal fetchers ─────────────────────────────────────────────────────────


async def fetch_todays_meetings(
    session_factory: SessionFactory,
    org_id: uuid.UUID,
    executive_id: uuid.UUID | None,
    now: datetime,
    zone: ZoneInfo,
) -> list[MeetingItem]:
    day_start, day_end = local_day_bounds(now, zone)
    try:
        async with session_factory() as db:
            stmt = (
                scope_filter(select(Meeting), org_id, Meeting, executive_id)
                .where(Meeting.start_time >= day_start, Meeting.start_time <= day_end)
                .order_by(Meeting.start_time.asc())
            )
            rows = (await db.execute(stmt)).scalars().all()
    except Exception as exc:
        logger.warning("ai_context.meetings_fetch_failed", org_id=str(org_id), error=str(exc))
        return []
    return [MeetingItem.model_validate(m) for m in rows]


async def fetch_upcoming_tasks(
    session_factory: SessionFactory,
    org_id: uuid.UUID,
    executive_id: uuid.UUID | None,
) -> list[TaskItem]:
    try:
        async with session_factory() as db:
            stmt = (
                scope_filter(select(Task), org_id, Task, executive_id)
                .where(Task.status.not_in(TERMINAL_TASK_STATUSES))
                .order_by(
                    severity_rank(Task.priority).desc(),
                    Task.due_date.asc().nulls_last(),
                    Task.created_at.asc(),
                )
                .limit(TASK_LIMIT)
            )
            rows = (await db.execute(stmt)).scalars().all()
    except Exception as exc:
        logger.warning("ai_context.tasks_fetch_failed", org_id=str(org_id), error=str(exc))
        return []
    return [TaskItem.model_validate(t) for t in rows]


async def fetch_pending_approvals(
    session_factory: SessionFactory,
    org_id: uuid.UUID,
    executive_id: uuid.UUID | None,
) -> list[ApprovalItem]:
    try:
        async with session_factory() as db:
            stmt = (
                scope_filter(select(Approval), org_id, Approval, executive_id)
                .where(Approval.status == ApprovalStatus.PENDING.value)
                .order_by(severity_rank(Approval.urgency).desc(), Approval.created_at.asc())
                .limit(APPROVAL_LIMIT)
            )
            rows = (await db.execute(stmt)).scalars().all()
    except Exception as exc:
        logger.warning("ai_context.approvals_fetch_failed", org_id=str(org_id), error=str(exc))
        return []
    return [ApprovalItem.model_validate(a) for a in rows]


def key_date_window_stmt(
    org_id: uuid.UUID,
    executive_id: uuid.UUID | None,
    first_day: date,
    horizon_days: int,
    limit: int,
) -> Select:
    """Key dates in [first_day, first_day + horizon_days], both ends inclusive."""
    return (
        scope_filter(select(KeyDate), org_id, KeyDate, executive_id)
        .where(KeyDate.date >= first_day, KeyDate.date <= first_day + timedelta(days=horizon_days))
        .order_by(KeyDate.date.asc(), KeyDate.title.asc())
        .limit(limit)
    )


async def fetch_upcoming_key_dates(
    session_factory: SessionFactory,
    org_id: uuid.UUID,
    executive_id: uuid.UUID | None,
    now: datetime,
    zone: ZoneInfo,
    horizon_days: int = KEY_DATE_HORIZON_DAYS,
    limit: int = KEY_DATE_LIMIT,
) -> list[KeyDateItem]:
    stmt = key_date_window_stmt(org_id, executive_id, local_today(now, zone), horizon_days, limit)
    try:
        async with session_factory() as db:
            rows = (await db.execute(stmt)).scalars().all()
    except Exception as exc:
        logger.warning("ai_context.key_dates_fetch_failed", org_id=str(org_id), error=str(exc))
        return []
    return [KeyDateItem.model_validate(k) for k in rows]


async def build_temporal_context(
    session_factory: SessionFactory,
    org_id: uuid.UUID,
    executive_id: uuid.UUID | None,
    now: datetime,
    zone: ZoneInfo,
    timezone_name: str,
) -> TemporalContext:
    """Fan out the four temporal fetches and join on all of them."""
    meetings, tasks, approvals, key_dates = await asyncio.gather(
        fetch_todays_meetings(session_factory, org_id, executive_id, now, zone),
        fetch_upcoming_tasks(session_factory, org_id, executive_id),
        fetch_pending_approvals(session_factory, org_id, executive_id),
        fetch_upcoming_key_dates(session_factory, org_id, executive_id, now, zone),
    )
    return TemporalContext(
        current_time=now,
        timezone=timezone_name,
        todays_meetings=meetings,
        upcoming_tasks=tasks,
        pending_approvals=approvals,
        upcoming_key_dates=key_dates,
    )


# ── Patterns ──────────────────────────────────────────────────────────────────


def _pattern_item(row: AIPattern) -> PatternItem:
    return PatternItem(
        id=row.id,
        org_id=row.org_id,
        executive_id=row.executive_id,
        pattern_type=row.pattern_type,
        pattern_data=dict(row.pattern_data or {}),
        confidence=min(max(float(row.confidence or 0.0), 0.0), 1.0),
        sample_count=row.sample_count or 0,
        last_updated_at=row.last_updated_at,
        created_at=row.created_at,
    )


async def fetch_patterns(
    session_factory: SessionFactory,
    org_id: uuid.UUID,
    executive_id: uuid.UUID | None,
) -> list[PatternItem]:
    """Active patterns by confidence. Errors read as "no patterns known"."""
    try:
        async with session_factory() as db:
            stmt = (
                scope_filter(select(AIPattern), org_id, AIPattern, executive_id)
                .where(AIPattern.is_active.is_(True))
                .order_by(AIPattern.confidence.desc(), AIPattern.sample_count.desc())
                .limit(PATTERN_LIMIT)
            )
            rows = (await db.execute(stmt)).scalars().all()
    except Exception as exc:
        logger.warning("ai_context.patterns_fetch_failed", org_id=str(org_id), error=str(exc))
        return []
    return [_pattern_item(r) for r in rows]


# ── Aggregate ─────────────────────────────────────────────────────────────────


async def _absent() -> None:
    return None


async def build_context(
    session_factory: SessionFactory,
    options: ContextBuilderOptions,
    now: datetime | None = None,
) -> ContextSnapshot:
    """Build the context snapshot for one request.

    User, organization, executive, temporal bundle and patterns are fetched
    concurrently; the snapshot is assembled once all of them have settled.
    A full build holds up to eight pooled sessions at once; the engine pool
    is sized for that in DATABASE_POOL_SIZE and DATABASE_MAX_OVERFLOW.
    """
    now = now or datetime.now(timezone.utc)
    zone, timezone_name = resolve_timezone(options.timezone)

    if options.include_temporal:
        temporal_coro = build_temporal_context(
            session_factory, options.org_id, options.executive_id, now, zone, timezone_name
        )
    else:
        temporal_coro = _absent()

    user, organization, executive, temporal, patterns = await asyncio.gather(
        fetch_user(session_factory, options.user_id, options.org_id),
        fetch_organization(session_factory, options.org_id),
        fetch_executive(session_factory, options.executive_id, options.org_id)
        if options.executive_id is not None
        else _absent(),
        temporal_coro,
        fetch_patterns(session_factory, options.org_id, options.executive_id)
        if options.include_patterns
        else _absent(),
    )

    snapshot = ContextSnapshot(
        user=user,
        organization=organization,
        executive=executive,
        temporal=temporal or TemporalContext(current_time=now, timezone=timezone_name),
        patterns=patterns,
    )
    logger.debug(
        "ai_context.built",
        org_id=str(options.org_id),
        has_executive=executive is not None,
        meetings=len(snapshot.temporal.todays_meetings),
        tasks=len(snapshot.temporal.upcoming_tasks),
        approvals=len(snapshot.temporal.pending_approvals),
        key_dates=len(snapshot.temporal.upcoming_key_dates),
        patterns=len(patterns) if patterns is not None else None,
    )
    return snapshot
