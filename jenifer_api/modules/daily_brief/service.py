"""Daily Brief — morning briefing per active executive, stored as an AI insight."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import select

from jenifer_api.core.config import settings
from jenifer_api.core.errors import GenerationError
from jenifer_api.core.timezones import as_utc, local_day_bounds, resolve_timezone
from jenifer_api.models.ai import AIInsight
from jenifer_api.models.core import ExecutiveProfile, Organization
from jenifer_api.models.enums import InsightPriority, InsightType
from jenifer_api.modules.ai_context.formatter import (
    render_approvals,
    render_key_dates,
    render_schedule,
    render_tasks,
)
from jenifer_api.modules.ai_context.schemas import TemporalContext
from jenifer_api.modules.ai_context.service import SessionFactory, build_temporal_context
from jenifer_api.services.ai_gateway import GatewayAIClient, TextGenerator, get_ai_config
from jenifer_api.services.prompts import BRIEF_GENERATOR_SYSTEM_PROMPT, DAILY_BRIEF_REQUEST_PREAMBLE

logger = structlog.get_logger()


def render_daily_data(executive_name: str, timezone_name: str, temporal: TemporalContext) -> str:
    zone, _ = resolve_timezone(timezone_name)
    local = as_utc(temporal.current_time).astimezone(zone)
    header = [
        f"Executive: {executive_name}",
        f"Date: {local:%A, %B} {local.day}, {local.year}",
        f"Timezone: {timezone_name}",
    ]
    sections = [
        header,
        render_schedule(temporal.todays_meetings, zone),
        render_tasks(temporal.upcoming_tasks),
        render_approvals(temporal.pending_approvals),
        render_key_dates(temporal.upcoming_key_dates),
    ]
    return "\n\n".join("\n".join(s) for s in sections if s)


async def _active_organizations(session_factory: SessionFactory) -> list[Organization]:
    async with session_factory() as db:
        stmt = (
            select(Organization)
            .where(Organization.is_active.is_(True), Organization.is_deleted.is_(False))
            .order_by(Organization.name)
        )
        return list((await db.execute(stmt)).scalars().all())


async def _active_executives(session_factory: SessionFactory, org: Organization) -> list[ExecutiveProfile]:
    async with session_factory() as db:
        stmt = (
            select(ExecutiveProfile)
            .where(
                ExecutiveProfile.org_id == org.id,
                ExecutiveProfile.is_active.is_(True),
                ExecutiveProfile.is_deleted.is_(False),
            )
            .order_by(ExecutiveProfile.full_name)
        )
        return list((await db.execute(stmt)).scalars().all())


async def generate_brief_for_executive(
    session_factory: SessionFactory,
    executive: ExecutiveProfile,
    generator: TextGenerator,
    now: datetime,
) -> AIInsight:
    """Gather today's data for one executive, generate the brief and store it."""
    zone, timezone_name = resolve_timezone(executive.timezone or settings.DEFAULT_EXECUTIVE_TIMEZONE)
    temporal = await build_temporal_context(
        session_factory, executive.org_id, executive.id, now, zone, timezone_name
    )
    data = render_daily_data(executive.full_name, timezone_name, temporal)

    config = get_ai_config("generation")
    text = await generator.generate(
        model=config.model,
        system=BRIEF_GENERATOR_SYSTEM_PROMPT,
        prompt=f"{DAILY_BRIEF_REQUEST_PREAMBLE.format(executive_name=executive.full_name)}\n\n{data}",
        max_tokens=config.max_tokens,
        temperature=config.temperature,
        task_type="daily_brief",
    )

    local = as_utc(now).astimezone(zone)
    _, end_of_day = local_day_bounds(now, zone)
    meetings = len(temporal.todays_meetings)
    tasks = len(temporal.upcoming_tasks)
    approvals = len(temporal.pending_approvals)
    insight = AIInsight(
        org_id=executive.org_id,
        executive_id=executive.id,
        insight_type=InsightType.DAILY_BRIEF.value,
        priority=InsightPriority.MEDIUM.value,
        title=f"Daily Briefing - {local:%b} {local.day}",
        description=text,
        confidence_score=1.0,
        reasoning=(
            f"Auto-generated daily brief with {meetings} meetings, "
            f"{tasks} tasks, {approvals} approvals"
        ),
        valid_until=end_of_day,
    )
    async with session_factory() as db:
        db.add(insight)
        await db.commit()
    return insight


async def generate_daily_briefs(
    session_factory: SessionFactory,
    generator: TextGenerator | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Run the daily brief for every active executive of every active org.

    One executive failing is logged and counted; an org whose executives
    cannot be listed is logged and skipped. Either way the run carries on.
    """
    now = now or datetime.now(timezone.utc)
    generator = generator or GatewayAIClient()
    generated = 0
    failed = 0

    orgs = await _active_organizations(session_factory)
    for org in orgs:
        try:
            executives = await _active_executives(session_factory, org)
        except Exception as exc:
            logger.error("daily_brief.org_failed", org_id=str(org.id), error=str(exc), exc_info=True)
            continue
        for executive in executives:
            try:
                await generate_brief_for_executive(session_factory, executive, generator, now)
                generated += 1
            except GenerationError as exc:
                failed += 1
                logger.warning(
                    "daily_brief.generation_failed",
                    org_id=str(org.id),
                    executive_id=str(executive.id),
                    error=str(exc),
                )
            except Exception as exc:
                failed += 1
                logger.error(
                    "daily_brief.executive_failed",
                    org_id=str(org.id),
                    executive_id=str(executive.id),
                    error=str(exc),
                    exc_info=True,
                )

    summary = {"orgs_processed": len(orgs), "briefs_generated": generated, "failed": failed}
    logger.info("daily_brief.completed", **summary)
    return summary
