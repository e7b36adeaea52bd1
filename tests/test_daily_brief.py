"""Tests for the daily brief job."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jenifer_api.core.errors import GenerationError
from jenifer_api.models.ai import AIInsight
from jenifer_api.models.core import ExecutiveProfile, Organization
from jenifer_api.models.meetings import Meeting
from jenifer_api.models.tasks import Task
from jenifer_api.modules.ai_context.schemas import TemporalContext
from jenifer_api.modules.daily_brief import service as daily_brief_service
from jenifer_api.modules.daily_brief.service import generate_daily_briefs, render_daily_data
from jenifer_api.services.prompts import BRIEF_GENERATOR_SYSTEM_PROMPT
from tests.conftest import FIXED_NOW, GENERATED_BRIEF, OTHER_ORG_ID, SAMPLE_EXECUTIVE_ID, SAMPLE_ORG_ID


async def _insights(session_factory) -> list[AIInsight]:
    async with session_factory() as session:
        return list((await session.execute(select(AIInsight))).scalars().all())


class TestDailyBriefJob:
    @pytest.mark.asyncio
    async def test_one_insight_per_active_executive(
        self, session_factory, db: AsyncSession, sample_executive, generator
    ):
        db.add_all([
            ExecutiveProfile(org_id=SAMPLE_ORG_ID, full_name="Retired Exec", is_active=False),
            Meeting(
                org_id=SAMPLE_ORG_ID,
                executive_id=SAMPLE_EXECUTIVE_ID,
                title="Board prep",
                start_time=datetime(2026, 10, 17, 14, 0, tzinfo=timezone.utc),
                end_time=datetime(2026, 10, 17, 15, 0, tzinfo=timezone.utc),
            ),
            Task(org_id=SAMPLE_ORG_ID, executive_id=SAMPLE_EXECUTIVE_ID, title="Sign NDA", priority="high"),
        ])
        await db.commit()

        summary = await generate_daily_briefs(session_factory, generator=generator, now=FIXED_NOW)

        assert summary == {"orgs_processed": 1, "briefs_generated": 1, "failed": 0}
        insights = await _insights(session_factory)
        assert len(insights) == 1
        insight = insights[0]
        assert insight.executive_id == SAMPLE_EXECUTIVE_ID
        assert insight.insight_type == "daily_brief"
        assert insight.priority == "medium"
        assert insight.description == GENERATED_BRIEF
        assert insight.confidence_score == 1.0
        assert insight.title == "Daily Briefing - Oct 17"
        assert insight.reasoning == "Auto-generated daily brief with 1 meetings, 1 tasks, 0 approvals"
        # End of the local New York day, stored as UTC
        assert insight.valid_until.replace(tzinfo=None) == datetime(2026, 10, 18, 3, 59, 59, 999999)

        kwargs = generator.generate.await_args.kwargs
        assert kwargs["system"] == BRIEF_GENERATOR_SYSTEM_PROMPT
        assert kwargs["prompt"].startswith("Generate a comprehensive daily briefing for Dana Whitfield:")
        assert "Board prep" in kwargs["prompt"]
        assert "Sign NDA" in kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_inactive_orgs_are_skipped(self, session_factory, db: AsyncSession, sample_executive, generator):
        db.add_all([
            Organization(id=OTHER_ORG_ID, name="Dormant", slug="dormant", is_active=False),
            ExecutiveProfile(org_id=OTHER_ORG_ID, full_name="Dormant Exec"),
        ])
        await db.commit()

        summary = await generate_daily_briefs(session_factory, generator=generator, now=FIXED_NOW)

        assert summary["orgs_processed"] == 1
        assert summary["briefs_generated"] == 1

    @pytest.mark.asyncio
    async def test_failure_for_one_executive_does_not_stop_the_run(
        self, session_factory, db: AsyncSession, sample_executive, generator
    ):
        db.add(ExecutiveProfile(org_id=SAMPLE_ORG_ID, full_name="Avery Stone", timezone="Europe/London"))
        await db.commit()
        generator.generate.side_effect = [GenerationError("gateway down"), "Second brief"]

        summary = await generate_daily_briefs(session_factory, generator=generator, now=FIXED_NOW)

        assert summary == {"orgs_processed": 1, "briefs_generated": 1, "failed": 1}
        insights = await _insights(session_factory)
        assert [i.description for i in insights] == ["Second brief"]

    @pytest.mark.asyncio
    async def test_org_that_cannot_list_executives_is_skipped(
        self, session_factory, db: AsyncSession, sample_executive, other_org, generator, monkeypatch
    ):
        db.add(ExecutiveProfile(org_id=OTHER_ORG_ID, full_name="Other Exec"))
        await db.commit()
        list_executives = daily_brief_service._active_executives

        async def _flaky_executives(factory, org):
            if org.id == OTHER_ORG_ID:
                raise RuntimeError("statement timeout")
            return await list_executives(factory, org)

        monkeypatch.setattr(daily_brief_service, "_active_executives", _flaky_executives)

        summary = await generate_daily_briefs(session_factory, generator=generator, now=FIXED_NOW)

        assert summary == {"orgs_processed": 2, "briefs_generated": 1, "failed": 0}
        insights = await _insights(session_factory)
        assert [i.executive_id for i in insights] == [SAMPLE_EXECUTIVE_ID]

    @pytest.mark.asyncio
    async def test_no_organizations(self, session_factory, generator):
        summary = await generate_daily_briefs(session_factory, generator=generator, now=FIXED_NOW)

        assert summary == {"orgs_processed": 0, "briefs_generated": 0, "failed": 0}
        generator.generate.assert_not_awaited()


class TestRenderDailyData:
    def test_header_and_empty_schedule(self):
        temporal = TemporalContext(current_time=FIXED_NOW, timezone="America/New_York")

        text = render_daily_data("Dana Whitfield", "America/New_York", temporal)

        assert text.splitlines()[:3] == [
            "Executive: Dana Whitfield",
            "Date: Saturday, October 17, 2026",
            "Timezone: America/New_York",
        ]
        assert "- No meetings scheduled today." in text
        assert "Pending Tasks" not in text

    def test_date_is_local_to_executive(self):
        temporal = TemporalContext(current_time=datetime(2026, 10, 17, 2, 0, tzinfo=timezone.utc), timezone="UTC")

        text = render_daily_data("Dana Whitfield", "America/New_York", temporal)

        # 02:00 UTC is still the previous evening in New York
        assert "Date: Friday, October 16, 2026" in text
