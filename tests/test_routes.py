"""HTTP tests for the /v1/ai routes and the health check."""

import uuid
from datetime import datetime, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from jenifer_api.core.config import settings
from jenifer_api.core.database import engine
from jenifer_api.core.errors import GenerationError
from jenifer_api.models.meetings import Meeting
from tests.conftest import GENERATED_BRIEF, SAMPLE_ORG_ID, SAMPLE_USER_ID

AUTH = {"X-User-ID": str(SAMPLE_USER_ID)}


@pytest.fixture
async def sample_meeting(db: AsyncSession, sample_org) -> Meeting:
    meeting = Meeting(
        org_id=SAMPLE_ORG_ID,
        title="Investor update",
        start_time=datetime(2026, 10, 20, 14, 0, tzinfo=timezone.utc),
        end_time=datetime(2026, 10, 20, 15, 0, tzinfo=timezone.utc),
        attendees=[{"email": "lp@fund.com", "name": "LP"}],
    )
    db.add(meeting)
    await db.commit()
    return meeting


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        resp = await client.get("/health")

        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"
        assert resp.headers["X-API-Version"] == "v1"

    def test_pool_sized_from_settings(self):
        assert engine.pool.size() == settings.DATABASE_POOL_SIZE
        # Five concurrent context builds at eight sessions each, plus their request sessions
        assert settings.DATABASE_POOL_SIZE + settings.DATABASE_MAX_OVERFLOW >= 5 * (8 + 1)


class TestIdentity:
    @pytest.mark.asyncio
    async def test_missing_user_header_is_unauthorized(self, client: AsyncClient):
        resp = await client.get("/v1/ai/context")

        assert resp.status_code == 401
        assert resp.json()["error"] == "http_401"

    @pytest.mark.asyncio
    async def test_malformed_user_header_is_unauthorized(self, client: AsyncClient):
        resp = await client.get("/v1/ai/context", headers={"X-User-ID": "not-a-uuid"})

        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_user_is_unauthorized(self, client: AsyncClient, sample_org):
        resp = await client.get("/v1/ai/context", headers={"X-User-ID": str(uuid.uuid4())})

        assert resp.status_code == 401


class TestContextRoute:
    @pytest.mark.asyncio
    async def test_returns_snapshot_and_prompt(self, client: AsyncClient, sample_user):
        resp = await client.get("/v1/ai/context", headers=AUTH)

        assert resp.status_code == 200
        body = resp.json()
        assert body["context"]["user"]["full_name"] == "Test Assistant"
        assert body["context"]["organization"]["name"] == "Test Org"
        assert body["context"]["executive"] is None
        assert body["context"]["temporal"]["timezone"] == "America/New_York"
        assert body["prompt"].startswith("Current Time:")
        assert "User: Test Assistant" in body["prompt"]

    @pytest.mark.asyncio
    async def test_exclude_patterns(self, client: AsyncClient, sample_user):
        resp = await client.get("/v1/ai/context", headers=AUTH, params={"include_patterns": "false"})

        assert resp.status_code == 200
        assert resp.json()["context"]["patterns"] is None


class TestMeetingBriefRoutes:
    @pytest.mark.asyncio
    async def test_generate_then_read(self, client: AsyncClient, sample_user, sample_meeting):
        url = f"/v1/ai/meetings/{sample_meeting.id}/brief"

        resp = await client.post(url, headers=AUTH)
        assert resp.status_code == 200
        body = resp.json()
        assert body["brief"] == GENERATED_BRIEF
        assert body["meeting_title"] == "Investor update"
        assert body["attendee_count"] == 0

        resp = await client.get(url, headers=AUTH)
        assert resp.status_code == 200
        assert resp.json()["brief"] == GENERATED_BRIEF
        assert resp.json()["ai_brief_generated"] is True

    @pytest.mark.asyncio
    async def test_unknown_meeting_is_404(self, client: AsyncClient, sample_user, generator):
        resp = await client.post(f"/v1/ai/meetings/{uuid.uuid4()}/brief", headers=AUTH)

        assert resp.status_code == 404
        generator.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_generation_failure_is_502(self, client: AsyncClient, sample_user, sample_meeting, generator):
        generator.generate.side_effect = GenerationError("gateway down")

        resp = await client.post(f"/v1/ai/meetings/{sample_meeting.id}/brief", headers=AUTH)

        assert resp.status_code == 502

        resp = await client.get(f"/v1/ai/meetings/{sample_meeting.id}/brief", headers=AUTH)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_no_brief_yet_is_404(self, client: AsyncClient, sample_user, sample_meeting):
        resp = await client.get(f"/v1/ai/meetings/{sample_meeting.id}/brief", headers=AUTH)

        assert resp.status_code == 404
