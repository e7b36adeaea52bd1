"""Tests for tenant scoping helpers and TenantMiddleware."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jenifer_api.middleware.tenant import TenantMiddleware, scope_filter, tenant_filter
from jenifer_api.models.core import Organization
from jenifer_api.models.tasks import Task
from tests.conftest import OTHER_ORG_ID, SAMPLE_EXECUTIVE_ID, SAMPLE_ORG_ID


class TestTenantFilter:
    def test_adds_org_predicate(self):
        stmt = tenant_filter(select(Task), SAMPLE_ORG_ID, Task)

        assert "tasks.org_id = :org_id_1" in str(stmt)

    def test_models_without_org_are_untouched(self):
        stmt = tenant_filter(select(Organization), SAMPLE_ORG_ID, Organization)

        assert "WHERE" not in str(stmt)

    def test_scope_filter_without_executive(self):
        sql = str(scope_filter(select(Task), SAMPLE_ORG_ID, Task)).split("WHERE", 1)[1]

        assert "tasks.org_id = :org_id_1" in sql
        assert "tasks.executive_id" not in sql
        assert "tasks.is_deleted IS" in sql

    def test_scope_filter_with_executive(self):
        sql = str(scope_filter(select(Task), SAMPLE_ORG_ID, Task, SAMPLE_EXECUTIVE_ID))

        assert "tasks.executive_id = :executive_id_1" in sql

    @pytest.mark.asyncio
    async def test_rows_are_isolated(self, db: AsyncSession, sample_org, other_org):
        db.add_all([
            Task(org_id=SAMPLE_ORG_ID, title="ours"),
            Task(org_id=OTHER_ORG_ID, title="theirs"),
            Task(org_id=SAMPLE_ORG_ID, title="gone", is_deleted=True),
        ])
        await db.commit()

        rows = (await db.execute(scope_filter(select(Task), SAMPLE_ORG_ID, Task))).scalars().all()

        assert [t.title for t in rows] == ["ours"]


class TestTenantMiddleware:
    @pytest.mark.asyncio
    async def test_initializes_request_state(self):
        seen: dict = {}

        async def app(scope, receive, send):
            seen.update(scope["state"])

        await TenantMiddleware(app)({"type": "http"}, None, None)

        assert seen == {"org_id": None, "user_id": None}

    @pytest.mark.asyncio
    async def test_ignores_non_http_scopes(self):
        seen: dict = {}

        async def app(scope, receive, send):
            seen["state"] = scope.get("state")

        await TenantMiddleware(app)({"type": "lifespan"}, None, None)

        assert seen["state"] is None
