"""Multi-tenant middleware and query helpers.

The middleware initializes request.state.org_id. The actual value is set by
the get_current_user dependency. The tenant_filter() helper ensures every
record fetch is scoped to one organization.
"""

import uuid

from sqlalchemy.sql import Select
from starlette.types import ASGIApp, Receive, Scope, Send


class TenantMiddleware:
    """Pure ASGI middleware that initializes tenant state on each request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            scope.setdefault("state", {})
            scope["state"].setdefault("org_id", None)
            scope["state"].setdefault("user_id", None)
        await self.app(scope, receive, send)


def tenant_filter(stmt: Select, org_id: uuid.UUID, model: type) -> Select:
    """Append an org_id filter to a select statement.

    Usage:
        stmt = tenant_filter(select(Meeting), org_id, Meeting)
    """
    if hasattr(model, "org_id"):
        return stmt.where(model.org_id == org_id)  # type: ignore[attr-defined]
    return stmt


def scope_filter(
    stmt: Select,
    org_id: uuid.UUID,
    model: type,
    executive_id: uuid.UUID | None = None,
) -> Select:
    """tenant_filter() plus the optional executive scope and soft-delete exclusion.

    A missing executive_id drops the executive predicate entirely.
    """
    stmt = tenant_filter(stmt, org_id, model)
    if executive_id is not None and hasattr(model, "executive_id"):
        stmt = stmt.where(model.executive_id == executive_id)  # type: ignore[attr-defined]
    if hasattr(model, "is_deleted"):
        stmt = stmt.where(model.is_deleted.is_(False))  # type: ignore[attr-defined]
    return stmt
