"""FastAPI auth dependencies: get_current_user.

Session verification happens in the upstream auth gateway, which forwards the
verified user id in the ``X-User-ID`` header. This module only resolves that
id to an active user row and its organization.
"""

import uuid

import sentry_sdk
import structlog
from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jenifer_api.core.database import get_db
from jenifer_api.models.core import User
from jenifer_api.schemas.auth import CurrentUser

logger = structlog.get_logger()


async def get_current_user(
    request: Request,
    x_user_id: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the forwarded user id to an active, non-deleted user."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    try:
        user_id = uuid.UUID(x_user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Malformed user identity",
        ) from e

    stmt = select(User).where(
        User.id == user_id,
        User.is_active.is_(True),
        User.is_deleted.is_(False),
    )
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning("user_not_found", user_id=x_user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    request.state.org_id = user.org_id
    request.state.user_id = user.id

    sentry_sdk.set_user({"id": str(user.id)})
    sentry_sdk.set_tag("org_id", str(user.org_id))

    return CurrentUser(
        user_id=user.id,
        org_id=user.org_id,
        email=user.email,
        full_name=user.full_name,
        timezone=user.timezone or "UTC",
    )
