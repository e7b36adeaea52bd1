"""AI Context API router."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jenifer_api.auth.dependencies import get_current_user
from jenifer_api.core.database import get_session_factory
from jenifer_api.modules.ai_context.formatter import format_context_for_prompt
from jenifer_api.modules.ai_context.schemas import ContextBuilderOptions, ContextResponse
from jenifer_api.modules.ai_context.service import build_context
from jenifer_api.schemas.auth import CurrentUser

router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/context", response_model=ContextResponse)
async def get_context(
    executive_id: uuid.UUID | None = Query(None),
    include_patterns: bool = Query(True),
    include_temporal: bool = Query(True),
    current_user: CurrentUser = Depends(get_current_user),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Current context snapshot for the caller, plus the prompt text it renders to."""
    snapshot = await build_context(
        session_factory,
        ContextBuilderOptions(
            user_id=current_user.user_id,
            org_id=current_user.org_id,
            executive_id=executive_id,
            timezone=current_user.timezone,
            include_patterns=include_patterns,
            include_temporal=include_temporal,
        ),
    )
    return ContextResponse(context=snapshot, prompt=format_context_for_prompt(snapshot))
