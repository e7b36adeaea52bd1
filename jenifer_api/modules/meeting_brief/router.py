"""Meeting Brief API router."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from jenifer_api.auth.dependencies import get_current_user
from jenifer_api.core.database import get_db
from jenifer_api.core.errors import ErrorResponse, GenerationError, NotFoundError
from jenifer_api.modules.meeting_brief import service
from jenifer_api.modules.meeting_brief.schemas import BriefResult, StoredBriefResponse
from jenifer_api.schemas.auth import CurrentUser
from jenifer_api.services.ai_gateway import TextGenerator, get_text_generator

logger = structlog.get_logger()

router = APIRouter(prefix="/ai/meetings", tags=["ai"])


@router.post(
    "/{meeting_id}/brief",
    response_model=BriefResult,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def generate_meeting_brief(
    meeting_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    generator: TextGenerator = Depends(get_text_generator),
):
    """Generate (or regenerate) the AI brief for a meeting and store it on the meeting."""
    try:
        result = await service.generate_brief(
            db, meeting_id=meeting_id, org_id=current_user.org_id, generator=generator
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Meeting not found")
    except GenerationError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Brief generation failed, please try again",
        )
    await db.commit()
    logger.info("meeting_brief.stored", meeting_id=str(meeting_id), user_id=str(current_user.user_id))
    return result


@router.get(
    "/{meeting_id}/brief",
    response_model=StoredBriefResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_meeting_brief(
    meeting_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    meeting = await service.get_stored_brief(db, meeting_id=meeting_id, org_id=current_user.org_id)
    if not meeting:
        raise HTTPException(status_code=404, detail="Brief not found")
    return StoredBriefResponse(
        meeting_id=meeting.id,
        meeting_title=meeting.title,
        brief=meeting.ai_brief,
        ai_brief_generated=meeting.ai_brief_generated,
    )
