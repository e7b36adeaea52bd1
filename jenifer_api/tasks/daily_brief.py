"""Daily brief Celery task — runs every morning at DAILY_BRIEF_HOUR_UTC."""

from __future__ import annotations

import asyncio

import structlog
from celery import shared_task
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from jenifer_api.core.config import settings

logger = structlog.get_logger()


@shared_task(name="tasks.generate_daily_briefs", bind=True, max_retries=1)
def generate_daily_briefs_task(self) -> dict:
    """Generate and store the daily brief for every active executive."""
    return asyncio.run(_async_generate_daily_briefs())


async def _async_generate_daily_briefs() -> dict:
    from jenifer_api.modules.daily_brief.service import generate_daily_briefs

    # Each task run gets its own event loop, so pooled connections can't be reused
    engine = create_async_engine(settings.DATABASE_URL, poolclass=NullPool)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    logger.info("daily_brief.task_started")
    try:
        return await generate_daily_briefs(session_factory)
    finally:
        await engine.dispose()
