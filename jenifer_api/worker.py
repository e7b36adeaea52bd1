"""
Celery worker for the Jenifer API.

Start worker:    celery -A jenifer_api.worker worker --loglevel=info
Start beat:      celery -A jenifer_api.worker beat --loglevel=info
Start both:      celery -A jenifer_api.worker worker --beat --loglevel=info
"""
from celery import Celery
from celery.schedules import crontab

from jenifer_api.core.config import settings
from jenifer_api.core.sentry import init_sentry

celery_app = Celery(
    "jenifer_worker",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.REDIS_URL,
    include=[
        "jenifer_api.tasks.daily_brief",
    ],
)

init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    result_expires=86400,  # 24h
)

celery_app.conf.beat_schedule = {
    "generate-daily-briefs": {
        "task": "tasks.generate_daily_briefs",
        "schedule": crontab(hour=settings.DAILY_BRIEF_HOUR_UTC, minute=0),
    },
}
