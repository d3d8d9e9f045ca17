"""
Celery task queue configuration
"""
from celery import Celery
from celery.schedules import crontab

from realty_crm.core.config import settings

celery_app = Celery(
    "realty_crm",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.CELERY_TIMEZONE,
    enable_utc=True,
    beat_schedule={
        "purge-expired-notifications": {
            "task": "purge_expired_notifications",
            "schedule": crontab(hour=3, minute=0),
        },
    },
)

# Auto-discover tasks
celery_app.autodiscover_tasks(["realty_crm.tasks"], related_name="notifications")
