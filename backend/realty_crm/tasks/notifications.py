"""
Notification maintenance Celery tasks
"""
import logging
import asyncio

from realty_crm.core.config import settings
from realty_crm.database import Database
from realty_crm.services.notifications import NotificationService
from realty_crm.tasks import celery_app

logger = logging.getLogger(__name__)


async def purge_expired(database: Database) -> int:
    """Delete notifications past their TTL"""
    async with database.session_factory() as session:
        deleted = await NotificationService(session).purge_expired()
    logger.info(f"Purged {deleted} notification(s) older than {settings.NOTIFICATION_TTL_DAYS} days")
    return deleted


@celery_app.task(name="purge_expired_notifications")
def purge_expired_notifications():
    """Delete expired notifications (scheduled daily by beat)"""
    async def _run():
        database = Database(settings.DATABASE_URL)
        try:
            return await purge_expired(database)
        finally:
            await database.dispose()

    return asyncio.run(_run())
