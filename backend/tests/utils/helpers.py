"""Database assertions shared by the integration tests."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select

from realty_crm.database import Database
from realty_crm.models.agent import Agent
from realty_crm.models.notification import Notification, NotificationType


async def notifications_for(
    database: Database,
    recipient_id: UUID,
    type: Optional[NotificationType] = None,
) -> List[Notification]:
    conditions = [Notification.recipient_id == recipient_id]
    if type is not None:
        conditions.append(Notification.type == type)
    async with database.session_factory() as session:
        result = await session.execute(
            select(Notification).where(*conditions).order_by(Notification.created_at)
        )
        return list(result.scalars().all())


async def count_notifications(database: Database, type: Optional[NotificationType] = None) -> int:
    conditions = [] if type is None else [Notification.type == type]
    async with database.session_factory() as session:
        return await session.scalar(select(func.count(Notification.id)).where(*conditions))


async def load(database: Database, model, entity_id: UUID):
    """Fresh copy of a row, bypassing any cached identity"""
    async with database.session_factory() as session:
        return await session.get(model, entity_id)


async def agent_profile(database: Database, user_id: UUID) -> Agent:
    async with database.session_factory() as session:
        result = await session.execute(select(Agent).where(Agent.user_id == user_id))
        return result.scalar_one()
