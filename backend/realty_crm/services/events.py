"""
In-process domain event bus

Routes commit their own mutation first and then hand the resulting events to
the dispatcher. Each event is turned into notifications in its own session;
a failure there is logged and never reaches the caller.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from realty_crm.models.notification import NotificationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent:
    """Something happened to an entity that people may need to hear about"""
    type: NotificationType
    entity_id: UUID
    actor_id: Optional[UUID] = None
    data: Dict[str, Any] = field(default_factory=dict)


class NotificationDispatcher:
    """Fire-and-forget delivery of domain events to the notification service"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def emit(self, *events: DomainEvent) -> int:
        """
        Deliver events one by one.

        Args:
            events: Events produced by a committed mutation

        Returns:
            Number of notifications created across all events
        """
        # services.notifications imports this module
        from realty_crm.services.notifications import NotificationService

        created = 0
        for event in events:
            try:
                async with self.session_factory() as session:
                    service = NotificationService(session)
                    created += await service.handle(event)
            except Exception:
                logger.exception(
                    f"Notification dispatch failed for {event.type.value} on {event.entity_id}"
                )
        return created

