"""
Notification Service
Persists notifications, applies the recipient rules for each domain event
and serves the per-user inbox.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.core.config import settings
from realty_crm.core.exceptions import NotFoundError
from realty_crm.database import utcnow
from realty_crm.models.agent import Agent
from realty_crm.models.customer import Customer
from realty_crm.models.notification import (
    EntityType,
    Notification,
    NotificationPriority,
    NotificationType,
)
from realty_crm.models.property import Property
from realty_crm.models.task import Task, TaskPriority
from realty_crm.models.user import ADMIN_ROLES, User, UserRole
from realty_crm.services.events import DomainEvent

logger = logging.getLogger(__name__)


def format_amount(amount) -> str:
    """Render money with the configured currency symbol: ৳1,250,000"""
    return f"{settings.CURRENCY_SYMBOL}{float(amount or 0):,.0f}"


def _json_safe(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, UUID):
        return str(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if hasattr(value, "value"):
        return value.value
    return value


def is_high_value(customer: Customer) -> bool:
    return float(customer.budget_max or 0) >= settings.HIGH_VALUE_LEAD_THRESHOLD


class NotificationService:
    """
    Service for creating and reading notifications.

    Rule methods (``notify_*``) return the number of rows created; ``handle``
    routes a DomainEvent to the matching rule and commits.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _build(
        self,
        recipient_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        entity: Optional[Tuple[EntityType, UUID]] = None,
        action_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        entity_type, entity_id = entity if entity else (None, None)
        return Notification(
            recipient_id=recipient_id,
            type=type,
            title=title,
            message=message,
            priority=priority,
            entity_type=entity_type,
            entity_id=entity_id,
            action_url=action_url,
            extra=_json_safe(metadata or {}),
        )

    async def create(self, recipient_id: UUID, **data) -> Notification:
        """Create a single notification (flushed, not committed)"""
        notification = self._build(recipient_id, **data)
        self.db.add(notification)
        await self.db.flush()
        return notification

    async def create_bulk(self, recipient_ids: Iterable[UUID], **data) -> List[Notification]:
        """Create the same notification for several recipients, once each"""
        seen = set()
        notifications = []
        for recipient_id in recipient_ids:
            if recipient_id is None or recipient_id in seen:
                continue
            seen.add(recipient_id)
            notifications.append(self._build(recipient_id, **data))
        self.db.add_all(notifications)
        await self.db.flush()
        return notifications

    async def _admin_ids(self, exclude: Optional[UUID] = None) -> List[UUID]:
        """Active admins and super admins"""
        query = select(User.id).where(User.role.in_(ADMIN_ROLES), User.is_active.is_(True))
        if exclude is not None:
            query = query.where(User.id != exclude)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _super_admin_ids(self) -> List[UUID]:
        result = await self.db.execute(
            select(User.id).where(User.role == UserRole.SUPER_ADMIN, User.is_active.is_(True))
        )
        return list(result.scalars().all())

    async def _get(self, model, entity_id: UUID):
        result = await self.db.execute(select(model).where(model.id == entity_id))
        obj = result.scalar_one_or_none()
        if not obj:
            raise NotFoundError(f"{model.__name__} {entity_id} not found")
        return obj

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    async def notify_task_assigned(self, task: Task, actor_id: Optional[UUID] = None) -> int:
        if task.assigned_to_id == actor_id:
            return 0
        await self.create(
            task.assigned_to_id,
            type=NotificationType.TASK_ASSIGNED,
            title="New Task Assigned",
            message=f'You have been assigned a new task: "{task.title}"',
            priority=(
                NotificationPriority.URGENT
                if task.priority == TaskPriority.URGENT
                else NotificationPriority.MEDIUM
            ),
            entity=(EntityType.TASK, task.id),
            action_url=f"/dashboard/tasks/{task.id}",
            metadata={
                "task_title": task.title,
                "task_priority": task.priority,
                "due_date": task.due_date,
            },
        )
        return 1

    async def notify_task_completed(self, task: Task) -> int:
        if task.created_by_id == task.assigned_to_id:
            return 0
        await self.create(
            task.created_by_id,
            type=NotificationType.TASK_COMPLETED,
            title="Task Completed",
            message=f'Task "{task.title}" has been completed',
            entity=(EntityType.TASK, task.id),
            action_url=f"/dashboard/tasks/{task.id}",
            metadata={"task_title": task.title, "completed_by": task.assigned_to_id},
        )
        return 1

    async def notify_urgent_task(self, task: Task) -> int:
        entity = (EntityType.TASK, task.id)
        url = f"/dashboard/tasks/{task.id}"

        await self.create(
            task.assigned_to_id,
            type=NotificationType.URGENT_TASK,
            title="🚨 Urgent Task",
            message=f'URGENT: "{task.title}" requires immediate attention',
            priority=NotificationPriority.URGENT,
            entity=entity,
            action_url=url,
            metadata={"task_title": task.title, "due_date": task.due_date},
        )
        admins = await self.create_bulk(
            await self._admin_ids(),
            type=NotificationType.URGENT_TASK,
            title="🚨 Urgent Task Created",
            message=f'An urgent task has been created: "{task.title}"',
            priority=NotificationPriority.URGENT,
            entity=entity,
            action_url=url,
            metadata={
                "task_title": task.title,
                "created_by": task.created_by_id,
                "assigned_to": task.assigned_to_id,
            },
        )
        return 1 + len(admins)

    async def notify_property_added(self, prop: Property) -> int:
        created = await self.create_bulk(
            await self._admin_ids(),
            type=NotificationType.PROPERTY_ADDED,
            title="New Property Listed",
            message=f"New property added: {prop.name} - {format_amount(prop.price)}",
            entity=(EntityType.PROPERTY, prop.id),
            action_url=f"/dashboard/properties/{prop.id}",
            metadata={"property_name": prop.name, "price": prop.price, "location": prop.location},
        )
        return len(created)

    async def notify_property_sold(self, prop: Property) -> int:
        created = await self.create_bulk(
            await self._admin_ids(),
            type=NotificationType.PROPERTY_SOLD,
            title="🎉 Property Sold",
            message=f"Property sold: {prop.name} - {format_amount(prop.price)}",
            priority=NotificationPriority.HIGH,
            entity=(EntityType.PROPERTY, prop.id),
            action_url=f"/dashboard/properties/{prop.id}",
            metadata={"property_name": prop.name, "price": prop.price, "sold_date": utcnow()},
        )
        return len(created)

    async def notify_property_assigned(self, prop: Property) -> int:
        if not prop.assigned_agent_id:
            return 0
        await self.create(
            prop.assigned_agent_id,
            type=NotificationType.PROPERTY_ASSIGNED,
            title="New Property Assigned",
            message=f"You have been assigned a new property: {prop.name} - {format_amount(prop.price)}",
            entity=(EntityType.PROPERTY, prop.id),
            action_url=f"/dashboard/properties/{prop.id}",
            metadata={
                "property_name": prop.name,
                "price": prop.price,
                "location": prop.location,
                "type": prop.property_type,
            },
        )
        return 1

    async def notify_customer_assigned(self, customer: Customer) -> int:
        if not customer.assigned_agent_id:
            return 0
        await self.create(
            customer.assigned_agent_id,
            type=NotificationType.CUSTOMER_ASSIGNED,
            title="New Customer Assigned",
            message=f"You have been assigned a new customer: {customer.name or customer.phone}",
            entity=(EntityType.CUSTOMER, customer.id),
            action_url=f"/dashboard/customers/{customer.id}",
            metadata={
                "customer_name": customer.name,
                "lead_status": customer.status,
                "budget": customer.budget,
            },
        )
        return 1

    async def notify_customer_added(self, customer: Customer, added_by_id: Optional[UUID] = None) -> int:
        message = f"New customer added by agent: {customer.name or customer.phone}"
        if customer.budget_max:
            message += f" (Budget: {format_amount(customer.budget_max)})"
        created = await self.create_bulk(
            await self._admin_ids(),
            type=NotificationType.CUSTOMER_ADDED,
            title="New Customer Added",
            message=message,
            entity=(EntityType.CUSTOMER, customer.id),
            action_url=f"/dashboard/customers/{customer.id}",
            metadata={
                "customer_name": customer.name,
                "added_by": added_by_id or customer.added_by_id,
                "lead_status": customer.status,
                "budget": customer.budget,
            },
        )
        return len(created)

    async def notify_high_value_lead(self, customer: Customer) -> int:
        if not is_high_value(customer):
            return 0
        agent_id = customer.assigned_agent_id
        message = (
            f"New high-value lead: {customer.name or customer.phone} "
            f"(Budget: {format_amount(customer.budget_max)})"
        )
        data = dict(
            type=NotificationType.HIGH_VALUE_LEAD,
            title="💎 High Value Lead",
            message=message,
            priority=NotificationPriority.HIGH,
            entity=(EntityType.CUSTOMER, customer.id),
            action_url=f"/dashboard/customers/{customer.id}",
        )
        created = 0
        if agent_id:
            await self.create(
                agent_id,
                metadata={
                    "customer_name": customer.name,
                    "budget": customer.budget,
                    "lead_status": customer.status,
                },
                **data,
            )
            created += 1
        admins = await self.create_bulk(
            await self._admin_ids(),
            metadata={
                "customer_name": customer.name,
                "budget": customer.budget,
                "assigned_agent": agent_id,
            },
            **data,
        )
        return created + len(admins)

    async def notify_deal_closed(self, customer: Customer) -> int:
        agent_id = customer.assigned_agent_id
        deal_amount = customer.budget_max
        name = customer.name or customer.phone
        entity = (EntityType.CUSTOMER, customer.id)
        url = f"/dashboard/customers/{customer.id}"
        closed_date = utcnow()

        created = 0
        if agent_id:
            await self.create(
                agent_id,
                type=NotificationType.DEAL_CLOSED,
                title="🎉 Deal Closed!",
                message=f"Congratulations! Deal closed with {name} - {format_amount(deal_amount)}",
                priority=NotificationPriority.HIGH,
                entity=entity,
                action_url=url,
                metadata={"customer_name": customer.name, "deal_amount": deal_amount, "closed_date": closed_date},
            )
            created += 1
        admins = await self.create_bulk(
            await self._admin_ids(),
            type=NotificationType.DEAL_CLOSED,
            title="🎉 Deal Closed",
            message=f"Deal closed: {name} - {format_amount(deal_amount)}",
            priority=NotificationPriority.HIGH,
            entity=entity,
            action_url=url,
            metadata={"customer_name": customer.name, "deal_amount": deal_amount, "agent_id": agent_id},
        )
        return created + len(admins)

    async def notify_customer_message(
        self,
        customer: Customer,
        text: str,
        sender_id: Optional[UUID],
        sender_name: str,
    ) -> int:
        recipients = []
        if customer.assigned_agent_id and customer.assigned_agent_id != sender_id:
            recipients.append(customer.assigned_agent_id)
        recipients.extend(await self._admin_ids(exclude=sender_id))

        preview = text[:50] + ("..." if len(text) > 50 else "")
        created = await self.create_bulk(
            recipients,
            type=NotificationType.CUSTOMER_MESSAGE,
            title="New Communication Log Message",
            message=f'{sender_name} added a message for {customer.name or customer.phone}: "{preview}"',
            entity=(EntityType.CUSTOMER, customer.id),
            action_url=f"/dashboard/customers/{customer.id}",
            metadata={
                "customer_name": customer.name,
                "sender_name": sender_name,
                "message_preview": text[:100],
            },
        )
        return len(created)

    async def notify_agent_added(self, agent: Agent) -> int:
        name = agent.user.name if agent.user else "user"
        created = await self.create_bulk(
            await self._super_admin_ids(),
            type=NotificationType.AGENT_ADDED,
            title="New Agent Added",
            message=f"New agent profile created for {name}",
            entity=(EntityType.AGENT, agent.id),
            action_url="/dashboard/agents",
            metadata={
                "agent_id": agent.id,
                "user_id": agent.user_id,
                "specialization": agent.specialization,
            },
        )
        return len(created)

    async def handle(self, event: DomainEvent) -> int:
        """
        Apply the rule for one domain event and commit.

        Args:
            event: The event to deliver

        Returns:
            Number of notifications created

        Raises:
            NotFoundError: If the event's entity no longer exists
        """
        kind = event.type
        if kind in (
            NotificationType.TASK_ASSIGNED,
            NotificationType.TASK_COMPLETED,
            NotificationType.URGENT_TASK,
        ):
            task = await self._get(Task, event.entity_id)
            if kind == NotificationType.TASK_ASSIGNED:
                created = await self.notify_task_assigned(task, event.actor_id)
            elif kind == NotificationType.TASK_COMPLETED:
                created = await self.notify_task_completed(task)
            else:
                created = await self.notify_urgent_task(task)
        elif kind in (
            NotificationType.PROPERTY_ADDED,
            NotificationType.PROPERTY_SOLD,
            NotificationType.PROPERTY_ASSIGNED,
        ):
            prop = await self._get(Property, event.entity_id)
            if kind == NotificationType.PROPERTY_ADDED:
                created = await self.notify_property_added(prop)
            elif kind == NotificationType.PROPERTY_SOLD:
                created = await self.notify_property_sold(prop)
            else:
                created = await self.notify_property_assigned(prop)
        elif kind == NotificationType.AGENT_ADDED:
            created = await self.notify_agent_added(await self._get(Agent, event.entity_id))
        elif kind in (
            NotificationType.CUSTOMER_ASSIGNED,
            NotificationType.CUSTOMER_ADDED,
            NotificationType.HIGH_VALUE_LEAD,
            NotificationType.DEAL_CLOSED,
            NotificationType.CUSTOMER_MESSAGE,
        ):
            customer = await self._get(Customer, event.entity_id)
            if kind == NotificationType.CUSTOMER_ASSIGNED:
                created = await self.notify_customer_assigned(customer)
            elif kind == NotificationType.CUSTOMER_ADDED:
                created = await self.notify_customer_added(customer, event.actor_id)
            elif kind == NotificationType.HIGH_VALUE_LEAD:
                created = await self.notify_high_value_lead(customer)
            elif kind == NotificationType.DEAL_CLOSED:
                created = await self.notify_deal_closed(customer)
            else:
                created = await self.notify_customer_message(
                    customer,
                    event.data.get("text", ""),
                    event.actor_id,
                    event.data.get("sender_name", "Someone"),
                )
        else:
            logger.warning(f"No notification rule for event {kind.value}")
            return 0

        await self.db.commit()
        logger.info(f"{kind.value}: {created} notification(s) for {event.entity_id}")
        return created

    # ------------------------------------------------------------------
    # Inbox
    # ------------------------------------------------------------------

    def _inbox(self, user_id: UUID):
        """Conditions selecting a user's live (non-expired) notifications"""
        return (
            Notification.recipient_id == user_id,
            Notification.created_at >= Notification.expiry_cutoff(),
        )

    async def list_for_user(
        self,
        user_id: UUID,
        is_read: Optional[bool] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[int, List[Notification]]:
        """
        List a user's notifications, newest first.

        Returns:
            (total matching the filter, page of notifications)
        """
        conditions = list(self._inbox(user_id))
        if is_read is not None:
            conditions.append(Notification.is_read.is_(is_read))

        total = await self.db.scalar(select(func.count(Notification.id)).where(*conditions))
        result = await self.db.execute(
            select(Notification)
            .where(*conditions)
            .order_by(Notification.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return total or 0, list(result.scalars().all())

    async def unread_count(self, user_id: UUID) -> int:
        count = await self.db.scalar(
            select(func.count(Notification.id)).where(
                *self._inbox(user_id), Notification.is_read.is_(False)
            )
        )
        return count or 0

    async def _get_own(self, user_id: UUID, notification_id: UUID) -> Notification:
        result = await self.db.execute(
            select(Notification).where(Notification.id == notification_id, *self._inbox(user_id))
        )
        notification = result.scalar_one_or_none()
        if not notification:
            raise NotFoundError("Notification not found")
        return notification

    async def mark_read(self, user_id: UUID, notification_id: UUID) -> Notification:
        """unread -> read; marking a read notification again is a no-op"""
        notification = await self._get_own(user_id, notification_id)
        if not notification.is_read:
            notification.is_read = True
            await self.db.commit()
            await self.db.refresh(notification)
        return notification

    async def mark_all_read(self, user_id: UUID) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(*self._inbox(user_id), Notification.is_read.is_(False))
            .values(is_read=True, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount

    async def delete(self, user_id: UUID, notification_id: UUID) -> None:
        notification = await self._get_own(user_id, notification_id)
        await self.db.delete(notification)
        await self.db.commit()

    async def clear_read(self, user_id: UUID) -> int:
        result = await self.db.execute(
            delete(Notification)
            .where(*self._inbox(user_id), Notification.is_read.is_(True))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount

    async def purge_expired(self) -> int:
        """Delete every notification older than the TTL"""
        result = await self.db.execute(
            delete(Notification)
            .where(Notification.created_at < Notification.expiry_cutoff())
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount
