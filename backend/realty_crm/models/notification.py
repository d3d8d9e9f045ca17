"""
Notification model
"""
import uuid
import enum
from datetime import datetime, timedelta
from sqlalchemy import (
    Boolean, Column, String, Text, DateTime, Enum, ForeignKey, Index, Uuid
)

from realty_crm.core.config import settings
from realty_crm.database import Base, JSONType, utcnow


class NotificationType(str, enum.Enum):
    """Domain event kinds that produce notifications"""
    TASK_ASSIGNED = "task_assigned"
    TASK_COMPLETED = "task_completed"
    TASK_OVERDUE = "task_overdue"
    PROPERTY_ADDED = "property_added"
    PROPERTY_ASSIGNED = "property_assigned"
    PROPERTY_SOLD = "property_sold"
    CUSTOMER_ASSIGNED = "customer_assigned"
    CUSTOMER_ADDED = "customer_added"
    CUSTOMER_MESSAGE = "customer_message"
    AGENT_ADDED = "agent_added"
    HIGH_VALUE_LEAD = "high_value_lead"
    DEAL_CLOSED = "deal_closed"
    URGENT_TASK = "urgent_task"


class NotificationPriority(str, enum.Enum):
    """Notification priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class EntityType(str, enum.Enum):
    """Kind of record a notification points at"""
    TASK = "Task"
    PROPERTY = "Property"
    CUSTOMER = "Customer"
    USER = "User"
    AGENT = "Agent"


class Notification(Base):
    """Notification model"""

    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipient_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Enum(NotificationType), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(Enum(NotificationPriority), nullable=False, default=NotificationPriority.MEDIUM)
    is_read = Column(Boolean, default=False, nullable=False)

    # Related entity
    entity_type = Column(Enum(EntityType), nullable=True)
    entity_id = Column(Uuid, nullable=True)

    action_url = Column(String(500), nullable=True)
    # "metadata" is reserved on declarative classes
    extra = Column("metadata", JSONType, nullable=False, default=dict)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('idx_notification_recipient_read', 'recipient_id', 'is_read', 'created_at'),
    )

    @staticmethod
    def expiry_cutoff(now: datetime = None) -> datetime:
        """Notifications created before this instant have expired"""
        return (now or utcnow()) - timedelta(days=settings.NOTIFICATION_TTL_DAYS)

    def __repr__(self) -> str:
        return f"<Notification {self.type.value if self.type else None} -> {self.recipient_id}>"
