"""Models package initialization"""

from realty_crm.models.user import User, UserRole, AuthProvider, ADMIN_ROLES
from realty_crm.models.property import Property, PropertyType, PropertyStatus, ListingState
from realty_crm.models.customer import (
    Customer,
    CustomerNote,
    CustomerStatus,
    CustomerPriority,
    LeadSource,
)
from realty_crm.models.agent import Agent, AgentAvailability, Specialization
from realty_crm.models.task import Task, Subtask, TaskComment, TaskStatus, TaskPriority, TaskCategory
from realty_crm.models.notification import (
    Notification,
    NotificationType,
    NotificationPriority,
    EntityType,
)

__all__ = [
    "User",
    "UserRole",
    "AuthProvider",
    "ADMIN_ROLES",
    "Property",
    "PropertyType",
    "PropertyStatus",
    "ListingState",
    "Customer",
    "CustomerNote",
    "CustomerStatus",
    "CustomerPriority",
    "LeadSource",
    "Agent",
    "AgentAvailability",
    "Specialization",
    "Task",
    "Subtask",
    "TaskComment",
    "TaskStatus",
    "TaskPriority",
    "TaskCategory",
    "Notification",
    "NotificationType",
    "NotificationPriority",
    "EntityType",
]
