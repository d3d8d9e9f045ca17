"""Services package"""

from realty_crm.services.events import DomainEvent, NotificationDispatcher
from realty_crm.services.notifications import NotificationService
from realty_crm.services.assignment import AssignmentService
from realty_crm.services.dashboard import DashboardService

__all__ = [
    "DomainEvent",
    "NotificationDispatcher",
    "NotificationService",
    "AssignmentService",
    "DashboardService",
]
