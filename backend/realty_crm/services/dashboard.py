"""
Dashboard Service
Role-scoped aggregates: each role gets its own slice and nothing more.
"""
import logging
from calendar import month_abbr
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.core.exceptions import AuthorizationError
from realty_crm.database import utcnow
from realty_crm.models.agent import Agent
from realty_crm.models.customer import Customer
from realty_crm.models.property import Property
from realty_crm.models.task import Task, TaskStatus
from realty_crm.models.user import User, UserRole

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5
MONTHS_IN_SERIES = 6


def _month_window(now: datetime, months: int) -> List[Tuple[int, int]]:
    """(year, month) pairs for the last ``months`` months, oldest first"""
    pairs = []
    year, month = now.year, now.month
    for _ in range(months):
        pairs.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(pairs))


class DashboardService:
    """Service computing dashboard statistics"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, model, *conditions) -> int:
        count = await self.db.scalar(select(func.count(model.id)).where(*conditions))
        return count or 0

    async def _group_count(self, column, *conditions) -> List[Dict[str, Any]]:
        """Count rows per value of ``column`` as chart points"""
        result = await self.db.execute(
            select(column, func.count()).where(*conditions).group_by(column)
        )
        return [
            {"name": getattr(value, "value", value), "value": count}
            for value, count in result.all()
            if value is not None
        ]

    async def _recent(self, model, limit: int = RECENT_LIMIT) -> list:
        result = await self.db.execute(
            select(model).order_by(model.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def monthly_stats(self, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """
        New properties and customers per calendar month.

        Args:
            now: Reference instant (defaults to the current UTC time)

        Returns:
            Six entries, oldest month first, zero-filled
        """
        window = _month_window(now or utcnow(), MONTHS_IN_SERIES)
        start = datetime(window[0][0], window[0][1], 1)

        buckets = {key: {"properties": 0, "customers": 0} for key in window}
        for model, label in ((Property, "properties"), (Customer, "customers")):
            result = await self.db.execute(
                select(model.created_at).where(model.created_at >= start)
            )
            for created_at in result.scalars().all():
                key = (created_at.year, created_at.month)
                if key in buckets:
                    buckets[key][label] += 1

        return [
            {"month": month_abbr[month], "year": year, **buckets[(year, month)]}
            for year, month in window
        ]

    async def super_admin_stats(self) -> Dict[str, Any]:
        return {
            "role": UserRole.SUPER_ADMIN.value,
            "overview": {
                "total_properties": await self._count(Property),
                "published_properties": await self._count(
                    Property, Property.published_to_frontend.is_(True)
                ),
                "total_customers": await self._count(Customer),
                "total_tasks": await self._count(Task),
                "total_agents": await self._count(User, User.role == UserRole.AGENT),
                "total_admins": await self._count(User, User.role == UserRole.ADMIN),
                "total_users": await self._count(User, User.role == UserRole.USER),
            },
            "recent_properties": await self._recent(Property),
            "recent_customers": await self._recent(Customer),
            "charts": {
                "tasks_by_status": await self._group_count(Task.status),
                "properties_by_type": await self._group_count(Property.property_type),
                "properties_by_status": await self._group_count(Property.status),
                "customers_by_status": await self._group_count(Customer.status),
                "monthly_stats": await self.monthly_stats(),
            },
        }

    async def admin_stats(self, admin_id: UUID) -> Dict[str, Any]:
        return {
            "role": UserRole.ADMIN.value,
            "overview": {
                "total_properties": await self._count(Property),
                "my_properties": await self._count(Property, Property.uploaded_by_id == admin_id),
                "total_customers": await self._count(Customer),
                "total_tasks": await self._count(Task),
                "my_tasks": await self._count(Task, Task.created_by_id == admin_id),
                "total_agents": await self._count(User, User.role == UserRole.AGENT),
            },
            "recent_properties": await self._recent(Property),
            "recent_customers": await self._recent(Customer),
            "charts": {
                "tasks_by_status": await self._group_count(Task.status),
                "properties_by_type": await self._group_count(Property.property_type),
            },
        }

    async def agent_stats(self, agent_user_id: UUID) -> Dict[str, Any]:
        """
        Statistics for one agent.

        Assigned counts come from the Agent profile's membership lists; a
        user without a profile gets zeros there. Task figures cover tasks the
        agent created or is assigned to.
        """
        result = await self.db.execute(select(Agent).where(Agent.user_id == agent_user_id))
        agent = result.scalar_one_or_none()

        own = or_(Task.created_by_id == agent_user_id, Task.assigned_to_id == agent_user_id)
        recent = await self.db.execute(
            select(Task).where(own).order_by(Task.created_at.desc()).limit(RECENT_LIMIT)
        )

        properties = list(agent.assigned_properties) if agent else []
        customers = list(agent.assigned_customers) if agent else []

        return {
            "role": UserRole.AGENT.value,
            "has_profile": agent is not None,
            "overview": {
                "assigned_properties": len(properties),
                "assigned_customers": len(customers),
                "total_tasks": await self._count(Task, own),
                "completed_tasks": await self._count(Task, own, Task.status == TaskStatus.COMPLETED),
                "pending_tasks": await self._count(Task, own, Task.status != TaskStatus.COMPLETED),
                "total_sales": float(agent.total_sales or 0) if agent else 0.0,
                "total_commission": float(agent.total_commission or 0) if agent else 0.0,
            },
            "assigned_properties": properties,
            "assigned_customers": customers,
            "recent_tasks": list(recent.scalars().all()),
            "charts": {
                "tasks_by_priority": await self._group_count(Task.priority, own),
            },
        }

    async def stats_for(self, user: User) -> Dict[str, Any]:
        """
        Pick the slice matching the caller's role.

        Raises:
            AuthorizationError: For roles without a dashboard
        """
        if user.role == UserRole.SUPER_ADMIN:
            return await self.super_admin_stats()
        if user.role == UserRole.ADMIN:
            return await self.admin_stats(user.id)
        if user.role == UserRole.AGENT:
            return await self.agent_stats(user.id)
        raise AuthorizationError("Not authorized to view the dashboard")
