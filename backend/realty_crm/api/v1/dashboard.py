"""
Dashboard API endpoints
"""
from typing import Union

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.api.deps import get_current_user, require_permission
from realty_crm.core.exceptions import AuthorizationError
from realty_crm.core.permissions import Action, Resource
from realty_crm.database import get_db
from realty_crm.models.user import User, UserRole
from realty_crm.schemas.dashboard import AdminStats, AgentDashboardStats, SuperAdminStats
from realty_crm.services.dashboard import DashboardService


router = APIRouter()

_SLICES = {
    UserRole.SUPER_ADMIN: SuperAdminStats,
    UserRole.ADMIN: AdminStats,
    UserRole.AGENT: AgentDashboardStats,
}


def _require_role(role: UserRole):
    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role:
            raise AuthorizationError(f"Only {role.value} users can view this dashboard")
        return current_user

    return dependency


@router.get("/stats", response_model=Union[SuperAdminStats, AdminStats, AgentDashboardStats])
async def get_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.DASHBOARD, Action.READ)),
):
    """Statistics for the caller's role"""
    data = await DashboardService(db).stats_for(current_user)
    return _SLICES[current_user.role].model_validate(data, from_attributes=True)


@router.get("/super-admin/stats", response_model=SuperAdminStats)
async def get_super_admin_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(_require_role(UserRole.SUPER_ADMIN)),
):
    data = await DashboardService(db).super_admin_stats()
    return SuperAdminStats.model_validate(data, from_attributes=True)


@router.get("/admin/stats", response_model=AdminStats)
async def get_admin_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(_require_role(UserRole.ADMIN)),
):
    data = await DashboardService(db).admin_stats(current_user.id)
    return AdminStats.model_validate(data, from_attributes=True)


@router.get("/agent/stats", response_model=AgentDashboardStats)
async def get_agent_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(_require_role(UserRole.AGENT)),
):
    data = await DashboardService(db).agent_stats(current_user.id)
    return AgentDashboardStats.model_validate(data, from_attributes=True)
