"""
Agent profiles API endpoints (admins only)
"""
import logging
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.api.deps import get_dispatcher, require_permission
from realty_crm.core.exceptions import ConflictError, NotFoundError, ValidationError
from realty_crm.core.permissions import Action, Resource
from realty_crm.database import get_db
from realty_crm.models.agent import Agent, AgentAvailability
from realty_crm.models.notification import NotificationType
from realty_crm.models.user import User, UserRole
from realty_crm.schemas.agent import (
    AgentCreate,
    AgentListResponse,
    AgentResponse,
    AgentStats,
    AgentUpdate,
)
from realty_crm.services.events import DomainEvent, NotificationDispatcher


router = APIRouter()

logger = logging.getLogger(__name__)


async def _get_agent(db: AsyncSession, agent_id: UUID) -> Agent:
    result = await db.execute(select(Agent).where(Agent.id == agent_id))
    agent = result.scalar_one_or_none()
    if not agent:
        raise NotFoundError("Agent not found")
    return agent


def _column_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """JSON columns hold plain values, not enums or models"""
    if data.get("specialization") is not None:
        data["specialization"] = [s.value for s in data["specialization"]]
    return data


@router.get("/", response_model=AgentListResponse)
async def list_agents(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    availability: Optional[AgentAvailability] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.AGENT, Action.READ)),
):
    """List agent profiles"""
    conditions = []
    if availability:
        conditions.append(Agent.availability == availability)

    total = await db.scalar(select(func.count(Agent.id)).where(*conditions))
    result = await db.execute(
        select(Agent).where(*conditions).order_by(Agent.created_at.desc()).offset(skip).limit(limit)
    )
    return AgentListResponse(total=total or 0, skip=skip, limit=limit, items=result.scalars().all())


@router.get("/{agent_id}", response_model=AgentResponse)
async def get_agent(
    agent_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.AGENT, Action.READ)),
):
    """Get agent profile by ID"""
    return await _get_agent(db, agent_id)


@router.get("/{agent_id}/stats", response_model=AgentStats)
async def get_agent_stats(
    agent_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.AGENT, Action.READ)),
):
    """Membership sizes and the performance counters of one agent"""
    agent = await _get_agent(db, agent_id)
    return AgentStats(
        total_properties=len(agent.assigned_properties),
        total_customers=len(agent.assigned_customers),
        total_sales=agent.total_sales,
        total_commission=agent.total_commission,
        closed_deals=agent.closed_deals,
        active_deals=agent.active_deals,
        customer_satisfaction_rating=agent.customer_satisfaction_rating,
    )


@router.post("/", response_model=AgentResponse, status_code=status.HTTP_201_CREATED)
async def create_agent(
    agent_in: AgentCreate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.AGENT, Action.MANAGE)),
):
    """
    Create the Agent profile of an existing agent account

    Raises:
        NotFoundError: Unknown user
        ValidationError: The user does not have the agent role
        ConflictError: The user already has a profile
    """
    result = await db.execute(select(User).where(User.id == agent_in.user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")
    if user.role != UserRole.AGENT:
        raise ValidationError("User must have agent role", field="user_id")

    existing = await db.scalar(select(Agent.id).where(Agent.user_id == user.id))
    if existing:
        raise ConflictError("Agent profile already exists")

    agent = Agent(**_column_values(agent_in.model_dump()), managed_by_id=current_user.id)
    db.add(agent)
    await db.commit()
    await db.refresh(agent)

    logger.info(f"{current_user.email} created agent profile {agent.id} for {user.email}")
    await dispatcher.emit(DomainEvent(NotificationType.AGENT_ADDED, agent.id, current_user.id))
    return agent


@router.put("/{agent_id}", response_model=AgentResponse)
async def update_agent(
    agent_id: UUID,
    agent_in: AgentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.AGENT, Action.MANAGE)),
):
    """Update agent profile, including the hand-entered performance counters"""
    agent = await _get_agent(db, agent_id)

    for field, value in _column_values(agent_in.model_dump(exclude_unset=True)).items():
        setattr(agent, field, value)

    await db.commit()
    await db.refresh(agent)
    return agent


@router.delete("/{agent_id}")
async def delete_agent(
    agent_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.AGENT, Action.MANAGE)),
):
    """Delete the profile; the user account stays"""
    agent = await _get_agent(db, agent_id)
    await db.delete(agent)
    await db.commit()

    logger.info(f"{current_user.email} deleted agent profile {agent_id}")
    return {"message": "Agent deleted successfully"}
