"""
Properties API endpoints
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.api.deps import get_dispatcher, require_permission
from realty_crm.core.exceptions import NotFoundError
from realty_crm.core.permissions import Action, Resource
from realty_crm.database import get_db
from realty_crm.models.agent import Agent
from realty_crm.models.notification import NotificationType
from realty_crm.models.property import ListingState, Property, PropertyStatus, PropertyType
from realty_crm.models.user import User, UserRole
from realty_crm.schemas.property import (
    AssignAgentRequest,
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)
from realty_crm.services.assignment import AssignmentService
from realty_crm.services.events import DomainEvent, NotificationDispatcher


router = APIRouter()

logger = logging.getLogger(__name__)


def _apply_property_filters(
    stmt,
    property_type: Optional[PropertyType] = None,
    state: Optional[ListingState] = None,
    status_filter: Optional[PropertyStatus] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
):
    """Apply common property filters to a query statement"""
    if property_type:
        stmt = stmt.where(Property.property_type == property_type)
    if state:
        stmt = stmt.where(Property.state == state)
    if status_filter:
        stmt = stmt.where(Property.status == status_filter)
    if min_price is not None:
        stmt = stmt.where(Property.price >= min_price)
    if max_price is not None:
        stmt = stmt.where(Property.price <= max_price)
    if location:
        stmt = stmt.where(Property.location.ilike(f"%{location}%"))
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Property.name.ilike(pattern),
                Property.description.ilike(pattern),
                Property.location.ilike(pattern),
            )
        )
    return stmt


async def _get_property(db: AsyncSession, property_id: UUID) -> Property:
    result = await db.execute(select(Property).where(Property.id == property_id))
    property_obj = result.scalar_one_or_none()
    if not property_obj:
        raise NotFoundError("Property not found")
    return property_obj


async def _paginate(db: AsyncSession, conditions, skip: int, limit: int) -> PropertyListResponse:
    total = await db.scalar(select(func.count(Property.id)).where(*conditions))
    result = await db.execute(
        select(Property)
        .where(*conditions)
        .order_by(Property.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return PropertyListResponse(
        total=total or 0,
        skip=skip,
        limit=limit,
        items=result.scalars().all(),
    )


@router.get("/", response_model=PropertyListResponse)
async def list_properties(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    property_type: Optional[PropertyType] = Query(None, alias="type"),
    state: Optional[ListingState] = Query(None),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    location: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Public listing: published properties only, with filters and pagination
    """
    total_stmt = _apply_property_filters(
        select(func.count(Property.id)).where(Property.published_to_frontend.is_(True)),
        property_type, state, status_filter, min_price, max_price, location, search,
    )
    total = await db.scalar(total_stmt)

    stmt = _apply_property_filters(
        select(Property).where(Property.published_to_frontend.is_(True)),
        property_type, state, status_filter, min_price, max_price, location, search,
    )
    stmt = stmt.order_by(Property.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(stmt)

    return PropertyListResponse(
        total=total or 0,
        skip=skip,
        limit=limit,
        items=result.scalars().all(),
    )


@router.get("/my/properties", response_model=PropertyListResponse)
async def list_my_properties(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.PROPERTY, Action.LIST_OWN)),
):
    """
    Staff listing: agents see the properties assigned to them, admins see all
    """
    conditions = []
    if current_user.role == UserRole.AGENT:
        conditions.append(Property.assigned_agent_id == current_user.id)
    return await _paginate(db, conditions, skip, limit)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Get property by ID and count the view
    """
    property_obj = await _get_property(db, property_id)
    property_obj.view_count = (property_obj.view_count or 0) + 1
    await db.commit()
    await db.refresh(property_obj)
    return property_obj


@router.post("/", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    property_in: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.PROPERTY, Action.CREATE)),
):
    """
    Create a new property (unpublished until a super admin publishes it)
    """
    property_data = property_in.model_dump()
    property_data["uploaded_by_id"] = current_user.id

    new_property = Property(**property_data)
    db.add(new_property)
    await db.commit()
    await db.refresh(new_property)

    logger.info(f"{current_user.email} created property {new_property.id}")
    await dispatcher.emit(
        DomainEvent(NotificationType.PROPERTY_ADDED, new_property.id, current_user.id)
    )
    return new_property


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    property_in: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.PROPERTY, Action.UPDATE)),
):
    """
    Update property; a transition into ``sold`` is announced to admins
    """
    property_obj = await _get_property(db, property_id)
    old_status = property_obj.status

    for field, value in property_in.model_dump(exclude_unset=True).items():
        setattr(property_obj, field, value)

    await db.commit()
    await db.refresh(property_obj)

    if property_obj.status == PropertyStatus.SOLD and old_status != PropertyStatus.SOLD:
        await dispatcher.emit(
            DomainEvent(NotificationType.PROPERTY_SOLD, property_obj.id, current_user.id)
        )
    return property_obj


@router.delete("/{property_id}")
async def delete_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.PROPERTY, Action.DELETE)),
):
    """
    Delete property
    """
    property_obj = await _get_property(db, property_id)

    # Drop it from every agent's membership list as well
    result = await db.execute(select(Agent).where(Agent.assigned_properties.contains(property_obj)))
    for agent in result.scalars().all():
        agent.assigned_properties.remove(property_obj)

    await db.delete(property_obj)
    await db.commit()

    logger.info(f"{current_user.email} deleted property {property_id}")
    return {"message": "Property deleted successfully"}


@router.patch("/{property_id}/publish", response_model=PropertyResponse)
async def toggle_publish(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.PROPERTY, Action.PUBLISH)),
):
    """
    Toggle whether the property shows on the public site
    """
    property_obj = await _get_property(db, property_id)
    property_obj.published_to_frontend = not property_obj.published_to_frontend
    await db.commit()
    await db.refresh(property_obj)

    logger.info(
        f"{current_user.email} {'published' if property_obj.published_to_frontend else 'unpublished'} "
        f"property {property_obj.id}"
    )
    return property_obj


@router.patch("/{property_id}/assign-agent", response_model=PropertyResponse)
async def assign_agent(
    property_id: UUID,
    assign_in: AssignAgentRequest,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.PROPERTY, Action.ASSIGN)),
):
    """
    Assign the property to an agent (by the agent's user id)
    """
    property_obj, events = await AssignmentService(db).assign_property(
        property_id, assign_in.agent_id, actor_id=current_user.id
    )
    await dispatcher.emit(*events)
    return property_obj
