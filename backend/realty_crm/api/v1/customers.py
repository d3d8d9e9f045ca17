"""
Customers (leads) API endpoints
"""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.api.deps import get_dispatcher, require_permission
from realty_crm.core.exceptions import NotFoundError
from realty_crm.core.permissions import Action, Resource, ensure_customer_access
from realty_crm.database import get_db
from realty_crm.models.agent import Agent
from realty_crm.models.customer import Customer, CustomerNote, CustomerPriority, CustomerStatus
from realty_crm.models.notification import NotificationType
from realty_crm.models.property import Property
from realty_crm.models.user import User, UserRole
from realty_crm.schemas.customer import (
    CustomerCreate,
    CustomerListResponse,
    CustomerResponse,
    CustomerUpdate,
    NoteCreate,
)
from realty_crm.schemas.property import AssignAgentRequest
from realty_crm.services.assignment import AssignmentService
from realty_crm.services.events import DomainEvent, NotificationDispatcher
from realty_crm.services.notifications import is_high_value


router = APIRouter()

logger = logging.getLogger(__name__)


async def _get_customer(db: AsyncSession, customer_id: UUID) -> Customer:
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    customer = result.scalar_one_or_none()
    if not customer:
        raise NotFoundError("Customer not found")
    return customer


async def _load_properties(db: AsyncSession, property_ids: List[UUID]) -> List[Property]:
    if not property_ids:
        return []
    result = await db.execute(select(Property).where(Property.id.in_(property_ids)))
    properties = result.scalars().all()
    missing = set(property_ids) - {p.id for p in properties}
    if missing:
        raise NotFoundError(f"Property {sorted(str(m) for m in missing)[0]} not found")
    return list(properties)


def _scope_for(user: User) -> list:
    """Agents list customers assigned to them or added by them"""
    if user.role == UserRole.AGENT:
        return [or_(Customer.assigned_agent_id == user.id, Customer.added_by_id == user.id)]
    return []


def _apply_customer_filters(
    conditions: list,
    status_filter: Optional[CustomerStatus] = None,
    priority: Optional[CustomerPriority] = None,
    search: Optional[str] = None,
) -> list:
    if status_filter:
        conditions.append(Customer.status == status_filter)
    if priority:
        conditions.append(Customer.priority == priority)
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                Customer.name.ilike(pattern),
                Customer.email.ilike(pattern),
                Customer.phone.ilike(pattern),
            )
        )
    return conditions


async def _paginate(db: AsyncSession, conditions, skip: int, limit: int) -> CustomerListResponse:
    total = await db.scalar(select(func.count(Customer.id)).where(*conditions))
    result = await db.execute(
        select(Customer)
        .where(*conditions)
        .order_by(Customer.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return CustomerListResponse(
        total=total or 0,
        skip=skip,
        limit=limit,
        items=result.scalars().all(),
    )


@router.get("/", response_model=CustomerListResponse)
async def list_customers(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=200),
    status_filter: Optional[CustomerStatus] = Query(None, alias="status"),
    priority: Optional[CustomerPriority] = Query(None),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.CUSTOMER, Action.READ)),
):
    """
    List customers with filters; agents only see their own
    """
    conditions = _apply_customer_filters(_scope_for(current_user), status_filter, priority, search)
    return await _paginate(db, conditions, skip, limit)


@router.get("/my/customers", response_model=CustomerListResponse)
async def list_my_customers(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.CUSTOMER, Action.READ)),
):
    """Customers assigned to or added by the calling agent (all for admins)"""
    return await _paginate(db, _scope_for(current_user), skip, limit)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.CUSTOMER, Action.READ)),
):
    """Get customer by ID"""
    customer = await _get_customer(db, customer_id)
    ensure_customer_access(current_user, customer, "view")
    return customer


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_in: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.CUSTOMER, Action.CREATE)),
):
    """
    Create a customer

    With an agent the customer goes through the assignment engine; an agent
    adding an unassigned customer tells the admins about it.
    """
    data = customer_in.model_dump(
        exclude={"budget", "interested_property_ids", "assigned_agent_id", "property_types"}
    )
    customer = Customer(
        **data,
        budget_min=customer_in.budget.min,
        budget_max=customer_in.budget.max,
        property_types=[t.value for t in customer_in.property_types],
        added_by_id=current_user.id,
    )
    customer.interested_properties = await _load_properties(db, customer_in.interested_property_ids)
    db.add(customer)

    events = []
    if customer_in.assigned_agent_id:
        await AssignmentService(db).attach_customer(customer, customer_in.assigned_agent_id)
    await db.commit()
    await db.refresh(customer)

    if customer.assigned_agent_id:
        events.extend(AssignmentService.customer_events(customer, current_user.id))
    else:
        if current_user.role == UserRole.AGENT:
            events.append(DomainEvent(NotificationType.CUSTOMER_ADDED, customer.id, current_user.id))
        if is_high_value(customer):
            events.append(DomainEvent(NotificationType.HIGH_VALUE_LEAD, customer.id, current_user.id))

    logger.info(f"{current_user.email} created customer {customer.id}")
    await dispatcher.emit(*events)
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: UUID,
    customer_in: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.CUSTOMER, Action.UPDATE)),
):
    """
    Update customer

    Agents cannot move a customer to another agent; the field is ignored
    for them. Closing the deal notifies the agent and the admins.
    """
    customer = await _get_customer(db, customer_id)
    ensure_customer_access(current_user, customer, "update")

    update_data = customer_in.model_dump(exclude_unset=True)
    if current_user.role == UserRole.AGENT:
        update_data.pop("assigned_agent_id", None)

    old_status = customer.status
    old_agent_id = customer.assigned_agent_id

    budget = update_data.pop("budget", None)
    if budget is not None:
        customer.budget_min = budget["min"]
        customer.budget_max = budget["max"]
    if "property_types" in update_data:
        update_data["property_types"] = [t.value for t in update_data["property_types"] or []]
    if "interested_property_ids" in update_data:
        customer.interested_properties = await _load_properties(
            db, update_data.pop("interested_property_ids") or []
        )

    new_agent_id = update_data.pop("assigned_agent_id", old_agent_id)
    for field, value in update_data.items():
        setattr(customer, field, value)

    reassigned = new_agent_id is not None and new_agent_id != old_agent_id
    if reassigned:
        await AssignmentService(db).attach_customer(customer, new_agent_id)
    elif new_agent_id is None:
        customer.assigned_agent_id = None

    await db.commit()
    await db.refresh(customer)

    events = []
    if reassigned:
        events.extend(AssignmentService.customer_events(customer, current_user.id))
    if customer.status == CustomerStatus.CLOSED and old_status != CustomerStatus.CLOSED:
        events.append(DomainEvent(NotificationType.DEAL_CLOSED, customer.id, current_user.id))
    await dispatcher.emit(*events)
    return customer


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.CUSTOMER, Action.DELETE)),
):
    """Delete customer"""
    customer = await _get_customer(db, customer_id)

    result = await db.execute(select(Agent).where(Agent.assigned_customers.contains(customer)))
    for agent in result.scalars().all():
        agent.assigned_customers.remove(customer)

    await db.delete(customer)
    await db.commit()

    logger.info(f"{current_user.email} deleted customer {customer_id}")
    return {"message": "Customer deleted successfully"}


@router.patch("/{customer_id}/assign-agent", response_model=CustomerResponse)
async def assign_agent(
    customer_id: UUID,
    assign_in: AssignAgentRequest,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.CUSTOMER, Action.ASSIGN)),
):
    """Assign the customer to an agent (by the agent's user id)"""
    customer, events = await AssignmentService(db).assign_customer(
        customer_id, assign_in.agent_id, actor_id=current_user.id
    )
    await dispatcher.emit(*events)
    return customer


@router.post("/{customer_id}/notes", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def add_note(
    customer_id: UUID,
    note_in: NoteCreate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.CUSTOMER, Action.UPDATE)),
):
    """
    Append to the customer's communication log
    """
    customer = await _get_customer(db, customer_id)
    ensure_customer_access(current_user, customer, "add notes to")

    customer.notes.append(CustomerNote(note=note_in.note, added_by_id=current_user.id))
    await db.commit()
    await db.refresh(customer)

    await dispatcher.emit(
        DomainEvent(
            NotificationType.CUSTOMER_MESSAGE,
            customer.id,
            current_user.id,
            {"text": note_in.note, "sender_name": current_user.name},
        )
    )
    return customer
