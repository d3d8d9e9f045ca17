"""
Tasks API endpoints
"""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.api.deps import get_dispatcher, require_permission
from realty_crm.core.exceptions import NotFoundError
from realty_crm.core.permissions import (
    Action,
    Resource,
    can_reassign_task,
    ensure_can_change_task_status,
    ensure_can_delete_task,
    ensure_task_access,
)
from realty_crm.database import get_db, utcnow
from realty_crm.models.customer import Customer
from realty_crm.models.notification import NotificationType
from realty_crm.models.property import Property
from realty_crm.models.task import Subtask, Task, TaskCategory, TaskComment, TaskPriority, TaskStatus
from realty_crm.models.user import User, UserRole
from realty_crm.schemas.task import (
    CommentCreate,
    SubtaskCreate,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from realty_crm.services.events import DomainEvent, NotificationDispatcher


router = APIRouter()

logger = logging.getLogger(__name__)


async def _get_task(db: AsyncSession, task_id: UUID) -> Task:
    result = await db.execute(select(Task).where(Task.id == task_id))
    task = result.scalar_one_or_none()
    if not task:
        raise NotFoundError("Task not found")
    return task


async def _ensure_exists(db: AsyncSession, model, entity_id: Optional[UUID], label: str) -> None:
    if entity_id is None:
        return
    if not await db.scalar(select(model.id).where(model.id == entity_id)):
        raise NotFoundError(f"{label} not found")


def _own_tasks(user: User):
    return or_(Task.created_by_id == user.id, Task.assigned_to_id == user.id)


def _set_status(task: Task, new_status: TaskStatus) -> None:
    """Keep completed_date in step with the status"""
    task.status = new_status
    task.completed_date = utcnow() if new_status == TaskStatus.COMPLETED else None


def _status_events(task: Task, old_status: TaskStatus, actor_id: UUID) -> List[DomainEvent]:
    if task.status == TaskStatus.COMPLETED and old_status != TaskStatus.COMPLETED:
        return [DomainEvent(NotificationType.TASK_COMPLETED, task.id, actor_id)]
    return []


async def _paginate(db: AsyncSession, conditions, skip: int, limit: int) -> TaskListResponse:
    total = await db.scalar(select(func.count(Task.id)).where(*conditions))
    result = await db.execute(
        select(Task)
        .where(*conditions)
        .order_by(Task.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return TaskListResponse(total=total or 0, skip=skip, limit=limit, items=result.scalars().all())


@router.get("/", response_model=TaskListResponse)
async def list_tasks(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=200),
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    category: Optional[TaskCategory] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.TASK, Action.READ)),
):
    """
    List tasks; agents see the ones they created or are assigned to
    """
    conditions = []
    if current_user.role == UserRole.AGENT:
        conditions.append(_own_tasks(current_user))
    if status_filter:
        conditions.append(Task.status == status_filter)
    if priority:
        conditions.append(Task.priority == priority)
    if category:
        conditions.append(Task.category == category)
    return await _paginate(db, conditions, skip, limit)


@router.get("/my/tasks", response_model=TaskListResponse)
async def list_my_tasks(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.TASK, Action.READ)),
):
    """Tasks the caller created or is assigned to"""
    conditions = [_own_tasks(current_user)]
    if status_filter:
        conditions.append(Task.status == status_filter)
    return await _paginate(db, conditions, skip, limit)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.TASK, Action.READ)),
):
    """Get task by ID"""
    task = await _get_task(db, task_id)
    ensure_task_access(current_user, task, "view")
    return task


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.TASK, Action.CREATE)),
):
    """
    Create a task; without an assignee it is assigned to its creator
    """
    assignee_id = task_in.assigned_to_id or current_user.id
    await _ensure_exists(db, User, assignee_id, "Assignee")
    await _ensure_exists(db, Property, task_in.related_property_id, "Property")
    await _ensure_exists(db, Customer, task_in.related_customer_id, "Customer")

    task_data = task_in.model_dump(exclude={"assigned_to_id", "status"})
    task = Task(**task_data, created_by_id=current_user.id, assigned_to_id=assignee_id)
    _set_status(task, task_in.status)

    db.add(task)
    await db.commit()
    await db.refresh(task)

    events = []
    if task.assigned_to_id != current_user.id:
        events.append(DomainEvent(NotificationType.TASK_ASSIGNED, task.id, current_user.id))
    if task.priority == TaskPriority.URGENT:
        events.append(DomainEvent(NotificationType.URGENT_TASK, task.id, current_user.id))
    await dispatcher.emit(*events)
    return task


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    task_in: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.TASK, Action.UPDATE)),
):
    """
    Update task

    Only admins reassign; ``assigned_to_id`` is ignored for everyone else.
    Changing the status is reserved to the assignee and super admins.
    """
    task = await _get_task(db, task_id)
    ensure_task_access(current_user, task, "update")

    update_data = task_in.model_dump(exclude_unset=True)
    if not can_reassign_task(current_user):
        update_data.pop("assigned_to_id", None)

    new_status = update_data.pop("status", None)
    if new_status is not None and new_status != task.status:
        ensure_can_change_task_status(current_user, task)

    if update_data.get("assigned_to_id") is None:
        update_data.pop("assigned_to_id", None)
    else:
        await _ensure_exists(db, User, update_data["assigned_to_id"], "Assignee")
    await _ensure_exists(db, Property, update_data.get("related_property_id"), "Property")
    await _ensure_exists(db, Customer, update_data.get("related_customer_id"), "Customer")
    if "tags" in update_data and update_data["tags"] is None:
        update_data["tags"] = []

    old_status = task.status
    old_priority = task.priority
    old_assignee = task.assigned_to_id

    for field, value in update_data.items():
        setattr(task, field, value)
    if new_status is not None and new_status != old_status:
        _set_status(task, new_status)

    await db.commit()
    await db.refresh(task)

    events = []
    if task.assigned_to_id != old_assignee and task.assigned_to_id != current_user.id:
        events.append(DomainEvent(NotificationType.TASK_ASSIGNED, task.id, current_user.id))
    if task.priority == TaskPriority.URGENT and old_priority != TaskPriority.URGENT:
        events.append(DomainEvent(NotificationType.URGENT_TASK, task.id, current_user.id))
    events.extend(_status_events(task, old_status, current_user.id))
    await dispatcher.emit(*events)
    return task


@router.delete("/{task_id}")
async def delete_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.TASK, Action.DELETE)),
):
    """Delete task (creator or super admin)"""
    task = await _get_task(db, task_id)
    ensure_can_delete_task(current_user, task)

    await db.delete(task)
    await db.commit()

    logger.info(f"{current_user.email} deleted task {task_id}")
    return {"message": "Task deleted successfully"}


@router.patch("/{task_id}/complete", response_model=TaskResponse)
async def toggle_complete(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_permission(Resource.TASK, Action.CHANGE_STATUS)),
):
    """
    Toggle completed <-> pending
    """
    task = await _get_task(db, task_id)
    ensure_can_change_task_status(current_user, task)

    old_status = task.status
    _set_status(
        task, TaskStatus.PENDING if task.status == TaskStatus.COMPLETED else TaskStatus.COMPLETED
    )
    await db.commit()
    await db.refresh(task)

    await dispatcher.emit(*_status_events(task, old_status, current_user.id))
    return task


@router.post("/{task_id}/subtasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def add_subtask(
    task_id: UUID,
    subtask_in: SubtaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.TASK, Action.UPDATE)),
):
    """Add a checklist item"""
    task = await _get_task(db, task_id)
    ensure_task_access(current_user, task, "update")

    task.subtasks.append(Subtask(title=subtask_in.title))
    await db.commit()
    await db.refresh(task)
    return task


@router.patch("/{task_id}/subtasks/{subtask_id}/toggle", response_model=TaskResponse)
async def toggle_subtask(
    task_id: UUID,
    subtask_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.TASK, Action.UPDATE)),
):
    """Flip a checklist item"""
    task = await _get_task(db, task_id)
    ensure_task_access(current_user, task, "update")

    subtask = next((s for s in task.subtasks if s.id == subtask_id), None)
    if not subtask:
        raise NotFoundError("Subtask not found")

    subtask.completed = not subtask.completed
    subtask.completed_at = utcnow() if subtask.completed else None
    await db.commit()
    await db.refresh(task)
    return task


@router.post("/{task_id}/comments", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    task_id: UUID,
    comment_in: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.TASK, Action.UPDATE)),
):
    """Append an update to the task"""
    task = await _get_task(db, task_id)
    ensure_task_access(current_user, task, "comment on")

    task.comments.append(TaskComment(text=comment_in.text, added_by_id=current_user.id))
    await db.commit()
    await db.refresh(task)
    return task
