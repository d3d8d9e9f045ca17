"""
Task Schemas
"""
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from realty_crm.models.task import TaskStatus, TaskPriority, TaskCategory
from realty_crm.schemas.base import UpdateSchema


class TaskCreate(BaseModel):
    """Schema for creating a task (assignee defaults to the creator)"""
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.OTHER
    assigned_to_id: Optional[UUID] = None
    due_date: Optional[datetime] = None
    reminder: Optional[datetime] = None
    related_property_id: Optional[UUID] = None
    related_customer_id: Optional[UUID] = None
    tags: List[str] = Field(default_factory=list)


class TaskUpdate(UpdateSchema):
    """Schema for updating a task"""
    not_nullable = frozenset({"title", "status", "priority", "category", "assigned_to_id"})

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    category: Optional[TaskCategory] = None
    assigned_to_id: Optional[UUID] = None
    due_date: Optional[datetime] = None
    reminder: Optional[datetime] = None
    related_property_id: Optional[UUID] = None
    related_customer_id: Optional[UUID] = None
    tags: Optional[List[str]] = None


class SubtaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1)


class SubtaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    completed: bool
    completed_at: Optional[datetime] = None


class TaskCommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    text: str
    added_by_id: Optional[UUID] = None
    added_at: datetime


class TaskResponse(BaseModel):
    """Task response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    category: TaskCategory
    created_by_id: UUID
    assigned_to_id: UUID
    due_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    reminder: Optional[datetime] = None
    reminder_sent: bool
    related_property_id: Optional[UUID] = None
    related_customer_id: Optional[UUID] = None
    tags: List[str]
    is_overdue: bool
    subtasks: List[SubtaskResponse]
    comments: List[TaskCommentResponse]
    created_at: datetime
    updated_at: Optional[datetime] = None


class TaskListResponse(BaseModel):
    """Paginated task list"""
    total: int
    skip: int
    limit: int
    items: List[TaskResponse]
