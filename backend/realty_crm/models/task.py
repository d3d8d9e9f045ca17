"""
Task model with subtasks and comments
"""
import uuid
import enum
from sqlalchemy import (
    Boolean, Column, String, Text, DateTime, Enum, ForeignKey, Index, Uuid
)
from sqlalchemy.orm import relationship

from realty_crm.database import Base, JSONType, utcnow


class TaskStatus(str, enum.Enum):
    """Task status"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, enum.Enum):
    """Task priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskCategory(str, enum.Enum):
    """Task category"""
    FOLLOW_UP = "follow_up"
    MEETING = "meeting"
    DOCUMENTATION = "documentation"
    PROPERTY_SHOWING = "property_showing"
    NEGOTIATION = "negotiation"
    OTHER = "other"


class Task(Base):
    """Task model"""

    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Enum(TaskStatus), nullable=False, default=TaskStatus.PENDING)
    priority = Column(Enum(TaskPriority), nullable=False, default=TaskPriority.MEDIUM)
    category = Column(Enum(TaskCategory), nullable=False, default=TaskCategory.OTHER)

    # Assignment
    created_by_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    assigned_to_id = Column(Uuid, ForeignKey("users.id"), nullable=False)

    # Dates
    due_date = Column(DateTime, nullable=True, index=True)
    completed_date = Column(DateTime, nullable=True)
    reminder = Column(DateTime, nullable=True)
    reminder_sent = Column(Boolean, default=False, nullable=False)

    # Related entities
    related_property_id = Column(Uuid, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True)
    related_customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)

    tags = Column(JSONType, nullable=False, default=list)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    subtasks = relationship(
        "Subtask",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="Subtask.created_at",
        lazy="selectin",
    )
    comments = relationship(
        "TaskComment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskComment.added_at",
        lazy="selectin",
    )

    __table_args__ = (
        Index('idx_task_assignee_status', 'assigned_to_id', 'status'),
        Index('idx_task_status_priority', 'status', 'priority'),
    )

    @property
    def is_overdue(self) -> bool:
        if self.due_date and self.status != TaskStatus.COMPLETED:
            return utcnow() > self.due_date
        return False

    def __repr__(self) -> str:
        return f"<Task {self.title[:50]}>"


class Subtask(Base):
    """Checklist item inside a task"""

    __tablename__ = "subtasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    task = relationship("Task", back_populates="subtasks")


class TaskComment(Base):
    """Append-only task update"""

    __tablename__ = "task_comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    added_by_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    added_at = Column(DateTime, default=utcnow, nullable=False)

    task = relationship("Task", back_populates="comments")
