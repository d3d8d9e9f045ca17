"""
Notification Schemas
"""
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from realty_crm.models.notification import NotificationType, NotificationPriority, EntityType


class NotificationResponse(BaseModel):
    """Notification response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    recipient_id: UUID
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority
    is_read: bool
    entity_type: Optional[EntityType] = None
    entity_id: Optional[UUID] = None
    action_url: Optional[str] = None
    extra: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("extra", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime


class NotificationListResponse(BaseModel):
    """Paginated notifications for the caller"""
    total: int
    unread_count: int
    skip: int
    limit: int
    items: List[NotificationResponse]


class UnreadCountResponse(BaseModel):
    count: int


class BulkActionResponse(BaseModel):
    """Result of read-all / clear-read"""
    message: str
    count: int
