"""
Notifications API endpoints (always scoped to the caller)
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.api.deps import get_current_user
from realty_crm.database import get_db
from realty_crm.models.user import User
from realty_crm.schemas.notification import (
    BulkActionResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from realty_crm.services.notifications import NotificationService


router = APIRouter()


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    is_read: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the caller's notifications, newest first"""
    service = NotificationService(db)
    total, items = await service.list_for_user(current_user.id, is_read=is_read, skip=skip, limit=limit)
    return NotificationListResponse(
        total=total,
        unread_count=await service.unread_count(current_user.id),
        skip=skip,
        limit=limit,
        items=items,
    )


@router.get("/unread/count", response_model=UnreadCountResponse)
async def unread_count(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return UnreadCountResponse(count=await NotificationService(db).unread_count(current_user.id))


@router.patch("/read-all", response_model=BulkActionResponse)
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mark every unread notification of the caller as read"""
    count = await NotificationService(db).mark_all_read(current_user.id)
    return BulkActionResponse(message="All notifications marked as read", count=count)


@router.delete("/clear-read", response_model=BulkActionResponse)
async def clear_read(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete the caller's read notifications; unread ones stay"""
    count = await NotificationService(db).clear_read(current_user.id)
    return BulkActionResponse(message="Read notifications cleared", count=count)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await NotificationService(db).mark_read(current_user.id, notification_id)


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await NotificationService(db).delete(current_user.id, notification_id)
    return {"message": "Notification deleted"}
