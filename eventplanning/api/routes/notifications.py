"""
Notification API routes.
The caller's inbox plus admin broadcast tools.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.schemas.common import MessageResponse
from eventplanning.schemas.notification import (
    BroadcastRequest,
    NotificationCreate,
    NotificationResponse,
    UnreadCountResponse,
)
from eventplanning.services.notification_service import notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
async def get_latest(principal: Principal = Depends(get_current_principal)):
    """Most recent notifications of the caller."""
    return await notification_service.get_latest(principal)


@router.get("/all", response_model=List[NotificationResponse])
async def get_all(principal: Principal = Depends(get_current_principal)):
    return await notification_service.get_all(principal)


@router.get("/unread", response_model=List[NotificationResponse])
async def get_unread(principal: Principal = Depends(get_current_principal)):
    return await notification_service.get_unread(principal)


@router.get("/unread/count", response_model=UnreadCountResponse)
async def count_unread(principal: Principal = Depends(get_current_principal)):
    return UnreadCountResponse(count=await notification_service.count_unread(principal))


@router.patch("/read-all", response_model=MessageResponse)
async def mark_all_read(principal: Principal = Depends(get_current_principal)):
    updated = await notification_service.mark_all_read(principal)
    return MessageResponse(message=f"{updated} notifications marked as read")


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    return await notification_service.mark_read(notification_id, principal)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def archive(notification_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    """Remove one of the caller's notifications."""
    await notification_service.archive(notification_id, principal)


@router.post("/broadcast", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def broadcast(data: BroadcastRequest, principal: Principal = Depends(get_current_principal)):
    """Notify every user. Admin only."""
    sent = await notification_service.broadcast(data, principal)
    return MessageResponse(message=f"Notification sent to {sent} users")


@router.post("/admin", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_for_user(data: NotificationCreate, principal: Principal = Depends(get_current_principal)):
    return await notification_service.create_for_user(data, principal)


@router.delete("/admin/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def admin_delete(notification_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    await notification_service.admin_delete(notification_id, principal)
