"""
Pydantic schemas for in-app notifications.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from eventplanning.models.notification import NotificationStatus, NotificationType
from eventplanning.schemas.common import CamelModel


class NotificationCreate(CamelModel):
    """Admin-authored notification for a single user."""
    user_id: Optional[int] = None
    event_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.GENERAL


class BroadcastRequest(CamelModel):
    """Admin-authored notification for every user."""
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.GENERAL


class NotificationResponse(CamelModel):
    id: int
    user_id: int
    event_id: Optional[int] = None
    title: str
    message: str
    type: NotificationType
    status: NotificationStatus
    created_at: datetime


class UnreadCountResponse(CamelModel):
    count: int
