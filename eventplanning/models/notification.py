"""
In-app notification model.
"""

from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey, Index

from eventplanning.models.base import Base, utcnow


class NotificationType(str, PyEnum):
    """Notification type enumeration."""
    GENERAL = "GENERAL"
    BOOKING = "BOOKING"
    PAYMENT = "PAYMENT"
    EVENT = "EVENT"
    TASK = "TASK"


class NotificationStatus(str, PyEnum):
    """Notification read state."""
    UNREAD = "UNREAD"
    READ = "READ"


class Notification(Base):
    """Message shown to a user inside the application."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Enum(NotificationType), default=NotificationType.GENERAL, nullable=False)
    status = Column(Enum(NotificationStatus), default=NotificationStatus.UNREAD, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index('idx_notification_user_status', 'user_id', 'status'),
    )

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, status='{self.status.value}')>"
