"""
Event catalog and ticket inventory models.
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean, Enum, Numeric,
    ForeignKey, Index, CheckConstraint
)

from eventplanning.models.base import Base, utcnow


class EventStatus(str, PyEnum):
    """Event status enumeration."""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"


class Event(Base):
    """
    Event model owned by its organizer.
    """

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    venue = Column(String(255), nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    status = Column(Enum(EventStatus), default=EventStatus.DRAFT, nullable=False, index=True)
    active = Column(Boolean, default=True, nullable=False)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index('idx_event_active_start', 'active', 'start_time'),
    )

    def __repr__(self):
        return f"<Event(id={self.id}, title='{self.title}', status='{self.status.value}')>"

    @property
    def is_upcoming(self) -> bool:
        """Check if the event is upcoming."""
        return self.start_time >= utcnow() and self.active


class TicketType(Base):
    """
    Priced admission category for an event.
    Capacity is a fixed ceiling; sold tickets are derived from confirmed bookings.
    """

    __tablename__ = "ticket_types"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    capacity = Column(Integer, nullable=False)
    version = Column(Integer, default=1, nullable=False)  # Bumped to serialize bookings

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_ticket_price_non_negative'),
        CheckConstraint('capacity >= 1', name='check_ticket_capacity_positive'),
    )

    def __repr__(self):
        return f"<TicketType(id={self.id}, event_id={self.event_id}, name='{self.name}')>"
