"""
Booking ledger model.
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, Integer, DateTime, Enum, Numeric, ForeignKey, Index, CheckConstraint
)

from eventplanning.models.base import Base, utcnow


class BookingStatus(str, PyEnum):
    """Booking status enumeration. CONFIRMED moves to CANCELLED only."""
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class Booking(Base):
    """
    A user's reservation of some quantity of a ticket type.
    total_price is a snapshot taken at create/update time.
    """

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    ticket_type_id = Column(Integer, ForeignKey("ticket_types.id", ondelete="CASCADE"), nullable=False)

    quantity = Column(Integer, nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    status = Column(Enum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_quantity_positive'),
        CheckConstraint('total_price >= 0', name='check_total_price_non_negative'),
        Index('idx_booking_ticket_type_status', 'ticket_type_id', 'status'),
    )

    def __repr__(self):
        return f"<Booking(id={self.id}, user_id={self.user_id}, status='{self.status.value}')>"

    @property
    def is_active(self) -> bool:
        """Check if booking still holds tickets."""
        return self.status == BookingStatus.CONFIRMED
