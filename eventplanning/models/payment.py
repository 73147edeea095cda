"""
Payment review model.
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, Integer, String, DateTime, Enum, Numeric, ForeignKey, Index, CheckConstraint
)

from eventplanning.models.base import Base, utcnow


class PaymentMethod(str, PyEnum):
    """Payment method enumeration."""
    BANK_TRANSFER = "BANK_TRANSFER"
    CARD = "CARD"
    CASH = "CASH"


class PaymentStatus(str, PyEnum):
    """Payment status enumeration. PENDING moves to a terminal state once."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Payment(Base):
    """
    Admin-reviewed record of funds claimed against a booking.
    """

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    payer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    method = Column(Enum(PaymentMethod), nullable=False)
    status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    reference = Column(String(100), nullable=True)
    slip_path = Column(String(500), nullable=True)

    reviewed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint('amount >= 0', name='check_payment_amount_non_negative'),
        Index('idx_payment_status_created', 'status', 'created_at'),
    )

    def __repr__(self):
        return f"<Payment(id={self.id}, booking_id={self.booking_id}, status='{self.status.value}')>"
