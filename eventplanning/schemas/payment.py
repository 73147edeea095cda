"""
Pydantic schemas for payment review.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from eventplanning.models.payment import PaymentMethod, PaymentStatus
from eventplanning.schemas.common import CamelModel


class PaymentResponse(CamelModel):
    """Schema for payment responses."""
    id: int
    booking_id: int
    event_id: int
    payer_id: int
    method: PaymentMethod
    status: PaymentStatus
    amount: Decimal
    reference: Optional[str] = None
    slip_path: Optional[str] = None
    reviewed_by_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PaymentSummaryResponse(CamelModel):
    """Payment counts per status and approved revenue."""
    pending: int
    approved: int
    rejected: int
    total_revenue: Decimal
