"""
Pydantic schemas for the booking ledger.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from eventplanning.models.booking import BookingStatus
from eventplanning.schemas.common import CamelModel


class BookingCreate(CamelModel):
    """Schema for creating a booking. Quantity limits are checked by the service."""
    event_id: int
    ticket_type_id: int
    quantity: int


class BookingUpdate(CamelModel):
    """Schema for changing the quantity of a booking."""
    quantity: int


class BookingResponse(CamelModel):
    """Booking with the titles of the event and ticket type it references."""
    id: int
    user_id: int
    event_id: int
    event_title: Optional[str] = None
    ticket_type_id: int
    ticket_type_name: Optional[str] = None
    quantity: int
    total_price: Decimal
    status: BookingStatus
    created_at: datetime
