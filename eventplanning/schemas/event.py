"""
Pydantic schemas for events and ticket types.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from eventplanning.models.event import EventStatus
from eventplanning.schemas.common import CamelModel, to_naive_utc


class EventBase(CamelModel):
    """Base event schema with common fields."""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    venue: Optional[str] = Field(None, max_length=255)
    start_time: datetime
    end_time: datetime

    @field_validator('start_time', 'end_time')
    @classmethod
    def normalize_timezone(cls, v):
        """Store times as naive UTC."""
        return to_naive_utc(v)

    @model_validator(mode='after')
    def validate_time_range(self):
        if self.end_time < self.start_time:
            raise ValueError('End time must not be before start time')
        return self


class EventCreate(EventBase):
    """Schema for creating an event."""
    pass


class EventUpdate(CamelModel):
    """Schema for updating an event; omitted fields are left unchanged."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    venue: Optional[str] = Field(None, max_length=255)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator('start_time', 'end_time')
    @classmethod
    def normalize_timezone(cls, v):
        return to_naive_utc(v)

    @model_validator(mode='after')
    def validate_time_range(self):
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError('End time must not be before start time')
        return self


class EventResponse(CamelModel):
    """Schema for event responses."""
    id: int
    title: str
    description: Optional[str] = None
    venue: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: EventStatus
    active: bool
    organizer_id: int
    created_at: datetime
    updated_at: datetime


class EventListResponse(CamelModel):
    """Schema for paginated event list responses."""
    events: List[EventResponse]
    total: int
    page: int
    size: int
    has_next: bool
    has_prev: bool


class TicketTypeCreate(CamelModel):
    """Schema for adding a ticket type to an event."""
    name: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0)
    capacity: int = Field(..., ge=1)

    @field_validator('price')
    @classmethod
    def validate_price(cls, v):
        """Validate price has at most 2 decimal places."""
        if v.as_tuple().exponent < -2:
            raise ValueError('Price cannot have more than 2 decimal places')
        return v


class TicketTypeResponse(CamelModel):
    """Ticket type with its derived sold count."""
    id: int
    event_id: int
    name: str
    price: Decimal
    capacity: int
    sold: int
