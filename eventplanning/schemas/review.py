"""
Pydantic schemas for reviews.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from eventplanning.schemas.common import CamelModel


class ReviewCreate(CamelModel):
    """Schema for posting a review on an event or a vendor."""
    event_id: Optional[int] = None
    vendor_id: Optional[int] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode='after')
    def validate_target(self):
        if self.event_id is None and self.vendor_id is None:
            raise ValueError('A review needs an event or a vendor')
        return self


class ReviewUpdate(CamelModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewResponse(CamelModel):
    id: int
    user_id: int
    username: Optional[str] = None
    event_id: Optional[int] = None
    vendor_id: Optional[int] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class RatingSummaryResponse(CamelModel):
    """Average rating of an event or vendor."""
    average: Optional[float] = None
    count: int
