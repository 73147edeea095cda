"""
Pydantic schemas for vendor and venue listings.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from eventplanning.schemas.common import CamelModel


class VendorCreate(CamelModel):
    """Schema for listing a vendor."""
    name: str = Field(..., min_length=1, max_length=150)
    category: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    description: Optional[str] = None


class VendorUpdate(CamelModel):
    """Schema for vendor updates; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    category: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    description: Optional[str] = None


class VendorResponse(CamelModel):
    id: int
    name: str
    category: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    approved: bool
    owner_id: int
    created_at: datetime


class VenueCreate(CamelModel):
    """Schema for listing a venue."""
    name: str = Field(..., min_length=1, max_length=150)
    address: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=1)


class VenueUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    address: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=1)


class VenueResponse(CamelModel):
    id: int
    name: str
    address: Optional[str] = None
    description: Optional[str] = None
    capacity: Optional[int] = None
    approved: bool
    created_by_id: int
    created_at: datetime
