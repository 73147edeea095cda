"""
Shared pydantic schemas.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to the naive UTC form stored in the database."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys; snake_case is accepted on input."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
        json_encoders = {
            Decimal: lambda v: float(v)
        }


class MessageResponse(CamelModel):
    """Generic success message."""
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    """Error body returned by every exception handler."""
    error_code: str
    error_message: str
    status_code: int
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime


class HealthCheckResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    database: str
    timestamp: datetime
