"""
Booking API routes.
Handles booking creation, quantity changes and cancellation.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.schemas.booking import BookingCreate, BookingResponse, BookingUpdate
from eventplanning.services.booking_service import booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(booking_data: BookingCreate, principal: Principal = Depends(get_current_principal)):
    """
    Book tickets of one ticket type.

    Args:
        booking_data: Event, ticket type and quantity
        principal: Authenticated caller

    Returns:
        Created booking with its total price
    """
    return await booking_service.create_booking(booking_data, principal)


@router.get("/mine", response_model=List[BookingResponse])
async def list_my_bookings(principal: Principal = Depends(get_current_principal)):
    return await booking_service.list_my_bookings(principal)


@router.get("", response_model=List[BookingResponse])
async def list_all_bookings(principal: Principal = Depends(get_current_principal)):
    """Every booking. Admin only."""
    return await booking_service.list_all_bookings(principal)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    return await booking_service.get_booking(booking_id, principal)


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    update_data: BookingUpdate,
    booking_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    """Change the quantity of a booking."""
    return await booking_service.update_booking(booking_id, update_data, principal)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_booking(booking_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    await booking_service.cancel_booking(booking_id, principal)
