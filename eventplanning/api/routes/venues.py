"""
Venue API routes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.schemas.vendor import VenueCreate, VenueResponse, VenueUpdate
from eventplanning.services.vendor_service import vendor_service

router = APIRouter(prefix="/venues", tags=["Venues"])


@router.get("", response_model=List[VenueResponse])
async def search_venues(q: Optional[str] = Query(None, description="Fragment of name or address")):
    return await vendor_service.search_venues(q)


@router.get("/{venue_id}", response_model=VenueResponse)
async def get_venue(venue_id: int = Path(..., ge=1)):
    return await vendor_service.get_venue(venue_id)


@router.post("", response_model=VenueResponse, status_code=status.HTTP_201_CREATED)
async def create_venue(venue_data: VenueCreate, principal: Principal = Depends(get_current_principal)):
    return await vendor_service.create_venue(venue_data, principal)


@router.put("/{venue_id}", response_model=VenueResponse)
async def update_venue(
    venue_data: VenueUpdate,
    venue_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    return await vendor_service.update_venue(venue_id, venue_data, principal)


@router.patch("/{venue_id}/approve", response_model=VenueResponse)
async def approve_venue(venue_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    return await vendor_service.approve_venue(venue_id, principal)


@router.delete("/{venue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_venue(venue_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    await vendor_service.delete_venue(venue_id, principal)
