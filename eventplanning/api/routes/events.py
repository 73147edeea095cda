"""
Event API routes.
Public catalog search and the organizer's event lifecycle.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.schemas.event import EventCreate, EventListResponse, EventResponse, EventUpdate
from eventplanning.services.event_service import event_service

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=EventListResponse)
async def search_events(
    q: Optional[str] = Query(None, description="Fragment of the event title"),
    scope: Optional[str] = Query(None, description="'upcoming' or 'past'"),
    page: int = Query(0, ge=0, description="Zero-based page number"),
    size: int = Query(10, ge=1, le=100, description="Page size")
):
    """
    Search active events.

    Args:
        q: Case-insensitive title filter
        scope: Time window of the search
        page: Page number
        size: Number of items per page

    Returns:
        One page of events
    """
    return await event_service.search_events(q, scope, page, size)


@router.get("/mine", response_model=List[EventResponse])
async def list_my_events(principal: Principal = Depends(get_current_principal)):
    """Events organized by the caller."""
    return await event_service.list_my_events(principal)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int = Path(..., ge=1)):
    return await event_service.get_event(event_id)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(event_data: EventCreate, principal: Principal = Depends(get_current_principal)):
    """Create a draft event. Organizers and admins only."""
    return await event_service.create_event(event_data, principal)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_data: EventUpdate,
    event_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    return await event_service.update_event(event_id, event_data, principal)


@router.patch("/{event_id}/publish", response_model=EventResponse)
async def publish_event(event_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    return await event_service.publish_event(event_id, principal)


@router.patch("/{event_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_event(event_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    """Cancel an event and every confirmed booking for it."""
    await event_service.cancel_event(event_id, principal)


@router.delete("/admin/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def admin_delete_event(event_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    await event_service.admin_delete_event(event_id, principal)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    """Delete an event together with its ticket types, bookings and payments."""
    await event_service.delete_event(event_id, principal)
