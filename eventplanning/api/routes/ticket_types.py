"""
Ticket type API routes.
Nested under the event they belong to.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.schemas.event import TicketTypeCreate, TicketTypeResponse
from eventplanning.services.ticketing_service import ticketing_service

router = APIRouter(prefix="/events/{event_id}/ticket-types", tags=["Ticket Types"])


@router.get("", response_model=List[TicketTypeResponse])
async def list_ticket_types(event_id: int = Path(..., ge=1)):
    """Ticket types of an event with their sold counts."""
    return await ticketing_service.list_ticket_types(event_id)


@router.post("", response_model=TicketTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket_type(
    ticket_data: TicketTypeCreate,
    event_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    return await ticketing_service.create_ticket_type(event_id, ticket_data, principal)


@router.delete("/{ticket_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ticket_type(
    event_id: int = Path(..., ge=1),
    ticket_type_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    await ticketing_service.delete_ticket_type(event_id, ticket_type_id, principal)
