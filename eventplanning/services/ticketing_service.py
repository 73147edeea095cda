"""
Ticketing Service.
Manages ticket types per event and derives how many tickets each has sold.
"""

from decimal import Decimal
from typing import List, Optional
import logging

from eventplanning.core.errors import BusinessRuleViolation, NotFoundError, ValidationError
from eventplanning.core.policy import Action, Principal, authorize
from eventplanning.db.database import DatabaseManager, db_manager
from eventplanning.db.repositories import EventRepository, TicketTypeRepository
from eventplanning.schemas.event import TicketTypeCreate, TicketTypeResponse

logger = logging.getLogger(__name__)


def _to_response(ticket_type, sold: int) -> TicketTypeResponse:
    return TicketTypeResponse(
        id=ticket_type.id,
        event_id=ticket_type.event_id,
        name=ticket_type.name,
        price=ticket_type.price,
        capacity=ticket_type.capacity,
        sold=sold
    )


class TicketingService:
    """
    Ticket inventory service.
    Capacity is a fixed ceiling; sold is summed from confirmed bookings on every read.
    """

    def __init__(self, database: Optional[DatabaseManager] = None):
        self.db = database or db_manager

    async def list_ticket_types(self, event_id: int) -> List[TicketTypeResponse]:
        """
        List the ticket types of an event with their sold counts.

        Raises:
            NotFoundError: If the event does not exist
        """
        with self.db.get_session() as session:
            if EventRepository(session).get_by_id(event_id) is None:
                raise NotFoundError("Event not found")

            repo = TicketTypeRepository(session)
            ticket_types = repo.list_by_event(event_id)
            sold = repo.sold_by_ticket_type(ticket_type.id for ticket_type in ticket_types)
            return [_to_response(ticket_type, sold[ticket_type.id]) for ticket_type in ticket_types]

    async def get_sold(self, ticket_type_id: int) -> int:
        """Sum of quantities over confirmed bookings of a ticket type."""
        with self.db.get_session() as session:
            repo = TicketTypeRepository(session)
            if repo.get_by_id(ticket_type_id) is None:
                raise NotFoundError("Ticket type not found")
            return repo.sold(ticket_type_id)

    async def create_ticket_type(
        self,
        event_id: int,
        ticket_data: TicketTypeCreate,
        principal: Principal
    ) -> TicketTypeResponse:
        """
        Add a ticket type to an event.

        Args:
            event_id: Event receiving the ticket type
            ticket_data: Name, price and capacity
            principal: Calling user, who must organize the event

        Returns:
            The new ticket type with sold = 0

        Raises:
            NotFoundError: If the event does not exist
            AuthorizationError: If the principal is not the organizer
            ValidationError: If price is negative or capacity below one
        """
        if ticket_data.price < Decimal("0"):
            raise ValidationError("Price must not be negative")
        if ticket_data.capacity < 1:
            raise ValidationError("Capacity must be at least 1")

        with self.db.get_session() as session:
            event = EventRepository(session).get_by_id(event_id)
            if event is None:
                raise NotFoundError("Event not found")
            authorize(
                principal, Action.TICKET_TYPE_MANAGE, event,
                "You are not allowed to add ticket types to this event"
            )

            ticket_type = TicketTypeRepository(session).create(
                event_id=event_id,
                name=ticket_data.name,
                price=ticket_data.price,
                capacity=ticket_data.capacity
            )
            logger.info(f"Ticket type {ticket_type.id} created for event {event_id}")
            return _to_response(ticket_type, 0)

    async def delete_ticket_type(self, event_id: int, ticket_type_id: int, principal: Principal) -> None:
        """
        Remove a ticket type from an event.

        Raises:
            NotFoundError: If the event or ticket type does not exist
            AuthorizationError: If the principal is not the organizer
            BusinessRuleViolation: If the type belongs to another event or has bookings
        """
        with self.db.get_session() as session:
            event = EventRepository(session).get_by_id(event_id)
            if event is None:
                raise NotFoundError("Event not found")
            authorize(
                principal, Action.TICKET_TYPE_MANAGE, event,
                "You are not allowed to delete ticket types from this event"
            )

            repo = TicketTypeRepository(session)
            ticket_type = repo.get_by_id(ticket_type_id)
            if ticket_type is None:
                raise NotFoundError("Ticket type not found")
            if ticket_type.event_id != event_id:
                raise BusinessRuleViolation("Ticket type does not belong to this event")
            if repo.has_bookings(ticket_type_id):
                raise BusinessRuleViolation("Ticket type has bookings and cannot be deleted")

            repo.delete(ticket_type)
        logger.info(f"Ticket type {ticket_type_id} deleted from event {event_id}")


# Global ticketing service instance
ticketing_service = TicketingService()
