"""
Booking Service.
Handles booking creation, quantity updates and cancellation against ticket inventory.
"""

from decimal import Decimal
from typing import Iterable, List, Optional
import logging

from sqlalchemy.orm import Session

from eventplanning.core.errors import (
    BusinessRuleViolation, ErrorCode, NotFoundError, ValidationError
)
from eventplanning.core.policy import Action, Principal, authorize
from eventplanning.db.database import DatabaseManager, db_manager
from eventplanning.db.repositories import (
    BookingRepository, EventRepository, TicketTypeRepository, UserRepository
)
from eventplanning.models.booking import Booking, BookingStatus
from eventplanning.models.event import TicketType
from eventplanning.models.notification import NotificationType
from eventplanning.schemas.booking import BookingCreate, BookingResponse, BookingUpdate
from eventplanning.services.notification_service import NotificationService, notification_service

logger = logging.getLogger(__name__)

NOT_ENOUGH_TICKETS = "Not enough tickets available for this type"


def build_booking_responses(session: Session, bookings: Iterable[Booking]) -> List[BookingResponse]:
    """Attach event titles and ticket type names using one query per table."""
    bookings = list(bookings)
    events = EventRepository(session).get_many(b.event_id for b in bookings)
    ticket_types = TicketTypeRepository(session).get_many(b.ticket_type_id for b in bookings)

    responses = []
    for booking in bookings:
        event = events.get(booking.event_id)
        ticket_type = ticket_types.get(booking.ticket_type_id)
        responses.append(BookingResponse(
            id=booking.id,
            user_id=booking.user_id,
            event_id=booking.event_id,
            event_title=event.title if event else None,
            ticket_type_id=booking.ticket_type_id,
            ticket_type_name=ticket_type.name if ticket_type else None,
            quantity=booking.quantity,
            total_price=booking.total_price,
            status=booking.status,
            created_at=booking.created_at
        ))
    return responses


class BookingService:
    """
    Booking ledger service.

    Bookings are serialized per ticket type: the inventory guard on the ticket
    type row is taken before the sold count is read, so two concurrent
    requests cannot both claim the last tickets.
    """

    def __init__(
        self,
        database: Optional[DatabaseManager] = None,
        notifications: Optional[NotificationService] = None
    ):
        self.db = database or db_manager
        self.notifications = notifications or notification_service

    @staticmethod
    def _check_quantity(quantity: int, ticket_type: TicketType):
        if quantity is None or quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")
        if quantity > ticket_type.capacity:
            raise BusinessRuleViolation(NOT_ENOUGH_TICKETS, ErrorCode.INSUFFICIENT_CAPACITY)

    def _reserve(
        self,
        session: Session,
        ticket_type: TicketType,
        quantity: int,
        exclude_booking_id: Optional[int] = None
    ):
        """
        Take the inventory guard and check remaining tickets.

        Args:
            session: Session of the current unit of work
            ticket_type: Ticket type being booked
            quantity: Tickets requested
            exclude_booking_id: Booking whose own tickets do not count as sold

        Raises:
            NotFoundError: If the ticket type disappeared
            BusinessRuleViolation: If fewer than `quantity` tickets remain
        """
        repo = TicketTypeRepository(session)
        if not repo.lock_inventory(ticket_type.id):
            raise NotFoundError("Ticket type not found")

        sold = repo.sold(ticket_type.id, exclude_booking_id=exclude_booking_id)
        if quantity > ticket_type.capacity - sold:
            logger.warning(
                f"Rejected booking of {quantity} for ticket type {ticket_type.id}: "
                f"{sold}/{ticket_type.capacity} sold"
            )
            raise BusinessRuleViolation(NOT_ENOUGH_TICKETS, ErrorCode.INSUFFICIENT_CAPACITY)

    async def create_booking(self, booking_data: BookingCreate, principal: Principal) -> BookingResponse:
        """
        Create a confirmed booking for the principal.

        Args:
            booking_data: Event, ticket type and quantity
            principal: Calling user, who becomes the owner

        Returns:
            The created booking with total_price = price x quantity

        Raises:
            NotFoundError: If the user, event or ticket type does not exist
            ValidationError: If quantity is not positive
            BusinessRuleViolation: If the ticket type belongs to another event
                or not enough tickets remain
        """
        with self.db.get_session() as session:
            if UserRepository(session).get_by_id(principal.user_id) is None:
                raise NotFoundError("User not found")

            event = EventRepository(session).get_by_id(booking_data.event_id)
            if event is None:
                raise NotFoundError("Event not found")

            ticket_type = TicketTypeRepository(session).get_by_id(booking_data.ticket_type_id)
            if ticket_type is None:
                raise NotFoundError("Ticket type not found")
            if ticket_type.event_id != event.id:
                raise BusinessRuleViolation("Ticket type does not belong to this event")
            if not event.active:
                raise BusinessRuleViolation("Event is not open for booking", ErrorCode.INVALID_STATE)

            self._check_quantity(booking_data.quantity, ticket_type)
            self._reserve(session, ticket_type, booking_data.quantity)

            booking = BookingRepository(session).create(
                user_id=principal.user_id,
                event_id=event.id,
                ticket_type_id=ticket_type.id,
                quantity=booking_data.quantity,
                total_price=Decimal(ticket_type.price) * booking_data.quantity,
                status=BookingStatus.CONFIRMED
            )
            response = build_booking_responses(session, [booking])[0]

        logger.info(
            f"Booking created: {response.id} for user {principal.user_id}, "
            f"{response.quantity} x ticket type {response.ticket_type_id}"
        )
        await self.notifications.notify(
            principal.user_id,
            "Booking confirmed",
            f"Your booking of {response.quantity} ticket(s) for '{response.event_title}' is confirmed.",
            NotificationType.BOOKING,
            event_id=response.event_id
        )
        return response

    async def get_booking(self, booking_id: int, principal: Principal) -> BookingResponse:
        """
        Get a booking owned by the principal.

        Raises:
            NotFoundError: If the booking does not exist
            AuthorizationError: If the principal does not own it
        """
        with self.db.get_session() as session:
            booking = self._get_owned(session, booking_id, principal, "You cannot view this booking")
            return build_booking_responses(session, [booking])[0]

    async def list_my_bookings(self, principal: Principal) -> List[BookingResponse]:
        """Confirmed bookings of the principal, newest first."""
        with self.db.get_session() as session:
            bookings = BookingRepository(session).list_by_user(principal.user_id, BookingStatus.CONFIRMED)
            return build_booking_responses(session, bookings)

    async def list_all_bookings(self, principal: Principal) -> List[BookingResponse]:
        """Every booking in the ledger. Admin only."""
        authorize(principal, Action.BOOKING_LIST_ALL)
        with self.db.get_session() as session:
            return build_booking_responses(session, BookingRepository(session).list_all())

    async def update_booking(
        self,
        booking_id: int,
        update_data: BookingUpdate,
        principal: Principal
    ) -> BookingResponse:
        """
        Change the quantity of a booking and reprice it at the current ticket price.

        Raises:
            NotFoundError: If the booking or its ticket type does not exist
            AuthorizationError: If the principal does not own the booking
            ValidationError: If quantity is not positive
            BusinessRuleViolation: If the booking is cancelled or not enough tickets remain
        """
        with self.db.get_session() as session:
            booking = self._get_owned(session, booking_id, principal, "You cannot update this booking")
            if booking.status == BookingStatus.CANCELLED:
                raise BusinessRuleViolation("Cannot update a cancelled booking", ErrorCode.INVALID_STATE)

            ticket_type = TicketTypeRepository(session).get_by_id(booking.ticket_type_id)
            if ticket_type is None:
                raise NotFoundError("Ticket type not found")

            self._check_quantity(update_data.quantity, ticket_type)
            self._reserve(session, ticket_type, update_data.quantity, exclude_booking_id=booking.id)

            booking.quantity = update_data.quantity
            booking.total_price = Decimal(ticket_type.price) * update_data.quantity
            session.flush()
            logger.info(f"Booking updated: {booking_id} quantity={booking.quantity}")
            return build_booking_responses(session, [booking])[0]

    async def cancel_booking(self, booking_id: int, principal: Principal) -> None:
        """
        Cancel a booking owned by the principal. Cancelling twice is a no-op.

        Raises:
            NotFoundError: If the booking does not exist
            AuthorizationError: If the principal does not own it
        """
        with self.db.get_session() as session:
            booking = self._get_owned(session, booking_id, principal, "You cannot cancel this booking")
            if booking.status == BookingStatus.CANCELLED:
                return
            booking.status = BookingStatus.CANCELLED
            event_id = booking.event_id

        logger.info(f"Booking cancelled: {booking_id} by user {principal.user_id}")
        await self.notifications.notify(
            principal.user_id,
            "Booking cancelled",
            f"Your booking #{booking_id} has been cancelled.",
            NotificationType.BOOKING,
            event_id=event_id
        )

    def _get_owned(self, session: Session, booking_id: int, principal: Principal, message: str) -> Booking:
        booking = BookingRepository(session).get_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        authorize(principal, Action.BOOKING_ACCESS, booking, message)
        return booking


# Global booking service instance
booking_service = BookingService()
