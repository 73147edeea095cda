"""
Tests for BookingService.
Covers sold derivation, price snapshots, capacity rejection and ownership.
"""

from decimal import Decimal

import pytest

from eventplanning.core.errors import (
    AuthorizationError, BusinessRuleViolation, ErrorCode, NotFoundError, ValidationError
)
from eventplanning.db.repositories import BookingRepository, TicketTypeRepository
from eventplanning.models.booking import BookingStatus
from eventplanning.models.notification import NotificationType
from eventplanning.schemas.booking import BookingCreate, BookingUpdate
from eventplanning.services.booking_service import NOT_ENOUGH_TICKETS, BookingService
from eventplanning.services.notification_service import NotificationService
from eventplanning.services.ticketing_service import TicketingService


class TestBookingCreation:
    """Test cases for booking creation."""

    @pytest.fixture
    def booking_service(self, database):
        return BookingService(database)

    @pytest.fixture
    def ticketing_service(self, database):
        return TicketingService(database)

    @pytest.fixture
    def event_id(self, organizer, make_event):
        return make_event(organizer)

    @pytest.fixture
    def ticket_type_id(self, event_id, make_ticket_type):
        return make_ticket_type(event_id, price="10.00", capacity=5)

    @pytest.mark.asyncio
    async def test_create_booking_prices_and_counts(
        self, booking_service, ticketing_service, attendee, event_id, ticket_type_id
    ):
        """Test that a booking snapshots price x quantity and raises sold."""
        booking = await booking_service.create_booking(
            BookingCreate(event_id=event_id, ticket_type_id=ticket_type_id, quantity=3), attendee
        )

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.user_id == attendee.user_id
        assert booking.total_price == Decimal("30.00")
        assert booking.event_title == "Launch Party"
        assert booking.ticket_type_name == "General"
        assert await ticketing_service.get_sold(ticket_type_id) == 3

    @pytest.mark.asyncio
    async def test_quantity_above_capacity_is_rejected_without_row(
        self, booking_service, ticketing_service, database, attendee, event_id, ticket_type_id
    ):
        """Test that asking for 6 of 5 tickets persists nothing."""
        with pytest.raises(BusinessRuleViolation) as exc_info:
            await booking_service.create_booking(
                BookingCreate(event_id=event_id, ticket_type_id=ticket_type_id, quantity=6), attendee
            )

        assert exc_info.value.code == ErrorCode.INSUFFICIENT_CAPACITY
        assert exc_info.value.message == NOT_ENOUGH_TICKETS
        assert await ticketing_service.get_sold(ticket_type_id) == 0
        with database.get_session() as session:
            assert BookingRepository(session).count() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -2])
    async def test_non_positive_quantity_is_a_validation_error(
        self, booking_service, attendee, event_id, ticket_type_id, quantity
    ):
        with pytest.raises(ValidationError):
            await booking_service.create_booking(
                BookingCreate(event_id=event_id, ticket_type_id=ticket_type_id, quantity=quantity), attendee
            )

    @pytest.mark.asyncio
    async def test_remaining_tickets_are_enforced(
        self, booking_service, attendee, other_user, event_id, ticket_type_id
    ):
        """Test that the second booking only fits into what is left."""
        await booking_service.create_booking(
            BookingCreate(event_id=event_id, ticket_type_id=ticket_type_id, quantity=4), attendee
        )

        with pytest.raises(BusinessRuleViolation):
            await booking_service.create_booking(
                BookingCreate(event_id=event_id, ticket_type_id=ticket_type_id, quantity=2), other_user
            )

        booking = await booking_service.create_booking(
            BookingCreate(event_id=event_id, ticket_type_id=ticket_type_id, quantity=1), other_user
        )
        assert booking.quantity == 1

    @pytest.mark.asyncio
    async def test_ticket_type_must_belong_to_event(
        self, booking_service, organizer, attendee, make_event, ticket_type_id
    ):
        other_event_id = make_event(organizer, title="Other Event")

        with pytest.raises(BusinessRuleViolation) as exc_info:
            await booking_service.create_booking(
                BookingCreate(event_id=other_event_id, ticket_type_id=ticket_type_id, quantity=1), attendee
            )
        assert exc_info.value.message == "Ticket type does not belong to this event"

    @pytest.mark.asyncio
    async def test_missing_event_and_ticket_type(self, booking_service, attendee, event_id):
        with pytest.raises(NotFoundError):
            await booking_service.create_booking(
                BookingCreate(event_id=9999, ticket_type_id=1, quantity=1), attendee
            )
        with pytest.raises(NotFoundError):
            await booking_service.create_booking(
                BookingCreate(event_id=event_id, ticket_type_id=9999, quantity=1), attendee
            )

    @pytest.mark.asyncio
    async def test_inactive_event_is_not_bookable(
        self, booking_service, organizer, attendee, make_event, make_ticket_type
    ):
        event_id = make_event(organizer, active=False)
        ticket_type_id = make_ticket_type(event_id)

        with pytest.raises(BusinessRuleViolation):
            await booking_service.create_booking(
                BookingCreate(event_id=event_id, ticket_type_id=ticket_type_id, quantity=1), attendee
            )

    @pytest.mark.asyncio
    async def test_booking_notifies_the_user(self, database, attendee, event_id, ticket_type_id):
        notifications = NotificationService(database)
        service = BookingService(database, notifications)

        await service.create_booking(
            BookingCreate(event_id=event_id, ticket_type_id=ticket_type_id, quantity=1), attendee
        )

        latest = await notifications.get_latest(attendee)
        assert len(latest) == 1
        assert latest[0].type == NotificationType.BOOKING


class TestBookingLifecycle:
    """Test cases for reading, updating and cancelling bookings."""

    @pytest.fixture
    def booking_service(self, database):
        return BookingService(database)

    @pytest.fixture
    def ticketing_service(self, database):
        return TicketingService(database)

    @pytest.fixture
    def ticket_type_id(self, organizer, make_event, make_ticket_type):
        return make_ticket_type(make_event(organizer), price="10.00", capacity=5)

    @pytest.fixture
    def booking_request(self, database, ticket_type_id):
        with database.get_session() as session:
            event_id = TicketTypeRepository(session).get_by_id(ticket_type_id).event_id
        return BookingCreate(event_id=event_id, ticket_type_id=ticket_type_id, quantity=2)

    @pytest.mark.asyncio
    async def test_other_user_cannot_read_booking(self, booking_service, attendee, other_user, booking_request):
        booking = await booking_service.create_booking(booking_request, attendee)

        with pytest.raises(AuthorizationError):
            await booking_service.get_booking(booking.id, other_user)

        fetched = await booking_service.get_booking(booking.id, attendee)
        assert fetched.id == booking.id

    @pytest.mark.asyncio
    async def test_update_reprices_at_current_price(
        self, booking_service, database, attendee, booking_request, ticket_type_id
    ):
        """Test that an update uses the price at update time, not creation time."""
        booking = await booking_service.create_booking(booking_request, attendee)

        with database.get_session() as session:
            TicketTypeRepository(session).get_by_id(ticket_type_id).price = Decimal("12.50")

        unchanged = await booking_service.get_booking(booking.id, attendee)
        assert unchanged.total_price == Decimal("20.00")

        updated = await booking_service.update_booking(booking.id, BookingUpdate(quantity=4), attendee)
        assert updated.quantity == 4
        assert updated.total_price == Decimal("50.00")

    @pytest.mark.asyncio
    async def test_update_does_not_count_own_tickets(self, booking_service, attendee, booking_request):
        """Test that growing a booking to the full capacity is allowed."""
        booking = await booking_service.create_booking(booking_request, attendee)

        updated = await booking_service.update_booking(booking.id, BookingUpdate(quantity=5), attendee)
        assert updated.quantity == 5

        with pytest.raises(BusinessRuleViolation):
            await booking_service.update_booking(booking.id, BookingUpdate(quantity=6), attendee)

    @pytest.mark.asyncio
    async def test_cancel_releases_tickets(
        self, booking_service, ticketing_service, attendee, booking_request, ticket_type_id
    ):
        booking = await booking_service.create_booking(booking_request, attendee)
        assert await ticketing_service.get_sold(ticket_type_id) == 2

        await booking_service.cancel_booking(booking.id, attendee)
        await booking_service.cancel_booking(booking.id, attendee)

        assert await ticketing_service.get_sold(ticket_type_id) == 0
        assert await booking_service.list_my_bookings(attendee) == []

    @pytest.mark.asyncio
    async def test_cancelled_booking_cannot_be_updated(self, booking_service, attendee, booking_request):
        booking = await booking_service.create_booking(booking_request, attendee)
        await booking_service.cancel_booking(booking.id, attendee)

        with pytest.raises(BusinessRuleViolation) as exc_info:
            await booking_service.update_booking(booking.id, BookingUpdate(quantity=1), attendee)
        assert exc_info.value.code == ErrorCode.INVALID_STATE

    @pytest.mark.asyncio
    async def test_list_all_requires_admin(self, booking_service, attendee, admin, booking_request):
        await booking_service.create_booking(booking_request, attendee)

        with pytest.raises(AuthorizationError):
            await booking_service.list_all_bookings(attendee)

        bookings = await booking_service.list_all_bookings(admin)
        assert len(bookings) == 1
