"""
Tests for the ORM models and their table constraints.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from eventplanning.db.repositories import BookingRepository, TicketTypeRepository, UserRepository
from eventplanning.models.base import utcnow
from eventplanning.models.booking import Booking, BookingStatus
from eventplanning.models.event import Event, EventStatus, TicketType
from eventplanning.models.user import PasswordResetToken, User, UserRole


class TestModelObjects:
    """Test cases for model helpers that need no database."""

    def test_user_repr_and_admin_flag(self):
        user = User(id=1, username="jane", email="jane@example.com", password_hash="x", role=UserRole.ADMIN)

        assert repr(user) == "<User(id=1, username='jane', role='ADMIN')>"
        assert user.is_admin is True

    def test_booking_is_active(self):
        assert Booking(status=BookingStatus.CONFIRMED).is_active is True
        assert Booking(status=BookingStatus.CANCELLED).is_active is False

    def test_event_is_upcoming(self):
        soon = Event(start_time=utcnow() + timedelta(hours=1), active=True)
        hidden = Event(start_time=utcnow() + timedelta(hours=1), active=False)
        over = Event(start_time=utcnow() - timedelta(hours=1), active=True)

        assert soon.is_upcoming is True
        assert hidden.is_upcoming is False
        assert over.is_upcoming is False

    def test_reset_token_expiry(self):
        assert PasswordResetToken(expires_at=utcnow() - timedelta(seconds=1)).is_expired is True
        assert PasswordResetToken(expires_at=utcnow() + timedelta(minutes=5)).is_expired is False

    def test_ticket_type_repr(self):
        ticket_type = TicketType(id=3, event_id=7, name="VIP")
        assert repr(ticket_type) == "<TicketType(id=3, event_id=7, name='VIP')>"


class TestModelConstraints:
    """Test cases for constraints enforced by the database."""

    def test_defaults_are_applied(self, database, organizer, make_event):
        event_id = make_event(organizer, status=EventStatus.DRAFT)

        with database.get_session() as session:
            ticket_type = TicketTypeRepository(session).create(
                event_id=event_id, name="General", price=Decimal("5.00"), capacity=10
            )
            assert ticket_type.version == 1
            assert ticket_type.created_at is not None

    def test_usernames_are_unique(self, database, organizer):
        with pytest.raises(IntegrityError):
            with database.get_session() as session:
                UserRepository(session).create(
                    username="organizer", email="different@example.com", password_hash="x"
                )

    def test_booking_quantity_must_be_positive(self, database, organizer, attendee, make_event, make_ticket_type):
        event_id = make_event(organizer)
        ticket_type_id = make_ticket_type(event_id)

        with pytest.raises(IntegrityError):
            with database.get_session() as session:
                BookingRepository(session).create(
                    user_id=attendee.user_id, event_id=event_id, ticket_type_id=ticket_type_id,
                    quantity=0, total_price=Decimal("0.00")
                )

    def test_ticket_capacity_must_be_positive(self, database, organizer, make_event):
        event_id = make_event(organizer)

        with pytest.raises(IntegrityError):
            with database.get_session() as session:
                TicketTypeRepository(session).create(
                    event_id=event_id, name="Broken", price=Decimal("1.00"), capacity=0
                )

    def test_foreign_keys_are_enforced(self, database):
        with pytest.raises(IntegrityError):
            with database.get_session() as session:
                TicketTypeRepository(session).create(
                    event_id=9999, name="Orphan", price=Decimal("1.00"), capacity=1
                )
