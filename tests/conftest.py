"""
Test configuration and fixtures for the Event Planning Service.
"""

import asyncio
import os
import tempfile
from datetime import timedelta
from decimal import Decimal

import pytest

# Set test environment variables before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-super-secret-jwt-key-for-testing-only"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["JWT_EXPIRY_MINUTES"] = "30"
os.environ["ENABLE_EMAIL_NOTIFICATIONS"] = "false"
os.environ["SLIP_UPLOAD_DIR"] = tempfile.mkdtemp(prefix="eventplanning-slips-")
os.environ["LOG_LEVEL"] = "WARNING"
for key in ("ZERO_TOKEN", "ADMIN_USERNAME", "ADMIN_EMAIL", "ADMIN_PASSWORD", "PASSWORD_RESET_RETURN_TOKEN"):
    os.environ.pop(key, None)

from fastapi.testclient import TestClient  # noqa: E402

from eventplanning.core.policy import Principal  # noqa: E402
from eventplanning.db.database import db_manager  # noqa: E402
from eventplanning.db.repositories import (  # noqa: E402
    EventRepository, TicketTypeRepository, UserRepository
)
from eventplanning.main import app  # noqa: E402
from eventplanning.models.base import utcnow  # noqa: E402
from eventplanning.models.event import EventStatus  # noqa: E402
from eventplanning.models.user import UserRole  # noqa: E402
from eventplanning.services.jwt_manager import jwt_manager  # noqa: E402
from eventplanning.services.password_manager import password_manager  # noqa: E402

TEST_PASSWORD = "Password123"


@pytest.fixture(scope="session")
def plain_password():
    """Password shared by every fixture user."""
    return TEST_PASSWORD


@pytest.fixture(scope="session")
def password_hash():
    """Hash the shared test password once per session."""
    return password_manager.hash_password(TEST_PASSWORD)


@pytest.fixture(scope="function")
def database():
    """Fresh in-memory database bound to the global database manager."""
    db_manager.initialize("sqlite://")
    db_manager.create_tables()
    yield db_manager
    db_manager.drop_tables()
    db_manager.close()


@pytest.fixture
def create_user(database, password_hash):
    """Factory inserting a user and returning its Principal."""
    def _create(username: str, role: UserRole = UserRole.USER) -> Principal:
        with database.get_session() as session:
            user = UserRepository(session).create(
                username=username,
                email=f"{username}@example.com",
                password_hash=password_hash,
                role=role
            )
            return Principal(user_id=user.id, username=user.username, role=user.role)
    return _create


@pytest.fixture
def organizer(create_user):
    return create_user("organizer", UserRole.ORGANIZER)


@pytest.fixture
def attendee(create_user):
    return create_user("attendee")


@pytest.fixture
def other_user(create_user):
    return create_user("other_user")


@pytest.fixture
def admin(create_user):
    return create_user("admin", UserRole.ADMIN)


@pytest.fixture
def make_event(database):
    """Factory inserting an event and returning its id."""
    def _make(
        organizer: Principal,
        title: str = "Launch Party",
        starts_in: timedelta = timedelta(days=7),
        status: EventStatus = EventStatus.PUBLISHED,
        active: bool = True
    ) -> int:
        start = utcnow() + starts_in
        with database.get_session() as session:
            event = EventRepository(session).create(
                title=title,
                description="Test event",
                venue="Main Hall",
                start_time=start,
                end_time=start + timedelta(hours=3),
                status=status,
                active=active,
                organizer_id=organizer.user_id
            )
            return event.id
    return _make


@pytest.fixture
def make_ticket_type(database):
    """Factory inserting a ticket type and returning its id."""
    def _make(event_id: int, price: str = "10.00", capacity: int = 5, name: str = "General") -> int:
        with database.get_session() as session:
            ticket_type = TicketTypeRepository(session).create(
                event_id=event_id,
                name=name,
                price=Decimal(price),
                capacity=capacity
            )
            return ticket_type.id
    return _make


@pytest.fixture
def client(database):
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Build a bearer header for a principal."""
    if not jwt_manager.is_initialized:
        asyncio.run(jwt_manager.initialize())

    def _headers(principal: Principal) -> dict:
        token = jwt_manager.create_access_token({
            "user_id": principal.user_id,
            "username": principal.username,
            "role": principal.role.value
        })
        return {"Authorization": f"Bearer {token}"}
    return _headers
