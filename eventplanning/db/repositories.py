"""
Repositories for the Event Planning Service.
Entities reference each other by id; related rows are loaded here explicitly.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from eventplanning.models.user import User, PasswordResetToken
from eventplanning.models.event import Event, TicketType
from eventplanning.models.booking import Booking, BookingStatus
from eventplanning.models.payment import Payment, PaymentStatus
from eventplanning.models.vendor import Vendor, Venue
from eventplanning.models.review import Review
from eventplanning.models.task import Task
from eventplanning.models.notification import Notification, NotificationStatus


class BaseRepository:
    """
    Base repository class following Repository pattern.
    Writes are flushed, never committed; the session owner commits.
    """

    def __init__(self, session: Session, model_class):
        self.session = session
        self.model_class = model_class

    def add(self, entity):
        """Persist a new entity and assign its primary key."""
        self.session.add(entity)
        self.session.flush()
        return entity

    def create(self, **kwargs):
        """Create a new entity."""
        return self.add(self.model_class(**kwargs))

    def get_by_id(self, entity_id: int):
        """Get entity by ID."""
        return self.session.query(self.model_class).filter(
            self.model_class.id == entity_id
        ).first()

    def get_many(self, entity_ids: Iterable[int]) -> Dict[int, object]:
        """Load several entities in one query, keyed by id."""
        ids = {entity_id for entity_id in entity_ids if entity_id is not None}
        if not ids:
            return {}
        rows = self.session.query(self.model_class).filter(self.model_class.id.in_(ids)).all()
        return {row.id: row for row in rows}

    def get_all(self, skip: int = 0, limit: int = 100):
        """Get all entities with pagination."""
        return self.session.query(self.model_class).order_by(
            self.model_class.id
        ).offset(skip).limit(limit).all()

    def delete(self, entity):
        """Delete an entity."""
        self.session.delete(entity)
        self.session.flush()

    def count(self) -> int:
        """Count total entities."""
        return self.session.query(self.model_class).count()


class UserRepository(BaseRepository):
    """User repository for user-related database operations."""

    def __init__(self, session: Session):
        super().__init__(session, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        return self.session.query(User).filter(func.lower(User.email) == email.lower()).first()

    def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        return self.session.query(User).filter(User.username == username).first()

    def get_by_login(self, login: str) -> Optional[User]:
        """Get user by username, falling back to email."""
        return self.get_by_username(login) or self.get_by_email(login)

    def search(self, q: Optional[str], skip: int = 0, limit: int = 20) -> Tuple[List[User], int]:
        """Search users by username or email."""
        query = self.session.query(User)
        if q:
            pattern = f"%{q.lower()}%"
            query = query.filter(or_(
                func.lower(User.username).like(pattern),
                func.lower(User.email).like(pattern)
            ))
        total = query.count()
        users = query.order_by(User.id).offset(skip).limit(limit).all()
        return users, total

    def list_ids(self) -> List[int]:
        """Get the ids of every user."""
        return [row[0] for row in self.session.query(User.id).order_by(User.id).all()]


class PasswordResetRepository(BaseRepository):
    """Password reset token repository."""

    def __init__(self, session: Session):
        super().__init__(session, PasswordResetToken)

    def get_by_token(self, token: str) -> Optional[PasswordResetToken]:
        return self.session.query(PasswordResetToken).filter(
            PasswordResetToken.token == token
        ).first()

    def delete_for_user(self, user_id: int) -> int:
        return self.session.query(PasswordResetToken).filter(
            PasswordResetToken.user_id == user_id
        ).delete(synchronize_session=False)


class EventRepository(BaseRepository):
    """Event repository with search and cascading deletion."""

    def __init__(self, session: Session):
        super().__init__(session, Event)

    def search(
        self,
        q: Optional[str],
        scope: Optional[str],
        now: datetime,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Event], int]:
        """
        Search active events.

        Args:
            q: Case-insensitive fragment of the title
            scope: 'upcoming', 'past' or None for every active event
            now: Reference time for the scope filters
            skip: Number of rows to skip
            limit: Page size

        Returns:
            Tuple of (events, total matching rows)
        """
        query = self.session.query(Event).filter(Event.active.is_(True))

        if q:
            query = query.filter(func.lower(Event.title).like(f"%{q.lower()}%"))

        if scope == "upcoming":
            query = query.filter(Event.start_time >= now).order_by(Event.start_time.asc(), Event.id)
        elif scope == "past":
            query = query.filter(Event.end_time < now).order_by(Event.end_time.desc(), Event.id)
        else:
            query = query.order_by(Event.start_time.desc(), Event.id)

        total = query.count()
        events = query.offset(skip).limit(limit).all()
        return events, total

    def list_by_organizer(self, organizer_id: int) -> List[Event]:
        return self.session.query(Event).filter(
            Event.organizer_id == organizer_id
        ).order_by(Event.start_time.desc(), Event.id).all()

    def delete_cascade(self, event: Event):
        """Delete an event together with every row that references it."""
        event_id = event.id
        self.session.query(Payment).filter(Payment.event_id == event_id).delete(synchronize_session=False)
        self.session.query(Booking).filter(Booking.event_id == event_id).delete(synchronize_session=False)
        self.session.query(TicketType).filter(TicketType.event_id == event_id).delete(synchronize_session=False)
        self.session.query(Task).filter(Task.event_id == event_id).delete(synchronize_session=False)
        self.session.query(Review).filter(Review.event_id == event_id).delete(synchronize_session=False)
        self.session.query(Notification).filter(Notification.event_id == event_id).delete(synchronize_session=False)
        self.delete(event)


class TicketTypeRepository(BaseRepository):
    """Ticket type repository with the inventory guard and sold aggregates."""

    def __init__(self, session: Session):
        super().__init__(session, TicketType)

    def list_by_event(self, event_id: int) -> List[TicketType]:
        return self.session.query(TicketType).filter(
            TicketType.event_id == event_id
        ).order_by(TicketType.id).all()

    def lock_inventory(self, ticket_type_id: int) -> bool:
        """
        Take the inventory guard for a ticket type.

        Bumps the version column as the first write of the transaction, which
        holds a write lock until commit. Concurrent bookings for the same type
        wait here, then read the committed sold count.

        Returns:
            True if the ticket type row exists
        """
        updated = self.session.query(TicketType).filter(
            TicketType.id == ticket_type_id
        ).update(
            {TicketType.version: TicketType.version + 1},
            synchronize_session=False
        )
        return updated > 0

    def sold(self, ticket_type_id: int, exclude_booking_id: Optional[int] = None) -> int:
        """Sum of quantities over confirmed bookings of a ticket type."""
        query = self.session.query(func.coalesce(func.sum(Booking.quantity), 0)).filter(
            Booking.ticket_type_id == ticket_type_id,
            Booking.status == BookingStatus.CONFIRMED
        )
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return int(query.scalar())

    def sold_by_ticket_type(self, ticket_type_ids: Iterable[int]) -> Dict[int, int]:
        """Sold counts for several ticket types in one grouped query."""
        ids = list(ticket_type_ids)
        if not ids:
            return {}
        rows = self.session.query(
            Booking.ticket_type_id, func.sum(Booking.quantity)
        ).filter(
            Booking.ticket_type_id.in_(ids),
            Booking.status == BookingStatus.CONFIRMED
        ).group_by(Booking.ticket_type_id).all()
        sold = {ticket_type_id: 0 for ticket_type_id in ids}
        sold.update({ticket_type_id: int(total) for ticket_type_id, total in rows})
        return sold

    def has_bookings(self, ticket_type_id: int) -> bool:
        return self.session.query(Booking.id).filter(
            Booking.ticket_type_id == ticket_type_id
        ).first() is not None


class BookingRepository(BaseRepository):
    """Booking ledger repository."""

    def __init__(self, session: Session):
        super().__init__(session, Booking)

    def list_by_user(self, user_id: int, status: Optional[BookingStatus] = None) -> List[Booking]:
        query = self.session.query(Booking).filter(Booking.user_id == user_id)
        if status is not None:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def list_all(self) -> List[Booking]:
        return self.session.query(Booking).order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def cancel_confirmed_for_event(self, event_id: int) -> int:
        """Cancel every confirmed booking of an event."""
        return self.session.query(Booking).filter(
            Booking.event_id == event_id,
            Booking.status == BookingStatus.CONFIRMED
        ).update({Booking.status: BookingStatus.CANCELLED}, synchronize_session=False)

    def list_user_ids_for_event(self, event_id: int) -> List[int]:
        rows = self.session.query(Booking.user_id).filter(Booking.event_id == event_id).distinct().all()
        return [row[0] for row in rows]


class PaymentRepository(BaseRepository):
    """Payment repository with review listings and the revenue summary."""

    def __init__(self, session: Session):
        super().__init__(session, Payment)

    def list_by_status(self, status: Optional[PaymentStatus] = None) -> List[Payment]:
        query = self.session.query(Payment)
        if status is not None:
            query = query.filter(Payment.status == status)
        return query.order_by(Payment.created_at.desc(), Payment.id.desc()).all()

    def list_by_payer(self, payer_id: int) -> List[Payment]:
        return self.session.query(Payment).filter(
            Payment.payer_id == payer_id
        ).order_by(Payment.created_at.desc(), Payment.id.desc()).all()

    def count_by_status(self) -> Dict[PaymentStatus, int]:
        rows = self.session.query(Payment.status, func.count(Payment.id)).group_by(Payment.status).all()
        counts = {status: 0 for status in PaymentStatus}
        counts.update({status: count for status, count in rows})
        return counts

    def approved_amounts(self) -> List[Decimal]:
        rows = self.session.query(Payment.amount).filter(Payment.status == PaymentStatus.APPROVED).all()
        return [Decimal(str(row[0])) for row in rows]


class VendorRepository(BaseRepository):
    """Vendor repository."""

    def __init__(self, session: Session):
        super().__init__(session, Vendor)

    def search(self, q: Optional[str]) -> List[Vendor]:
        query = self.session.query(Vendor)
        if q:
            pattern = f"%{q.lower()}%"
            query = query.filter(or_(
                func.lower(Vendor.name).like(pattern),
                func.lower(Vendor.category).like(pattern)
            ))
        return query.order_by(Vendor.name, Vendor.id).all()

    def delete_cascade(self, vendor: Vendor):
        self.session.query(Review).filter(Review.vendor_id == vendor.id).delete(synchronize_session=False)
        self.delete(vendor)


class VenueRepository(BaseRepository):
    """Venue repository."""

    def __init__(self, session: Session):
        super().__init__(session, Venue)

    def search(self, q: Optional[str]) -> List[Venue]:
        query = self.session.query(Venue)
        if q:
            pattern = f"%{q.lower()}%"
            query = query.filter(or_(
                func.lower(Venue.name).like(pattern),
                func.lower(Venue.address).like(pattern)
            ))
        return query.order_by(Venue.name, Venue.id).all()


class ReviewRepository(BaseRepository):
    """Review repository."""

    def __init__(self, session: Session):
        super().__init__(session, Review)

    def list_by_event(self, event_id: int) -> List[Review]:
        return self.session.query(Review).filter(
            Review.event_id == event_id
        ).order_by(Review.created_at.desc(), Review.id.desc()).all()

    def list_by_vendor(self, vendor_id: int) -> List[Review]:
        return self.session.query(Review).filter(
            Review.vendor_id == vendor_id
        ).order_by(Review.created_at.desc(), Review.id.desc()).all()

    def average_for_event(self, event_id: int) -> Tuple[Optional[float], int]:
        avg, count = self.session.query(func.avg(Review.rating), func.count(Review.id)).filter(
            Review.event_id == event_id
        ).one()
        return (float(avg) if avg is not None else None), count

    def average_for_vendor(self, vendor_id: int) -> Tuple[Optional[float], int]:
        avg, count = self.session.query(func.avg(Review.rating), func.count(Review.id)).filter(
            Review.vendor_id == vendor_id
        ).one()
        return (float(avg) if avg is not None else None), count


class TaskRepository(BaseRepository):
    """Task repository."""

    def __init__(self, session: Session):
        super().__init__(session, Task)

    def list_by_event(self, event_id: int) -> List[Task]:
        return self.session.query(Task).filter(Task.event_id == event_id).order_by(Task.id).all()

    def list_by_assignee(self, user_id: int) -> List[Task]:
        return self.session.query(Task).filter(Task.assigned_to_id == user_id).order_by(Task.id).all()

    def list_all(self) -> List[Task]:
        return self.session.query(Task).order_by(Task.id).all()

    def search(self, q: Optional[str]) -> List[Task]:
        query = self.session.query(Task)
        if q:
            pattern = f"%{q.lower()}%"
            query = query.filter(or_(
                func.lower(Task.title).like(pattern),
                func.lower(Task.description).like(pattern)
            ))
        return query.order_by(Task.id).all()


class NotificationRepository(BaseRepository):
    """Notification repository."""

    def __init__(self, session: Session):
        super().__init__(session, Notification)

    def list_for_user(
        self,
        user_id: int,
        status: Optional[NotificationStatus] = None,
        limit: Optional[int] = None
    ) -> List[Notification]:
        query = self.session.query(Notification).filter(Notification.user_id == user_id)
        if status is not None:
            query = query.filter(Notification.status == status)
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_unread(self, user_id: int) -> int:
        return self.session.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.status == NotificationStatus.UNREAD
        ).count()

    def mark_all_read(self, user_id: int) -> int:
        return self.session.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.status == NotificationStatus.UNREAD
        ).update({Notification.status: NotificationStatus.READ}, synchronize_session=False)

    def delete_for_user(self, user_id: int) -> int:
        return self.session.query(Notification).filter(
            Notification.user_id == user_id
        ).delete(synchronize_session=False)
