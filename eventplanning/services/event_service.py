"""
Event Service.
Handles the event lifecycle: creation, editing, publishing, cancellation and deletion.
"""

import math
from typing import List, Optional
import logging

from eventplanning.core.errors import BusinessRuleViolation, ErrorCode, NotFoundError, ValidationError
from eventplanning.core.policy import Action, Principal, authorize
from eventplanning.db.database import DatabaseManager, db_manager
from eventplanning.db.repositories import BookingRepository, EventRepository
from eventplanning.models.base import utcnow
from eventplanning.models.event import Event, EventStatus
from eventplanning.models.notification import NotificationType
from eventplanning.schemas.event import EventCreate, EventListResponse, EventResponse, EventUpdate
from eventplanning.services.notification_service import NotificationService, notification_service

logger = logging.getLogger(__name__)

SEARCH_SCOPES = ("upcoming", "past")


class EventService:
    """
    Event catalog service.
    Lifecycle transitions are limited to the event's organizer.
    """

    def __init__(
        self,
        database: Optional[DatabaseManager] = None,
        notifications: Optional[NotificationService] = None
    ):
        self.db = database or db_manager
        self.notifications = notifications or notification_service

    async def create_event(self, event_data: EventCreate, principal: Principal) -> EventResponse:
        """
        Create a DRAFT event owned by the principal.

        Raises:
            AuthorizationError: If the principal is not an organizer or admin
        """
        authorize(principal, Action.EVENT_CREATE)

        with self.db.get_session() as session:
            event = EventRepository(session).create(
                title=event_data.title,
                description=event_data.description,
                venue=event_data.venue,
                start_time=event_data.start_time,
                end_time=event_data.end_time,
                status=EventStatus.DRAFT,
                active=True,
                organizer_id=principal.user_id
            )
            logger.info(f"Event created: {event.id} by organizer {principal.user_id}")
            return EventResponse.model_validate(event)

    async def get_event(self, event_id: int) -> EventResponse:
        with self.db.get_session() as session:
            return EventResponse.model_validate(self._get_event(session, event_id))

    async def update_event(self, event_id: int, event_data: EventUpdate, principal: Principal) -> EventResponse:
        """
        Update an event's details.

        Raises:
            NotFoundError: If the event does not exist
            AuthorizationError: If the principal is not the organizer
            ValidationError: If the resulting time range is inverted
        """
        with self.db.get_session() as session:
            event = self._get_event(session, event_id)
            authorize(principal, Action.EVENT_MANAGE, event)

            for field, value in event_data.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(event, field, value)

            if event.end_time < event.start_time:
                raise ValidationError("End time must not be before start time")

            session.flush()
            logger.info(f"Event updated: {event_id}")
            return EventResponse.model_validate(event)

    async def publish_event(self, event_id: int, principal: Principal) -> EventResponse:
        """Move a DRAFT event to PUBLISHED."""
        with self.db.get_session() as session:
            event = self._get_event(session, event_id)
            authorize(principal, Action.EVENT_MANAGE, event)

            if event.status == EventStatus.CANCELLED:
                raise BusinessRuleViolation("A cancelled event cannot be published", ErrorCode.INVALID_STATE)
            if event.status == EventStatus.DRAFT:
                event.status = EventStatus.PUBLISHED
                session.flush()
                logger.info(f"Event published: {event_id}")
            return EventResponse.model_validate(event)

    async def cancel_event(self, event_id: int, principal: Principal) -> None:
        """
        Cancel an event: it leaves the catalog and its confirmed bookings are cancelled.
        Rows are kept so payments and bookings remain auditable.
        """
        with self.db.get_session() as session:
            event = self._get_event(session, event_id)
            authorize(principal, Action.EVENT_MANAGE, event)

            bookings = BookingRepository(session)
            attendee_ids = bookings.list_user_ids_for_event(event_id)
            cancelled = bookings.cancel_confirmed_for_event(event_id)
            event.status = EventStatus.CANCELLED
            event.active = False
            title = event.title

        logger.info(f"Event cancelled: {event_id}, {cancelled} bookings cancelled")
        for user_id in attendee_ids:
            await self.notifications.notify(
                user_id,
                "Event cancelled",
                f"The event '{title}' has been cancelled.",
                NotificationType.EVENT
            )

    async def delete_event(self, event_id: int, principal: Principal) -> None:
        """Hard-delete an event and everything that references it. Organizer only."""
        with self.db.get_session() as session:
            repo = EventRepository(session)
            event = self._get_event(session, event_id)
            authorize(principal, Action.EVENT_MANAGE, event, "Not allowed to delete this event")
            repo.delete_cascade(event)
        logger.info(f"Event deleted: {event_id} by organizer {principal.user_id}")

    async def admin_delete_event(self, event_id: int, principal: Principal) -> None:
        """Hard-delete any event. Admin only."""
        authorize(principal, Action.EVENT_ADMIN_DELETE)
        with self.db.get_session() as session:
            repo = EventRepository(session)
            repo.delete_cascade(self._get_event(session, event_id))
        logger.info(f"Event deleted: {event_id} by admin {principal.user_id}")

    async def list_my_events(self, principal: Principal) -> List[EventResponse]:
        authorize(principal, Action.EVENT_LIST_OWN)
        with self.db.get_session() as session:
            events = EventRepository(session).list_by_organizer(principal.user_id)
            return [EventResponse.model_validate(event) for event in events]

    async def search_events(
        self,
        q: Optional[str] = None,
        scope: Optional[str] = None,
        page: int = 0,
        size: int = 10
    ) -> EventListResponse:
        """
        Search active events.

        Args:
            q: Case-insensitive title fragment
            scope: 'upcoming' or 'past'; anything else lists all active events
            page: Zero-based page number
            size: Page size

        Returns:
            One page of events
        """
        scope = scope.lower() if scope else None
        if scope not in SEARCH_SCOPES:
            scope = None

        with self.db.get_session() as session:
            events, total = EventRepository(session).search(
                q, scope, utcnow(), skip=page * size, limit=size
            )
            total_pages = math.ceil(total / size) if size else 0
            return EventListResponse(
                events=[EventResponse.model_validate(event) for event in events],
                total=total,
                page=page,
                size=size,
                has_next=page + 1 < total_pages,
                has_prev=page > 0
            )

    def _get_event(self, session, event_id: int) -> Event:
        event = EventRepository(session).get_by_id(event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return event


# Global event service instance
event_service = EventService()
