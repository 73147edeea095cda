"""
Notification Service.
Stores in-app notifications and, when enabled, dispatches email tasks to Celery workers.
"""

import logging
from typing import Any, Dict, List, Optional

from celery import Celery

from eventplanning.core.config import config
from eventplanning.core.errors import NotFoundError, ValidationError
from eventplanning.core.policy import Action, Principal, authorize
from eventplanning.db.database import DatabaseManager, db_manager
from eventplanning.db.repositories import NotificationRepository, UserRepository
from eventplanning.models.notification import Notification, NotificationStatus, NotificationType
from eventplanning.schemas.notification import BroadcastRequest, NotificationCreate, NotificationResponse

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Notification service.
    Side-effect notifications never fail the operation that triggered them.
    """

    def __init__(self, database: Optional[DatabaseManager] = None):
        self.db = database or db_manager
        self.notification_config = None
        self._celery_app = None

    async def _get_configs(self):
        """Get configuration settings."""
        if not self.notification_config:
            self.notification_config = await config.get_notification_config()

    async def _initialize_celery(self):
        """Initialize Celery app for task dispatch."""
        if self._celery_app is not None:
            return

        redis_url = await config.get_redis_url()
        celery_app = Celery('eventplanning')
        celery_app.conf.update(
            broker_url=redis_url,
            task_serializer='json',
            accept_content=['json'],
            task_routes={
                'email_workers.tasks.*': {'queue': self.notification_config["email_queue"]},
            },
        )
        self._celery_app = celery_app
        logger.info("Celery app initialized for notification dispatch")

    async def _send_email_task(self, task_name: str, user_id: int, data: Dict[str, Any]) -> bool:
        """
        Send email task to Celery workers.

        Args:
            task_name: Name of the Celery task
            user_id: User ID (workers will fetch email address)
            data: Task data

        Returns:
            True if task sent successfully, False otherwise
        """
        await self._get_configs()
        if not self.notification_config["enable_email_notifications"]:
            return False

        try:
            await self._initialize_celery()
            task = self._celery_app.send_task(
                task_name,
                args=[user_id, data],
                queue=self.notification_config["email_queue"]
            )
            logger.info(f"Email task {task_name} sent for user {user_id} with ID: {task.id}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email task {task_name}: {e}")
            return False

    async def notify(
        self,
        user_id: int,
        title: str,
        message: str,
        notification_type: NotificationType = NotificationType.GENERAL,
        event_id: Optional[int] = None
    ) -> Optional[NotificationResponse]:
        """
        Record a notification for a user and dispatch its email copy.

        Failures are logged and swallowed so the triggering operation stands.

        Returns:
            The stored notification, or None if it could not be stored
        """
        try:
            with self.db.get_session() as session:
                notification = NotificationRepository(session).create(
                    user_id=user_id,
                    event_id=event_id,
                    title=title,
                    message=message,
                    type=notification_type
                )
                response = NotificationResponse.model_validate(notification)
        except Exception as e:
            logger.error(f"Failed to store notification for user {user_id}: {e}")
            return None

        await self._send_email_task(
            'email_workers.tasks.send_notification_email',
            user_id,
            {"title": title, "message": message, "type": notification_type.value}
        )
        return response

    async def send_password_reset(self, user_id: int, token: str) -> bool:
        """Dispatch the password reset email."""
        return await self._send_email_task(
            'email_workers.tasks.send_password_reset',
            user_id,
            {"token": token}
        )

    async def get_latest(self, principal: Principal) -> List[NotificationResponse]:
        await self._get_configs()
        with self.db.get_session() as session:
            rows = NotificationRepository(session).list_for_user(
                principal.user_id, limit=self.notification_config["latest_limit"]
            )
            return [NotificationResponse.model_validate(row) for row in rows]

    async def get_all(self, principal: Principal) -> List[NotificationResponse]:
        with self.db.get_session() as session:
            rows = NotificationRepository(session).list_for_user(principal.user_id)
            return [NotificationResponse.model_validate(row) for row in rows]

    async def get_unread(self, principal: Principal) -> List[NotificationResponse]:
        with self.db.get_session() as session:
            rows = NotificationRepository(session).list_for_user(
                principal.user_id, status=NotificationStatus.UNREAD
            )
            return [NotificationResponse.model_validate(row) for row in rows]

    async def count_unread(self, principal: Principal) -> int:
        with self.db.get_session() as session:
            return NotificationRepository(session).count_unread(principal.user_id)

    async def mark_read(self, notification_id: int, principal: Principal) -> NotificationResponse:
        """Mark one of the principal's notifications as read."""
        with self.db.get_session() as session:
            notification = self._get_owned(session, notification_id, principal)
            notification.status = NotificationStatus.READ
            session.flush()
            return NotificationResponse.model_validate(notification)

    async def mark_all_read(self, principal: Principal) -> int:
        with self.db.get_session() as session:
            updated = NotificationRepository(session).mark_all_read(principal.user_id)
        logger.info(f"Marked {updated} notifications read for user {principal.user_id}")
        return updated

    async def archive(self, notification_id: int, principal: Principal) -> None:
        """Delete one of the principal's notifications."""
        with self.db.get_session() as session:
            notification = self._get_owned(session, notification_id, principal)
            NotificationRepository(session).delete(notification)

    async def broadcast(self, data: BroadcastRequest, principal: Principal) -> int:
        """Send a notification to every user. Admin only."""
        authorize(principal, Action.NOTIFICATION_ADMIN)
        with self.db.get_session() as session:
            user_ids = UserRepository(session).list_ids()
            for user_id in user_ids:
                session.add(Notification(
                    user_id=user_id,
                    title=data.title,
                    message=data.message,
                    type=data.type
                ))
        logger.info(f"Broadcast notification '{data.title}' to {len(user_ids)} users")
        return len(user_ids)

    async def create_for_user(self, data: NotificationCreate, principal: Principal) -> NotificationResponse:
        """Send a notification to one user. Admin only."""
        authorize(principal, Action.NOTIFICATION_ADMIN)
        if data.user_id is None:
            raise ValidationError("User ID is required")

        with self.db.get_session() as session:
            if UserRepository(session).get_by_id(data.user_id) is None:
                raise NotFoundError("User not found")
            notification = NotificationRepository(session).create(
                user_id=data.user_id,
                event_id=data.event_id,
                title=data.title,
                message=data.message,
                type=data.type
            )
            return NotificationResponse.model_validate(notification)

    async def admin_delete(self, notification_id: int, principal: Principal) -> None:
        authorize(principal, Action.NOTIFICATION_ADMIN)
        with self.db.get_session() as session:
            repo = NotificationRepository(session)
            notification = repo.get_by_id(notification_id)
            if notification is None:
                raise NotFoundError("Notification not found")
            repo.delete(notification)

    def _get_owned(self, session, notification_id: int, principal: Principal) -> Notification:
        notification = NotificationRepository(session).get_by_id(notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        authorize(principal, Action.NOTIFICATION_ACCESS, notification)
        return notification


# Global notification service instance
notification_service = NotificationService()
