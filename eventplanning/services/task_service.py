"""
Task Service.
Handles planning tasks attached to events and their assignment to users.
"""

from typing import List, Optional
import logging

from eventplanning.core.errors import NotFoundError
from eventplanning.core.policy import Action, Principal, authorize
from eventplanning.db.database import DatabaseManager, db_manager
from eventplanning.db.repositories import EventRepository, TaskRepository, UserRepository
from eventplanning.models.event import Event
from eventplanning.models.notification import NotificationType
from eventplanning.models.task import Task
from eventplanning.schemas.task import TaskCreate, TaskResponse, TaskStatusUpdate, TaskUpdate
from eventplanning.services.notification_service import NotificationService, notification_service

logger = logging.getLogger(__name__)


class TaskService:
    """
    Task service.
    Tasks are managed by the organizer of their event; assignees may only move their status.
    """

    def __init__(
        self,
        database: Optional[DatabaseManager] = None,
        notifications: Optional[NotificationService] = None
    ):
        self.db = database or db_manager
        self.notifications = notifications or notification_service

    async def create_task(self, task_data: TaskCreate, principal: Principal) -> TaskResponse:
        """
        Create a task under an event.

        Raises:
            NotFoundError: If the event or the assignee does not exist
            AuthorizationError: If the principal is not the event organizer
        """
        with self.db.get_session() as session:
            event = self._get_event(session, task_data.event_id)
            authorize(principal, Action.TASK_MANAGE, event)
            self._check_assignee(session, task_data.assigned_to_id)

            task = TaskRepository(session).create(**task_data.model_dump())
            response = TaskResponse.model_validate(task)
            event_title = event.title

        logger.info(f"Task created: {response.id} for event {response.event_id}")
        if response.assigned_to_id is not None:
            await self._notify_assignee(response, event_title)
        return response

    async def list_for_event(self, event_id: int, principal: Principal) -> List[TaskResponse]:
        with self.db.get_session() as session:
            event = self._get_event(session, event_id)
            authorize(principal, Action.TASK_MANAGE, event)
            return [TaskResponse.model_validate(t) for t in TaskRepository(session).list_by_event(event_id)]

    async def list_mine(self, principal: Principal) -> List[TaskResponse]:
        """Tasks assigned to the principal."""
        with self.db.get_session() as session:
            tasks = TaskRepository(session).list_by_assignee(principal.user_id)
            return [TaskResponse.model_validate(t) for t in tasks]

    async def list_all(self, principal: Principal) -> List[TaskResponse]:
        authorize(principal, Action.TASK_LIST_ALL)
        with self.db.get_session() as session:
            return [TaskResponse.model_validate(t) for t in TaskRepository(session).list_all()]

    async def search(self, q: Optional[str], principal: Principal) -> List[TaskResponse]:
        authorize(principal, Action.TASK_LIST_ALL)
        with self.db.get_session() as session:
            return [TaskResponse.model_validate(t) for t in TaskRepository(session).search(q)]

    async def update_task(self, task_id: int, task_data: TaskUpdate, principal: Principal) -> TaskResponse:
        """
        Update a task. Reassigning it notifies the new assignee.

        Raises:
            NotFoundError: If the task or the new assignee does not exist
            AuthorizationError: If the principal is not the event organizer
        """
        with self.db.get_session() as session:
            task = self._get_task(session, task_id)
            event = self._get_event(session, task.event_id)
            authorize(principal, Action.TASK_MANAGE, event)

            changes = {k: v for k, v in task_data.model_dump(exclude_unset=True).items() if v is not None}
            reassigned = (
                "assigned_to_id" in changes and changes["assigned_to_id"] != task.assigned_to_id
            )
            if reassigned:
                self._check_assignee(session, changes["assigned_to_id"])

            for field, value in changes.items():
                setattr(task, field, value)
            session.flush()
            response = TaskResponse.model_validate(task)
            event_title = event.title

        logger.info(f"Task updated: {task_id}")
        if reassigned:
            await self._notify_assignee(response, event_title)
        return response

    async def update_status(self, task_id: int, status_data: TaskStatusUpdate, principal: Principal) -> TaskResponse:
        with self.db.get_session() as session:
            task = self._get_task(session, task_id)
            authorize(principal, Action.TASK_UPDATE_STATUS, task)
            task.status = status_data.status
            session.flush()
            logger.info(f"Task {task_id} moved to {task.status.value} by user {principal.user_id}")
            return TaskResponse.model_validate(task)

    async def delete_task(self, task_id: int, principal: Principal) -> None:
        with self.db.get_session() as session:
            task = self._get_task(session, task_id)
            authorize(principal, Action.TASK_MANAGE, self._get_event(session, task.event_id))
            TaskRepository(session).delete(task)
        logger.info(f"Task deleted: {task_id}")

    async def _notify_assignee(self, task: TaskResponse, event_title: str):
        await self.notifications.notify(
            task.assigned_to_id,
            "New task assigned",
            f"You have been assigned '{task.title}' for '{event_title}'.",
            NotificationType.TASK,
            event_id=task.event_id
        )

    @staticmethod
    def _check_assignee(session, user_id: Optional[int]):
        if user_id is not None and UserRepository(session).get_by_id(user_id) is None:
            raise NotFoundError("Assignee not found")

    @staticmethod
    def _get_event(session, event_id: int) -> Event:
        event = EventRepository(session).get_by_id(event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    @staticmethod
    def _get_task(session, task_id: int) -> Task:
        task = TaskRepository(session).get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task


# Global task service instance
task_service = TaskService()
