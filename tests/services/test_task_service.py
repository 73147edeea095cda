"""
Tests for TaskService.
"""

from unittest.mock import AsyncMock

import pytest

from eventplanning.core.errors import AuthorizationError, NotFoundError
from eventplanning.models.notification import NotificationType
from eventplanning.models.task import TaskStatus
from eventplanning.schemas.task import TaskCreate, TaskStatusUpdate, TaskUpdate
from eventplanning.services.task_service import TaskService


class TestTaskService:
    """Test cases for event planning tasks."""

    @pytest.fixture
    def notifications(self):
        return AsyncMock()

    @pytest.fixture
    def task_service(self, database, notifications):
        return TaskService(database, notifications)

    @pytest.fixture
    def event_id(self, organizer, make_event):
        return make_event(organizer, title="Gala")

    @pytest.mark.asyncio
    async def test_create_assigned_task_notifies_assignee(self, task_service, notifications, organizer, attendee, event_id):
        task = await task_service.create_task(
            TaskCreate(event_id=event_id, title="Order flowers", assigned_to_id=attendee.user_id), organizer
        )

        assert task.status == TaskStatus.TODO
        notifications.notify.assert_awaited_once()
        args, kwargs = notifications.notify.call_args
        assert args[0] == attendee.user_id
        assert args[3] == NotificationType.TASK
        assert kwargs["event_id"] == event_id

    @pytest.mark.asyncio
    async def test_create_checks_event_owner_and_assignee(self, task_service, notifications, organizer, other_user, event_id):
        with pytest.raises(AuthorizationError) as exc_info:
            await task_service.create_task(TaskCreate(event_id=event_id, title="Sneaky"), other_user)
        assert exc_info.value.message == "Only the organizer can manage tasks for this event"

        with pytest.raises(NotFoundError) as exc_info:
            await task_service.create_task(
                TaskCreate(event_id=event_id, title="Ghost", assigned_to_id=9999), organizer
            )
        assert exc_info.value.message == "Assignee not found"

        with pytest.raises(NotFoundError):
            await task_service.create_task(TaskCreate(event_id=9999, title="Nowhere"), organizer)
        notifications.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_listings(self, task_service, organizer, attendee, admin, event_id):
        await task_service.create_task(
            TaskCreate(event_id=event_id, title="Order flowers", assigned_to_id=attendee.user_id), organizer
        )
        await task_service.create_task(
            TaskCreate(event_id=event_id, title="Hire DJ", description="Needs a flower-themed playlist"), organizer
        )

        assert len(await task_service.list_for_event(event_id, organizer)) == 2
        assert [t.title for t in await task_service.list_mine(attendee)] == ["Order flowers"]
        assert len(await task_service.list_all(admin)) == 2
        assert len(await task_service.search("flower", admin)) == 2

        with pytest.raises(AuthorizationError):
            await task_service.list_for_event(event_id, attendee)
        with pytest.raises(AuthorizationError):
            await task_service.list_all(organizer)

    @pytest.mark.asyncio
    async def test_reassignment_notifies_new_assignee(
        self, task_service, notifications, organizer, attendee, other_user, event_id
    ):
        task = await task_service.create_task(
            TaskCreate(event_id=event_id, title="Order flowers", assigned_to_id=attendee.user_id), organizer
        )
        notifications.notify.reset_mock()

        renamed = await task_service.update_task(task.id, TaskUpdate(title="Order roses"), organizer)
        assert renamed.title == "Order roses"
        assert renamed.assigned_to_id == attendee.user_id
        notifications.notify.assert_not_awaited()

        reassigned = await task_service.update_task(task.id, TaskUpdate(assigned_to_id=other_user.user_id), organizer)
        assert reassigned.assigned_to_id == other_user.user_id
        assert notifications.notify.call_args.args[0] == other_user.user_id

    @pytest.mark.asyncio
    async def test_only_assignee_moves_status(self, task_service, organizer, attendee, other_user, event_id):
        task = await task_service.create_task(
            TaskCreate(event_id=event_id, title="Order flowers", assigned_to_id=attendee.user_id), organizer
        )

        moved = await task_service.update_status(task.id, TaskStatusUpdate(status=TaskStatus.IN_PROGRESS), attendee)
        assert moved.status == TaskStatus.IN_PROGRESS

        with pytest.raises(AuthorizationError) as exc_info:
            await task_service.update_status(task.id, TaskStatusUpdate(status=TaskStatus.DONE), other_user)
        assert exc_info.value.message == "Only the assignee can update this task status"

    @pytest.mark.asyncio
    async def test_delete_task(self, task_service, organizer, attendee, event_id):
        task = await task_service.create_task(TaskCreate(event_id=event_id, title="Order flowers"), organizer)

        with pytest.raises(AuthorizationError):
            await task_service.delete_task(task.id, attendee)

        await task_service.delete_task(task.id, organizer)
        with pytest.raises(NotFoundError) as exc_info:
            await task_service.delete_task(task.id, organizer)
        assert exc_info.value.message == "Task not found"
