"""
Authorization policy for the Event Planning Service.

Every service operation names an Action and asks `authorize` whether the
calling Principal may perform it on a resource. Role rules and ownership rules
live in one table so that no endpoint carries its own role-string checks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from eventplanning.core.errors import AuthorizationError
from eventplanning.models.user import UserRole


@dataclass(frozen=True)
class Principal:
    """Authenticated caller decoded from the bearer token."""

    user_id: int
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class Action(str, Enum):
    """Operations guarded by the policy."""

    EVENT_CREATE = "event:create"
    EVENT_MANAGE = "event:manage"
    EVENT_LIST_OWN = "event:list_own"
    EVENT_ADMIN_DELETE = "event:admin_delete"
    TICKET_TYPE_MANAGE = "ticket_type:manage"
    BOOKING_ACCESS = "booking:access"
    BOOKING_LIST_ALL = "booking:list_all"
    PAYMENT_UPLOAD = "payment:upload"
    PAYMENT_REVIEW = "payment:review"
    PAYMENT_LIST_ALL = "payment:list_all"
    USER_ADMIN = "user:admin"
    USER_VIEW = "user:view"
    USER_DIRECTORY = "user:directory"
    VENDOR_CREATE = "vendor:create"
    VENDOR_MANAGE = "vendor:manage"
    VENDOR_APPROVE = "vendor:approve"
    VENUE_MANAGE = "venue:manage"
    VENUE_APPROVE = "venue:approve"
    REVIEW_UPDATE = "review:update"
    REVIEW_DELETE = "review:delete"
    TASK_MANAGE = "task:manage"
    TASK_UPDATE_STATUS = "task:update_status"
    TASK_LIST_ALL = "task:list_all"
    NOTIFICATION_ACCESS = "notification:access"
    NOTIFICATION_ADMIN = "notification:admin"


def _has_role(*roles: UserRole) -> Callable[[Principal, Any], bool]:
    def rule(principal: Principal, resource: Any) -> bool:
        return principal.role in roles
    return rule


def _owns(attribute: str, admin_override: bool = False) -> Callable[[Principal, Any], bool]:
    def rule(principal: Principal, resource: Any) -> bool:
        if admin_override and principal.is_admin:
            return True
        return resource is not None and getattr(resource, attribute) == principal.user_id
    return rule


def _is_self_or_admin(principal: Principal, resource: Any) -> bool:
    return principal.is_admin or (resource is not None and resource.id == principal.user_id)


_RULES: Dict[Action, Callable[[Principal, Any], bool]] = {
    Action.EVENT_CREATE: _has_role(UserRole.ORGANIZER, UserRole.ADMIN),
    Action.EVENT_MANAGE: _owns("organizer_id"),
    Action.EVENT_LIST_OWN: _has_role(UserRole.ORGANIZER, UserRole.ADMIN),
    Action.EVENT_ADMIN_DELETE: _has_role(UserRole.ADMIN),
    Action.TICKET_TYPE_MANAGE: _owns("organizer_id"),
    Action.BOOKING_ACCESS: _owns("user_id"),
    Action.BOOKING_LIST_ALL: _has_role(UserRole.ADMIN),
    Action.PAYMENT_UPLOAD: _owns("user_id", admin_override=True),
    Action.PAYMENT_REVIEW: _has_role(UserRole.ADMIN),
    Action.PAYMENT_LIST_ALL: _has_role(UserRole.ADMIN),
    Action.USER_ADMIN: _has_role(UserRole.ADMIN),
    Action.USER_VIEW: _is_self_or_admin,
    Action.USER_DIRECTORY: _has_role(UserRole.ORGANIZER, UserRole.ADMIN),
    Action.VENDOR_CREATE: _has_role(UserRole.VENDOR, UserRole.ADMIN),
    Action.VENDOR_MANAGE: _owns("owner_id", admin_override=True),
    Action.VENDOR_APPROVE: _has_role(UserRole.ADMIN),
    Action.VENUE_MANAGE: _owns("created_by_id", admin_override=True),
    Action.VENUE_APPROVE: _has_role(UserRole.ADMIN),
    Action.REVIEW_UPDATE: _owns("user_id"),
    Action.REVIEW_DELETE: _owns("user_id", admin_override=True),
    # Tasks are managed through their event, so the resource is the event
    Action.TASK_MANAGE: _owns("organizer_id"),
    Action.TASK_UPDATE_STATUS: _owns("assigned_to_id"),
    Action.TASK_LIST_ALL: _has_role(UserRole.ADMIN),
    Action.NOTIFICATION_ACCESS: _owns("user_id"),
    Action.NOTIFICATION_ADMIN: _has_role(UserRole.ADMIN),
}

_DEFAULT_MESSAGES: Dict[Action, str] = {
    Action.EVENT_CREATE: "Only organizers can create events",
    Action.EVENT_MANAGE: "Not allowed to edit this event",
    Action.TICKET_TYPE_MANAGE: "You are not allowed to manage ticket types for this event",
    Action.BOOKING_ACCESS: "You cannot access this booking",
    Action.VENDOR_MANAGE: "Not allowed to update this vendor",
    Action.VENUE_MANAGE: "Not allowed to update this venue",
    Action.REVIEW_UPDATE: "You can only update your own reviews",
    Action.REVIEW_DELETE: "You can only delete your own reviews",
    Action.TASK_MANAGE: "Only the organizer can manage tasks for this event",
    Action.TASK_UPDATE_STATUS: "Only the assignee can update this task status",
    Action.NOTIFICATION_ACCESS: "Not allowed to access this notification",
}


def is_allowed(principal: Principal, action: Action, resource: Any = None) -> bool:
    """Evaluate the policy without raising."""
    rule = _RULES.get(action)
    if rule is None:
        return False
    return rule(principal, resource)


def authorize(
    principal: Principal,
    action: Action,
    resource: Any = None,
    message: Optional[str] = None
) -> None:
    """
    Enforce the policy for a single operation.

    Args:
        principal: Calling user
        action: Operation being performed
        resource: Entity the operation targets, if any
        message: Overrides the default denial message

    Raises:
        AuthorizationError: If the policy denies the action
    """
    if not is_allowed(principal, action, resource):
        raise AuthorizationError(
            message or _DEFAULT_MESSAGES.get(action, "You do not have permission to perform this action")
        )
