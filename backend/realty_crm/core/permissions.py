"""
Authorization gate

Role checks are table driven: PERMISSIONS maps a (resource, action) pair to
the roles allowed to perform it. Ownership rules that depend on the record
being touched (agents only see their own customers and tasks, only the
assignee may change a task's status, ...) are plain predicates below.
"""
import enum
from typing import Dict, FrozenSet, Tuple

from realty_crm.core.exceptions import AuthorizationError, ValidationError
from realty_crm.models.customer import Customer
from realty_crm.models.task import Task
from realty_crm.models.user import User, UserRole


class Resource(str, enum.Enum):
    PROPERTY = "property"
    CUSTOMER = "customer"
    TASK = "task"
    USER = "user"
    AGENT = "agent"
    DASHBOARD = "dashboard"


class Action(str, enum.Enum):
    READ = "read"
    LIST_OWN = "list_own"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    PUBLISH = "publish"
    ASSIGN = "assign"
    CHANGE_STATUS = "change_status"
    REASSIGN = "reassign"
    MANAGE = "manage"


_ALL = frozenset(UserRole)
_STAFF = frozenset({UserRole.SUPER_ADMIN, UserRole.ADMIN, UserRole.AGENT})
_ADMINS = frozenset({UserRole.SUPER_ADMIN, UserRole.ADMIN})
_SUPER = frozenset({UserRole.SUPER_ADMIN})


PERMISSIONS: Dict[Tuple[Resource, Action], FrozenSet[UserRole]] = {
    (Resource.PROPERTY, Action.READ): _ALL,
    (Resource.PROPERTY, Action.LIST_OWN): _STAFF,
    (Resource.PROPERTY, Action.CREATE): _ADMINS,
    (Resource.PROPERTY, Action.UPDATE): _ADMINS,
    (Resource.PROPERTY, Action.DELETE): _SUPER,
    (Resource.PROPERTY, Action.PUBLISH): _SUPER,
    (Resource.PROPERTY, Action.ASSIGN): _ADMINS,

    (Resource.CUSTOMER, Action.READ): _STAFF,
    (Resource.CUSTOMER, Action.CREATE): _STAFF,
    (Resource.CUSTOMER, Action.UPDATE): _STAFF,
    (Resource.CUSTOMER, Action.DELETE): _ADMINS,
    (Resource.CUSTOMER, Action.ASSIGN): _ADMINS,

    # Record-level narrowing for tasks happens in the predicates below
    (Resource.TASK, Action.READ): _STAFF,
    (Resource.TASK, Action.CREATE): _STAFF,
    (Resource.TASK, Action.UPDATE): _STAFF,
    (Resource.TASK, Action.DELETE): _STAFF,
    (Resource.TASK, Action.CHANGE_STATUS): _STAFF,
    (Resource.TASK, Action.REASSIGN): _ADMINS,

    (Resource.USER, Action.READ): _STAFF,
    (Resource.USER, Action.MANAGE): _SUPER,

    (Resource.AGENT, Action.READ): _ADMINS,
    (Resource.AGENT, Action.MANAGE): _ADMINS,

    (Resource.DASHBOARD, Action.READ): _STAFF,
}


def has_permission(role: UserRole, resource: Resource, action: Action) -> bool:
    return role in PERMISSIONS.get((resource, action), frozenset())


def check_permission(user: User, resource: Resource, action: Action) -> None:
    if not has_permission(user.role, resource, action):
        raise AuthorizationError(
            f"Role '{user.role.value}' is not authorized to {action.value} {resource.value}"
        )


# Customers

def can_access_customer(user: User, customer: Customer) -> bool:
    """Agents reach unassigned customers and their own; admins reach all"""
    if user.role != UserRole.AGENT:
        return True
    return customer.assigned_agent_id is None or customer.assigned_agent_id == user.id


def ensure_customer_access(user: User, customer: Customer, verb: str = "access") -> None:
    if not can_access_customer(user, customer):
        raise AuthorizationError(f"Not authorized to {verb} this customer")


# Tasks

def can_access_task(user: User, task: Task) -> bool:
    if user.role != UserRole.AGENT:
        return True
    return user.id in (task.created_by_id, task.assigned_to_id)


def ensure_task_access(user: User, task: Task, verb: str = "access") -> None:
    if not can_access_task(user, task):
        raise AuthorizationError(f"Not authorized to {verb} this task")


def can_change_task_status(user: User, task: Task) -> bool:
    return user.role == UserRole.SUPER_ADMIN or task.assigned_to_id == user.id


def ensure_can_change_task_status(user: User, task: Task) -> None:
    if not can_change_task_status(user, task):
        raise AuthorizationError("Only the assigned user can change the status of this task")


def can_delete_task(user: User, task: Task) -> bool:
    return user.role == UserRole.SUPER_ADMIN or task.created_by_id == user.id


def ensure_can_delete_task(user: User, task: Task) -> None:
    if not can_delete_task(user, task):
        raise AuthorizationError("Only the creator can delete this task")


def can_reassign_task(user: User) -> bool:
    return has_permission(user.role, Resource.TASK, Action.REASSIGN)


# Accounts

def ensure_not_self(actor: User, target: User, verb: str) -> None:
    """Nobody may delete or deactivate their own account, whatever their role"""
    if actor.id == target.id:
        raise ValidationError(f"You cannot {verb} your own account")
