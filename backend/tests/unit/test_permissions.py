"""Tests for the role table and the record-level predicates."""

import uuid

import pytest

from realty_crm.core.exceptions import AuthorizationError, ValidationError
from realty_crm.core.permissions import (
    Action,
    Resource,
    can_access_customer,
    can_access_task,
    can_change_task_status,
    can_delete_task,
    can_reassign_task,
    check_permission,
    ensure_not_self,
    has_permission,
)
from realty_crm.models.customer import Customer
from realty_crm.models.task import Task
from realty_crm.models.user import User, UserRole


def make_user(role: UserRole) -> User:
    return User(id=uuid.uuid4(), name=role.value, email=f"{role.value}@realtycrm.com", role=role)


@pytest.mark.unit
@pytest.mark.parametrize(
    "role, resource, action, allowed",
    [
        (UserRole.USER, Resource.PROPERTY, Action.READ, True),
        (UserRole.USER, Resource.CUSTOMER, Action.READ, False),
        (UserRole.AGENT, Resource.PROPERTY, Action.CREATE, False),
        (UserRole.ADMIN, Resource.PROPERTY, Action.CREATE, True),
        (UserRole.ADMIN, Resource.PROPERTY, Action.DELETE, False),
        (UserRole.SUPER_ADMIN, Resource.PROPERTY, Action.DELETE, True),
        (UserRole.ADMIN, Resource.PROPERTY, Action.PUBLISH, False),
        (UserRole.AGENT, Resource.CUSTOMER, Action.DELETE, False),
        (UserRole.ADMIN, Resource.CUSTOMER, Action.DELETE, True),
        (UserRole.AGENT, Resource.TASK, Action.REASSIGN, False),
        (UserRole.ADMIN, Resource.USER, Action.MANAGE, False),
        (UserRole.SUPER_ADMIN, Resource.USER, Action.MANAGE, True),
        (UserRole.AGENT, Resource.AGENT, Action.MANAGE, False),
        (UserRole.USER, Resource.DASHBOARD, Action.READ, False),
    ],
)
def test_permission_table(role, resource, action, allowed):
    assert has_permission(role, resource, action) is allowed


@pytest.mark.unit
def test_unknown_pair_is_denied():
    assert not has_permission(UserRole.SUPER_ADMIN, Resource.DASHBOARD, Action.DELETE)


@pytest.mark.unit
def test_check_permission_raises_for_forbidden_role():
    with pytest.raises(AuthorizationError) as exc_info:
        check_permission(make_user(UserRole.AGENT), Resource.CUSTOMER, Action.DELETE)
    assert exc_info.value.status_code == 403
    assert "agent" in exc_info.value.message


@pytest.mark.unit
def test_agent_reaches_own_and_unassigned_customers_only():
    agent = make_user(UserRole.AGENT)
    other = make_user(UserRole.AGENT)

    assert can_access_customer(agent, Customer(assigned_agent_id=None))
    assert can_access_customer(agent, Customer(assigned_agent_id=agent.id))
    assert not can_access_customer(agent, Customer(assigned_agent_id=other.id))
    assert can_access_customer(make_user(UserRole.ADMIN), Customer(assigned_agent_id=other.id))


@pytest.mark.unit
def test_task_predicates():
    creator = make_user(UserRole.ADMIN)
    assignee = make_user(UserRole.AGENT)
    outsider = make_user(UserRole.AGENT)
    task = Task(created_by_id=creator.id, assigned_to_id=assignee.id)

    assert can_access_task(assignee, task)
    assert not can_access_task(outsider, task)

    # Only the assignee (or a super admin) moves the status, not the creator
    assert can_change_task_status(assignee, task)
    assert not can_change_task_status(creator, task)
    assert can_change_task_status(make_user(UserRole.SUPER_ADMIN), task)

    assert can_delete_task(creator, task)
    assert not can_delete_task(assignee, task)

    assert can_reassign_task(creator)
    assert not can_reassign_task(assignee)


@pytest.mark.unit
def test_nobody_may_act_on_their_own_account():
    super_admin = make_user(UserRole.SUPER_ADMIN)
    with pytest.raises(ValidationError):
        ensure_not_self(super_admin, super_admin, "delete")
    ensure_not_self(super_admin, make_user(UserRole.ADMIN), "delete")
