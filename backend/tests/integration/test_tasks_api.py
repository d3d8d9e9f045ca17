"""Tests for the task endpoints: assignment, status rules and checklists."""

import pytest

from realty_crm.models.notification import NotificationType
from realty_crm.models.task import Task, TaskPriority, TaskStatus
from realty_crm.models.user import UserRole

from tests.utils.factories import auth_headers, create_task, create_user
from tests.utils.helpers import count_notifications, load, notifications_for

pytestmark = pytest.mark.integration


async def test_task_without_assignee_goes_to_creator(client, database, agent_user):
    response = await client.post(
        "/api/tasks/", json={"title": "Call the Mirpur landlord"}, headers=auth_headers(agent_user)
    )
    assert response.status_code == 201
    body = response.json()
    assert body["assigned_to_id"] == str(agent_user.id)
    assert body["status"] == "pending"
    assert body["priority"] == "medium"
    assert body["category"] == "other"
    assert await count_notifications(database) == 0


async def test_assigning_task_notifies_assignee(client, database, admin, agent_user):
    response = await client.post(
        "/api/tasks/",
        json={"title": "Prepare deed", "assigned_to_id": str(agent_user.id), "priority": "high"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201

    notifications = await notifications_for(database, agent_user.id, NotificationType.TASK_ASSIGNED)
    assert len(notifications) == 1
    assert notifications[0].title == "New Task Assigned"
    assert notifications[0].message == 'You have been assigned a new task: "Prepare deed"'
    assert notifications[0].action_url == f"/dashboard/tasks/{response.json()['id']}"


async def test_urgent_task_reaches_assignee_and_admins(client, database, super_admin, admin, agent_user):
    response = await client.post(
        "/api/tasks/",
        json={"title": "Site visit today", "assigned_to_id": str(agent_user.id), "priority": "urgent"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201

    urgent = await notifications_for(database, agent_user.id, NotificationType.URGENT_TASK)
    assert [n.title for n in urgent] == ["🚨 Urgent Task"]
    assert len(await notifications_for(database, super_admin.id, NotificationType.URGENT_TASK)) == 1
    assert len(await notifications_for(database, admin.id, NotificationType.URGENT_TASK)) == 1

    assigned = await notifications_for(database, agent_user.id, NotificationType.TASK_ASSIGNED)
    assert assigned[0].priority.value == "urgent"


async def test_unknown_assignee_is_rejected(client, agent_user):
    response = await client.post(
        "/api/tasks/",
        json={"title": "Ghost", "assigned_to_id": "00000000-0000-0000-0000-000000000001"},
        headers=auth_headers(agent_user),
    )
    assert response.status_code == 404


async def test_only_assignee_changes_status(client, database, admin, agent_user):
    task = await create_task(database, admin, assigned_to=agent_user)

    response = await client.put(
        f"/api/tasks/{task.id}", json={"status": "in_progress"}, headers=auth_headers(admin)
    )
    assert response.status_code == 403
    assert (await load(database, Task, task.id)).status == TaskStatus.PENDING

    response = await client.put(
        f"/api/tasks/{task.id}", json={"status": "in_progress"}, headers=auth_headers(agent_user)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"


async def test_super_admin_may_change_any_status(client, database, admin, super_admin, agent_user):
    task = await create_task(database, admin, assigned_to=agent_user)
    response = await client.patch(f"/api/tasks/{task.id}/complete", headers=auth_headers(super_admin))
    assert response.status_code == 200
    assert response.json()["status"] == "completed"


async def test_completing_toggles_and_notifies_creator_once(client, database, admin, agent_user):
    task = await create_task(database, admin, assigned_to=agent_user, title="Collect documents")
    headers = auth_headers(agent_user)

    response = await client.patch(f"/api/tasks/{task.id}/complete", headers=headers)
    assert response.json()["status"] == "completed"
    assert response.json()["completed_date"] is not None

    response = await client.patch(f"/api/tasks/{task.id}/complete", headers=headers)
    assert response.json()["status"] == "pending"
    assert response.json()["completed_date"] is None

    completed = await notifications_for(database, admin.id, NotificationType.TASK_COMPLETED)
    assert len(completed) == 1
    assert completed[0].message == 'Task "Collect documents" has been completed'


async def test_completing_own_task_is_silent(client, database, agent_user):
    task = await create_task(database, agent_user)
    await client.patch(f"/api/tasks/{task.id}/complete", headers=auth_headers(agent_user))
    assert await count_notifications(database, NotificationType.TASK_COMPLETED) == 0


async def test_agent_reassignment_is_ignored(client, database, agent_user):
    other_agent = await create_user(database, role=UserRole.AGENT)
    task = await create_task(database, agent_user)

    response = await client.put(
        f"/api/tasks/{task.id}",
        json={"assigned_to_id": str(other_agent.id), "title": "Renamed"},
        headers=auth_headers(agent_user),
    )
    assert response.status_code == 200
    assert response.json()["assigned_to_id"] == str(agent_user.id)
    assert response.json()["title"] == "Renamed"


async def test_admin_reassignment_notifies_new_assignee(client, database, admin, agent_user):
    other_agent = await create_user(database, role=UserRole.AGENT)
    task = await create_task(database, admin, assigned_to=agent_user)

    response = await client.put(
        f"/api/tasks/{task.id}",
        json={"assigned_to_id": str(other_agent.id), "priority": "urgent"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["assigned_to_id"] == str(other_agent.id)
    assert len(await notifications_for(database, other_agent.id, NotificationType.TASK_ASSIGNED)) == 1
    assert len(await notifications_for(database, other_agent.id, NotificationType.URGENT_TASK)) == 1


async def test_agent_sees_only_related_tasks(client, database, admin, agent_user):
    other_agent = await create_user(database, role=UserRole.AGENT)
    mine = await create_task(database, admin, assigned_to=agent_user)
    theirs = await create_task(database, admin, assigned_to=other_agent)

    response = await client.get("/api/tasks/", headers=auth_headers(agent_user))
    assert [item["id"] for item in response.json()["items"]] == [str(mine.id)]

    response = await client.get(f"/api/tasks/{theirs.id}", headers=auth_headers(agent_user))
    assert response.status_code == 403

    response = await client.get("/api/tasks/", headers=auth_headers(admin))
    assert response.json()["total"] == 2


async def test_only_creator_deletes(client, database, admin, agent_user):
    task = await create_task(database, admin, assigned_to=agent_user)

    response = await client.delete(f"/api/tasks/{task.id}", headers=auth_headers(agent_user))
    assert response.status_code == 403

    response = await client.delete(f"/api/tasks/{task.id}", headers=auth_headers(admin))
    assert response.status_code == 200
    assert await load(database, Task, task.id) is None


async def test_subtasks_and_comments(client, database, agent_user):
    task = await create_task(database, agent_user, priority=TaskPriority.LOW)
    headers = auth_headers(agent_user)

    response = await client.post(
        f"/api/tasks/{task.id}/subtasks", json={"title": "Scan NID"}, headers=headers
    )
    assert response.status_code == 201
    subtask = response.json()["subtasks"][0]
    assert subtask["completed"] is False

    response = await client.patch(
        f"/api/tasks/{task.id}/subtasks/{subtask['id']}/toggle", headers=headers
    )
    assert response.json()["subtasks"][0]["completed"] is True
    assert response.json()["subtasks"][0]["completed_at"] is not None

    response = await client.post(
        f"/api/tasks/{task.id}/comments", json={"text": "Owner agreed"}, headers=headers
    )
    assert response.status_code == 201
    assert response.json()["comments"][0]["text"] == "Owner agreed"

    response = await client.patch(
        f"/api/tasks/{task.id}/subtasks/00000000-0000-0000-0000-000000000000/toggle", headers=headers
    )
    assert response.status_code == 404


@pytest.mark.parametrize("field", ["priority", "title", "status"])
async def test_null_for_required_field_is_rejected(client, database, agent_user, field):
    task = await create_task(database, agent_user, priority=TaskPriority.HIGH)

    response = await client.put(f"/api/tasks/{task.id}", json={field: None}, headers=auth_headers(agent_user))
    assert response.status_code == 422

    stored = await load(database, Task, task.id)
    assert stored.title == task.title
    assert stored.priority == TaskPriority.HIGH
    assert stored.status == TaskStatus.PENDING


async def test_editing_an_urgent_task_does_not_realert(client, database, super_admin, agent_user):
    task = await create_task(database, agent_user, priority=TaskPriority.URGENT)

    response = await client.put(
        f"/api/tasks/{task.id}", json={"title": "Site visit moved to 4pm"}, headers=auth_headers(agent_user)
    )
    assert response.status_code == 200
    assert await count_notifications(database, NotificationType.URGENT_TASK) == 0

    await client.put(f"/api/tasks/{task.id}", json={"priority": "high"}, headers=auth_headers(agent_user))
    await client.put(f"/api/tasks/{task.id}", json={"priority": "urgent"}, headers=auth_headers(agent_user))
    assert len(await notifications_for(database, super_admin.id, NotificationType.URGENT_TASK)) == 1
