import itertools

import pytest

_ids = itertools.count(1)


def make_task(**overrides):
    task = {
        "id": next(_ids),
        "title": "Task",
        "description": None,
        "status": "TODO",
        "priority": 3,
        "progressPercentage": 0,
        "dueDate": None,
        "projectId": 1,
        "projectName": "Apollo",
        "assignee": None,
    }
    task.update(overrides)
    return task


def make_project(**overrides):
    project = {
        "id": next(_ids),
        "name": "Project",
        "description": "",
        "status": "NOT_STARTED",
        "createdAt": "2025-01-01T09:00:00",
        "owner": {"id": 1, "username": "owner", "fullName": "Olivia Owner"},
        "members": [],
        "totalTasks": 0,
        "completedTasks": 0,
    }
    project.update(overrides)
    return project


@pytest.fixture
def task_factory():
    return make_task


@pytest.fixture
def project_factory():
    return make_project


@pytest.fixture
def mixed_tasks():
    return [
        make_task(title="Write docs", status="DONE", dueDate="2025-03-01T00:00:00", priority=2),
        make_task(title="Fix login", status="IN_PROGRESS", dueDate="2025-01-15T00:00:00", priority=5, overdue=True),
        make_task(title="Plan sprint", status="TODO", priority=1, projectName="Zeus"),
        make_task(title="Review PR", status="REVIEW", dueDate="2025-02-01T00:00:00", priority=4, isOverdue=True),
        make_task(title="Deploy", status="BLOCKED", priority=5, description="Waiting on infra"),
    ]
