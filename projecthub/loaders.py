"""Per-view data loading.

Each view needs a few independent collections. They are fetched concurrently
and handed over only once every fetch has succeeded: if any call fails the
error propagates and the caller gets nothing, so the metrics engine never sees
a half-initialised view.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from projecthub.api_client import ProjectHubClient

logger = logging.getLogger(__name__)


async def _gather(calls: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
    names = list(calls)
    results = await asyncio.gather(*(asyncio.to_thread(calls[name]) for name in names))
    return dict(zip(names, results))


def fetch_all(**calls: Callable[[], Any]) -> Dict[str, Any]:
    """Run zero-argument fetches concurrently; return all results or raise.

    The first exception raised by any fetch is re-raised unchanged.
    """
    if not calls:
        return {}
    logger.debug("Fetching %s", ", ".join(calls))
    # Streamlit scripts run without an event loop, so asyncio.run is safe here.
    return asyncio.run(_gather(calls))


@dataclass
class DashboardData:
    projects: List[Dict[str, Any]] = field(default_factory=list)
    tasks: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ProfileData:
    user: Dict[str, Any] = field(default_factory=dict)
    projects: List[Dict[str, Any]] = field(default_factory=list)
    tasks: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ProjectDetailsData:
    project: Dict[str, Any] = field(default_factory=dict)
    tasks: List[Dict[str, Any]] = field(default_factory=list)
    users: List[Dict[str, Any]] = field(default_factory=list)


def load_dashboard(client: ProjectHubClient) -> DashboardData:
    data = fetch_all(projects=client.get_user_projects, tasks=client.get_assigned_tasks)
    return DashboardData(projects=data["projects"], tasks=data["tasks"])


def load_profile(client: ProjectHubClient) -> ProfileData:
    data = fetch_all(
        user=client.get_current_user,
        projects=client.get_user_projects,
        tasks=client.get_assigned_tasks,
    )
    return ProfileData(user=data["user"] or {}, projects=data["projects"], tasks=data["tasks"])


def load_project_details(client: ProjectHubClient, project_id: Any) -> ProjectDetailsData:
    data = fetch_all(
        project=lambda: client.get_project(project_id),
        tasks=lambda: client.get_project_tasks(project_id),
        users=client.get_all_users,
    )
    return ProjectDetailsData(project=data["project"] or {}, tasks=data["tasks"], users=data["users"])


def load_task_list(client: ProjectHubClient, scope: str = "assigned") -> List[Dict[str, Any]]:
    """Tasks for the task-list page: ``assigned`` to the user, or ``all``."""
    if scope == "all":
        return client.get_all_tasks()
    if scope == "assigned":
        return client.get_assigned_tasks()
    raise ValueError(f"Unknown task scope {scope!r}")
