"""Request models for the backend's write endpoints.

The constraints mirror the backend DTOs and the sign-up rules, so a form can be
rejected before any HTTP call is made. ``to_payload`` renders the camelCase
JSON body the backend expects.
"""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from projecthub.metrics import parse_timestamp
from projecthub.models import ProjectStatus, TaskStatus

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

FIELD_LABELS: Dict[str, str] = {
    "username": "Username",
    "password": "Password",
    "confirm_password": "Confirm Password",
    "email": "Email",
    "full_name": "Full name",
    "name": "Project name",
    "title": "Task title",
    "start_date": "Start date",
    "due_date": "Due date",
    "priority": "Priority",
    "progress_percentage": "Progress",
    "project_id": "Project",
}


def _as_local_datetime(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None).isoformat()
    return datetime.combine(value, time.min).isoformat()


def _as_date(value: Any) -> Optional[date]:
    parsed = parse_timestamp(value)
    return parsed.date() if parsed else None


def _known_status(value: Any, status_enum, default):
    # Edit forms open on tasks/projects whose status this client does not know.
    tokens = {m.value for m in status_enum}
    return value if isinstance(value, str) and value in tokens else default


class _Request(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class LoginRequest(_Request):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignupRequest(_Request):
    username: str = Field(min_length=3, max_length=20)
    email: str = Field(pattern=_EMAIL_PATTERN)
    full_name: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=40)
    confirm_password: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Confirm Password does not match")
        return self

    def to_payload(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "email": self.email,
            "password": self.password,
            "fullName": self.full_name,
        }


class ProjectRequest(_Request):
    name: str = Field(min_length=1)
    description: str = ""
    start_date: date
    due_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.NOT_STARTED
    member_ids: List[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _due_after_start(self) -> "ProjectRequest":
        if self.due_date is not None and self.due_date < self.start_date:
            raise ValueError("Due date must be after start date")
        return self

    @classmethod
    def from_project(cls, project: Mapping[str, Any]) -> "ProjectRequest":
        """Prefill an edit form from a fetched project."""
        return cls(
            name=project.get("name") or "",
            description=project.get("description") or "",
            start_date=_as_date(project.get("startDate")) or date.today(),
            due_date=_as_date(project.get("dueDate")),
            status=_known_status(project.get("status"), ProjectStatus, ProjectStatus.NOT_STARTED),
            member_ids=[m["id"] for m in (project.get("members") or []) if m.get("id") is not None],
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "startDate": _as_local_datetime(self.start_date),
            "dueDate": _as_local_datetime(self.due_date),
            "status": self.status.value,
            "memberIds": list(self.member_ids),
        }


class TaskRequest(_Request):
    title: str = Field(min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: int = Field(default=3, ge=1, le=5)
    due_date: Optional[date] = None
    project_id: int
    assignee_id: Optional[int] = None
    progress_percentage: int = Field(default=0, ge=0, le=100)

    @field_validator("assignee_id", mode="before")
    @classmethod
    def _blank_assignee(cls, value: Any) -> Any:
        return None if value in ("", None) else value

    @classmethod
    def from_task(cls, task: Mapping[str, Any]) -> "TaskRequest":
        assignee = task.get("assignee") or {}
        return cls(
            title=task.get("title") or "",
            description=task.get("description") or "",
            status=_known_status(task.get("status"), TaskStatus, TaskStatus.TODO),
            priority=task.get("priority") or 3,
            due_date=_as_date(task.get("dueDate")),
            project_id=task.get("projectId"),
            assignee_id=assignee.get("id"),
            progress_percentage=task.get("progressPercentage") or 0,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority,
            "dueDate": _as_local_datetime(self.due_date),
            "projectId": self.project_id,
            "assigneeId": self.assignee_id,
            "progressPercentage": self.progress_percentage,
        }


def validation_messages(exc: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into one readable line per problem."""
    messages: List[str] = []
    for err in exc.errors():
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        loc = err.get("loc") or ()
        if loc:
            field = str(loc[0])
            msg = f"{FIELD_LABELS.get(field, field)}: {msg}"
        messages.append(msg)
    return messages
