"""Status enums and shared constants for projects and tasks.

The enum values are the backend's wire tokens and are compared verbatim.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict


class ProjectStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    DONE = "DONE"
    BLOCKED = "BLOCKED"


ALL_STATUSES = "all"

# Sort keys accepted by metrics.sort_tasks, with their UI labels.
SORT_KEYS: Dict[str, str] = {
    "dueDate": "Due Date",
    "priority": "Priority",
    "status": "Status",
    "project": "Project",
}

PRIORITY_LABELS: Dict[int, str] = {
    1: "1 - Low",
    2: "2",
    3: "3 - Medium",
    4: "4",
    5: "5 - High",
}
