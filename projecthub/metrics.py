"""Derived statistics, histograms and task-list views.

Every function here is pure: it reads already-fetched project/task dicts and
returns fresh values. Missing optional fields never raise; a status token
outside its enum raises ``DataIntegrityError`` wherever statuses are tallied.
"""
from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Type

import pandas as pd

from projecthub.errors import DataIntegrityError
from projecthub.models import ALL_STATUSES, TaskStatus

logger = logging.getLogger(__name__)

Entity = Mapping[str, Any]

_WORD_SPLIT = re.compile(r"[_\s]+")


@dataclass(frozen=True)
class SummaryStats:
    total_projects: int = 0
    total_tasks: int = 0
    overdue_tasks: int = 0
    completed_tasks: int = 0
    completion_rate: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _percent(part: int, whole: int) -> int:
    # Integer round-half-up of part/whole*100.
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (2 * whole)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 value into a naive datetime, or None if absent/invalid.

    Zone-aware values are converted to UTC before the zone is dropped so that
    backend timestamps with and without offsets stay comparable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            ts = pd.to_datetime(str(value), errors="coerce")
            if pd.isna(ts):
                return None
            parsed = ts.to_pydatetime()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def is_task_overdue(task: Entity) -> bool:
    return task.get("overdue") is True or task.get("isOverdue") is True


def compute_summary_stats(projects: Sequence[Entity], tasks: Sequence[Entity]) -> SummaryStats:
    total_tasks = len(tasks)
    completed = sum(1 for t in tasks if t.get("status") == TaskStatus.DONE.value)
    return SummaryStats(
        total_projects=len(projects),
        total_tasks=total_tasks,
        overdue_tasks=sum(1 for t in tasks if is_task_overdue(t)),
        completed_tasks=completed,
        completion_rate=_percent(completed, total_tasks),
    )


def _status_of(entity: Entity) -> Any:
    return entity.get("status")


def _member_for(raw: Any, status_enum: Type[Enum]) -> Optional[Enum]:
    # Plain string tokens or members of this enum only; members of another
    # str-valued enum would otherwise match by value.
    if isinstance(raw, status_enum):
        return raw
    if isinstance(raw, str) and not isinstance(raw, Enum):
        for member in status_enum:
            if member.value == raw:
                return member
    return None


def bucket_by_status(
    entities: Iterable[Entity],
    status_enum: Type[Enum],
    status_accessor: Callable[[Entity], Any] = _status_of,
) -> Dict[Enum, int]:
    """Count entities per status, keyed by enum member in declared order.

    Raises DataIntegrityError when an entity carries a token that is not a
    member of ``status_enum``.
    """
    counts: Dict[Enum, int] = {member: 0 for member in status_enum}
    for entity in entities:
        raw = status_accessor(entity)
        member = _member_for(raw, status_enum)
        if member is None:
            raise DataIntegrityError(raw, status_enum.__name__, entity.get("id"))
        counts[member] += 1
    return counts


def tasks_by_status(tasks: Iterable[Entity]) -> Dict[Optional[TaskStatus], List[Entity]]:
    """Group tasks per TaskStatus in declared order.

    Tasks whose status is missing or unrecognised are collected under a
    trailing ``None`` key, present only when there are such tasks.
    """
    groups: Dict[Optional[TaskStatus], List[Entity]] = {member: [] for member in TaskStatus}
    unknown: List[Entity] = []
    for task in tasks:
        member = _member_for(task.get("status"), TaskStatus)
        if member is None:
            unknown.append(task)
        else:
            groups[member].append(task)
    if unknown:
        logger.warning("%d task(s) with unrecognised status: %s", len(unknown), [t.get("id") for t in unknown])
        groups[None] = unknown
    return groups


def format_status_label(status: Any) -> str:
    """``IN_PROGRESS`` -> ``In Progress``; None or empty -> ``Unknown``."""
    if isinstance(status, Enum):
        status = status.value
    if status is None or str(status).strip() == "":
        return "Unknown"
    words = [w for w in _WORD_SPLIT.split(str(status).lower()) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def filter_tasks(
    tasks: Sequence[Entity],
    search_term: Optional[str] = "",
    status_filter: Optional[str] = ALL_STATUSES,
) -> List[Entity]:
    needle = (search_term or "").casefold()
    wanted = status_filter or ALL_STATUSES

    def _matches(task: Entity) -> bool:
        if needle:
            haystacks = (task.get("title"), task.get("description"), task.get("projectName"))
            if not any(h is not None and needle in str(h).casefold() for h in haystacks):
                return False
        if wanted != ALL_STATUSES and task.get("status") != wanted:
            return False
        return True

    return [t for t in tasks if _matches(t)]


def _due_date_key(task: Entity):
    due = parse_timestamp(task.get("dueDate"))
    # Undated tasks share one rank after every dated task.
    return (due is None, due or datetime.min)


def _priority_key(task: Entity):
    priority = task.get("priority")
    return -int(priority) if priority is not None else 0


_SORTERS: Dict[str, Callable[[Entity], Any]] = {
    "dueDate": _due_date_key,
    "priority": _priority_key,
    "status": lambda t: str(t.get("status") or ""),
    "project": lambda t: str(t.get("projectName") or ""),
}


def sort_tasks(tasks: Sequence[Entity], sort_key: str) -> List[Entity]:
    """Stable sort by one of ``dueDate``, ``priority``, ``status``, ``project``."""
    try:
        key = _SORTERS[sort_key]
    except KeyError:
        raise ValueError(f"Unknown sort key {sort_key!r}; expected one of {sorted(_SORTERS)}") from None
    return sorted(tasks, key=key)


def select_upcoming(tasks: Sequence[Entity], n: int = 5) -> List[Entity]:
    open_tasks = [t for t in tasks if t.get("status") != TaskStatus.DONE.value]
    return sort_tasks(open_tasks, "dueDate")[: max(n, 0)]


def select_recent(projects: Sequence[Entity], n: int = 5) -> List[Entity]:
    stamped = [(parse_timestamp(p.get("createdAt")), p) for p in projects]
    # reverse=True keeps ties in input order; projects without createdAt go last.
    dated = sorted((s for s in stamped if s[0] is not None), key=lambda s: s[0], reverse=True)
    undated = [s for s in stamped if s[0] is None]
    return [p for _, p in dated + undated][: max(n, 0)]


def project_completion_pct(project: Entity) -> int:
    return _percent(int(project.get("completedTasks") or 0), int(project.get("totalTasks") or 0))


def non_members(users: Sequence[Entity], project: Entity) -> List[Entity]:
    """Users that are neither the owner nor a member of ``project``."""
    taken = {m.get("id") for m in (project.get("members") or [])}
    owner = project.get("owner") or {}
    if owner.get("id") is not None:
        taken.add(owner.get("id"))
    return [u for u in users if u.get("id") not in taken]
