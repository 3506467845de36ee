from datetime import date, datetime

import pytest

from projecthub import metrics
from projecthub.errors import DataIntegrityError
from projecthub.models import ProjectStatus, TaskStatus


def test_summary_stats_empty_is_all_zero():
    stats = metrics.compute_summary_stats([], [])
    assert stats.to_dict() == {
        "total_projects": 0,
        "total_tasks": 0,
        "overdue_tasks": 0,
        "completed_tasks": 0,
        "completion_rate": 0,
    }


def test_summary_stats_completion_rate_rounds(task_factory, project_factory):
    tasks = [task_factory(status="DONE"), task_factory(status="TODO"), task_factory(status="DONE")]
    stats = metrics.compute_summary_stats([project_factory()], tasks)
    assert stats.total_projects == 1
    assert stats.total_tasks == 3
    assert stats.completed_tasks == 2
    assert stats.completion_rate == 67


@pytest.mark.parametrize(
    "done,total,expected",
    [(1, 2, 50), (1, 8, 13), (1, 3, 33), (3, 8, 38), (5, 5, 100), (0, 4, 0)],
)
def test_completion_rate_rounds_half_up(task_factory, done, total, expected):
    tasks = [task_factory(status="DONE") for _ in range(done)]
    tasks += [task_factory(status="TODO") for _ in range(total - done)]
    assert metrics.compute_summary_stats([], tasks).completion_rate == expected


def test_summary_stats_overdue_accepts_either_field(mixed_tasks):
    stats = metrics.compute_summary_stats([], mixed_tasks)
    assert stats.overdue_tasks == 2
    assert stats.completed_tasks == 1


def test_overdue_requires_literal_true(task_factory):
    tasks = [task_factory(overdue="yes"), task_factory(isOverdue=1), task_factory(overdue=False, isOverdue=True)]
    assert [metrics.is_task_overdue(t) for t in tasks] == [False, False, True]


def test_completed_is_case_sensitive(task_factory):
    stats = metrics.compute_summary_stats([], [task_factory(status="done"), task_factory(status="DONE")])
    assert stats.completed_tasks == 1


def test_bucket_by_status_has_every_key_in_order(mixed_tasks):
    counts = metrics.bucket_by_status(mixed_tasks, TaskStatus)
    assert list(counts) == list(TaskStatus)
    assert counts[TaskStatus.DONE] == 1
    assert counts[TaskStatus.BLOCKED] == 1
    assert sum(counts.values()) == len(mixed_tasks)


def test_bucket_by_status_empty_input_keeps_all_buckets():
    counts = metrics.bucket_by_status([], ProjectStatus)
    assert list(counts) == list(ProjectStatus)
    assert set(counts.values()) == {0}


def test_bucket_by_status_projects(project_factory):
    projects = [project_factory(status="COMPLETED"), project_factory(status="ON_HOLD"), project_factory(status="COMPLETED")]
    counts = metrics.bucket_by_status(projects, ProjectStatus)
    assert counts[ProjectStatus.COMPLETED] == 2
    assert counts[ProjectStatus.ON_HOLD] == 1
    assert counts[ProjectStatus.NOT_STARTED] == 0


def test_bucket_by_status_unknown_token_raises(task_factory):
    bad = task_factory(id=99, status="UNKNOWN_TOKEN")
    with pytest.raises(DataIntegrityError) as excinfo:
        metrics.bucket_by_status([task_factory(), bad], TaskStatus)
    assert excinfo.value.value == "UNKNOWN_TOKEN"
    assert excinfo.value.enum_name == "TaskStatus"
    assert excinfo.value.entity_id == 99


def test_bucket_by_status_rejects_token_from_other_enum(project_factory):
    with pytest.raises(DataIntegrityError):
        metrics.bucket_by_status([project_factory(status="TODO")], ProjectStatus)


def test_bucket_by_status_missing_status_raises(task_factory):
    with pytest.raises(DataIntegrityError):
        metrics.bucket_by_status([task_factory(status=None)], TaskStatus)


def test_bucket_by_status_custom_accessor():
    rows = [{"state": "DONE"}, {"state": "REVIEW"}]
    counts = metrics.bucket_by_status(rows, TaskStatus, lambda r: r["state"])
    assert counts[TaskStatus.DONE] == 1
    assert counts[TaskStatus.REVIEW] == 1


def test_tasks_by_status_groups_in_enum_order(mixed_tasks):
    groups = metrics.tasks_by_status(mixed_tasks)
    assert list(groups) == list(TaskStatus)
    assert [t["title"] for t in groups[TaskStatus.REVIEW]] == ["Review PR"]


def test_tasks_by_status_collects_unrecognised_under_none(task_factory):
    tasks = [task_factory(id=1, status="TODO"), task_factory(id=2, status=None), task_factory(id=3, status="ARCHIVED")]
    groups = metrics.tasks_by_status(tasks)
    assert list(groups)[-1] is None
    assert [t["id"] for t in groups[None]] == [2, 3]
    assert [t["id"] for t in groups[TaskStatus.TODO]] == [1]


def test_tasks_by_status_has_no_unknown_group_when_clean(mixed_tasks):
    assert None not in metrics.tasks_by_status(mixed_tasks)


def test_bucket_by_status_unhashable_token_raises_integrity_error(task_factory):
    with pytest.raises(DataIntegrityError):
        metrics.bucket_by_status([task_factory(status=["TODO"])], TaskStatus)


def test_bucket_by_status_rejects_member_of_other_enum(project_factory):
    with pytest.raises(DataIntegrityError):
        metrics.bucket_by_status([project_factory(status=TaskStatus.IN_PROGRESS)], ProjectStatus)


def test_bucket_by_status_accepts_own_enum_member(project_factory):
    counts = metrics.bucket_by_status([project_factory(status=ProjectStatus.ON_HOLD)], ProjectStatus)
    assert counts[ProjectStatus.ON_HOLD] == 1


@pytest.mark.parametrize(
    "raw,label",
    [
        ("IN_PROGRESS", "In Progress"),
        ("NOT_STARTED", "Not Started"),
        ("DONE", "Done"),
        (TaskStatus.TODO, "Todo"),
        (None, "Unknown"),
        ("", "Unknown"),
    ],
)
def test_format_status_label(raw, label):
    assert metrics.format_status_label(raw) == label


def test_format_status_label_is_idempotent():
    once = metrics.format_status_label("IN_PROGRESS")
    assert metrics.format_status_label(once.lower()) == once
    assert metrics.format_status_label(once) == once


def test_filter_identity(mixed_tasks):
    assert metrics.filter_tasks(mixed_tasks, "", "all") == mixed_tasks
    assert metrics.filter_tasks(mixed_tasks, None, None) == mixed_tasks


def test_filter_search_is_case_insensitive_across_fields(mixed_tasks):
    assert [t["title"] for t in metrics.filter_tasks(mixed_tasks, "LOGIN")] == ["Fix login"]
    assert [t["title"] for t in metrics.filter_tasks(mixed_tasks, "infra")] == ["Deploy"]
    assert [t["title"] for t in metrics.filter_tasks(mixed_tasks, "zeus")] == ["Plan sprint"]


def test_filter_keeps_tasks_with_null_description(task_factory):
    task = task_factory(title="Alpha", description=None)
    assert metrics.filter_tasks([task], "alp") == [task]
    assert metrics.filter_tasks([task], "nothing") == []


def test_filter_status_and_search_are_anded(mixed_tasks):
    assert metrics.filter_tasks(mixed_tasks, "p", "REVIEW") == [mixed_tasks[3]]
    assert metrics.filter_tasks(mixed_tasks, "login", "DONE") == []


def test_filter_does_not_mutate_input(mixed_tasks):
    before = list(mixed_tasks)
    result = metrics.filter_tasks(mixed_tasks, "", "TODO")
    assert mixed_tasks == before
    assert result is not mixed_tasks


def test_sort_by_due_date_puts_undated_last_in_input_order(task_factory):
    a = task_factory(title="a")
    b = task_factory(title="b", dueDate="2025-05-01T00:00:00")
    c = task_factory(title="c")
    d = task_factory(title="d", dueDate="2025-01-01T00:00:00")
    ordered = metrics.sort_tasks([a, b, c, d], "dueDate")
    assert [t["title"] for t in ordered] == ["d", "b", "a", "c"]


def test_sort_by_due_date_handles_mixed_formats(task_factory):
    a = task_factory(title="a", dueDate="2025-01-02T00:00:00Z")
    b = task_factory(title="b", dueDate=date(2025, 1, 1))
    c = task_factory(title="c", dueDate="not a date")
    assert [t["title"] for t in metrics.sort_tasks([c, a, b], "dueDate")] == ["b", "a", "c"]


def test_sort_by_priority_descending_and_stable(mixed_tasks):
    ordered = metrics.sort_tasks(mixed_tasks, "priority")
    assert [t["title"] for t in ordered] == ["Fix login", "Deploy", "Review PR", "Write docs", "Plan sprint"]


def test_sort_by_status_and_project(mixed_tasks):
    by_status = metrics.sort_tasks(mixed_tasks, "status")
    assert [t["status"] for t in by_status] == ["BLOCKED", "DONE", "IN_PROGRESS", "REVIEW", "TODO"]
    by_project = metrics.sort_tasks(mixed_tasks, "project")
    assert by_project[-1]["projectName"] == "Zeus"
    assert [t["title"] for t in by_project[:4]] == ["Write docs", "Fix login", "Review PR", "Deploy"]


def test_sort_tolerates_missing_fields(task_factory):
    tasks = [task_factory(status=None, projectName=None, priority=None), task_factory()]
    assert len(metrics.sort_tasks(tasks, "status")) == 2
    assert len(metrics.sort_tasks(tasks, "project")) == 2
    assert metrics.sort_tasks(tasks, "priority")[0] is tasks[1]


def test_sort_unknown_key_raises(mixed_tasks):
    with pytest.raises(ValueError):
        metrics.sort_tasks(mixed_tasks, "title")


def test_select_upcoming_scenario(task_factory):
    done = task_factory(status="DONE", dueDate="2030-01-01")
    undated = task_factory(status="TODO", dueDate=None)
    soon = task_factory(status="TODO", dueDate="2025-01-01")
    assert metrics.select_upcoming([done, undated, soon], 2) == [soon, undated]


def test_select_upcoming_truncates(task_factory):
    tasks = [task_factory(dueDate=f"2025-01-{d:02d}") for d in range(10, 1, -1)]
    upcoming = metrics.select_upcoming(tasks, 3)
    assert [t["dueDate"] for t in upcoming] == ["2025-01-02", "2025-01-03", "2025-01-04"]
    assert metrics.select_upcoming(tasks, 0) == []


def test_select_recent_newest_first(project_factory):
    old = project_factory(name="old", createdAt="2024-01-01T00:00:00")
    new = project_factory(name="new", createdAt="2025-06-01T12:00:00")
    mid = project_factory(name="mid", createdAt="2025-01-01T00:00:00")
    none = project_factory(name="none", createdAt=None)
    assert [p["name"] for p in metrics.select_recent([old, none, new, mid], 3)] == ["new", "mid", "old"]
    assert metrics.select_recent([none, old], 5)[-1] is none


def test_project_completion_pct(project_factory):
    assert metrics.project_completion_pct(project_factory(totalTasks=3, completedTasks=2)) == 67
    assert metrics.project_completion_pct(project_factory(totalTasks=0, completedTasks=0)) == 0
    assert metrics.project_completion_pct({}) == 0


def test_non_members_excludes_owner_and_members(project_factory):
    users = [{"id": 1}, {"id": 2}, {"id": 3}, {"id": 4}]
    project = project_factory(owner={"id": 1}, members=[{"id": 3}])
    assert metrics.non_members(users, project) == [{"id": 2}, {"id": 4}]


def test_parse_timestamp_variants():
    assert metrics.parse_timestamp(None) is None
    assert metrics.parse_timestamp("") is None
    assert metrics.parse_timestamp("garbage") is None
    assert metrics.parse_timestamp("2025-01-02T03:04:05") == datetime(2025, 1, 2, 3, 4, 5)
    assert metrics.parse_timestamp("2025-01-02T03:04:05+02:00") == datetime(2025, 1, 2, 1, 4, 5)
    assert metrics.parse_timestamp(date(2025, 1, 2)) == datetime(2025, 1, 2)
