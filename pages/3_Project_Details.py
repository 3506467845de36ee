from typing import Any, Dict, List, Optional

import streamlit as st
from pydantic import ValidationError

from projecthub.loaders import load_project_details
from projecthub.metrics import format_status_label, non_members, project_completion_pct, tasks_by_status
from projecthub.models import PRIORITY_LABELS, TaskStatus
from projecthub.schemas import TaskRequest, validation_messages
from projecthub.theme import set_theme
from projecthub.ui import (
    api_errors,
    format_date,
    get_client,
    render_sidebar,
    require_session,
    status_badge_html,
    task_card_html,
    user_label,
)

set_theme(page_title="ProjectHub · Project", page_icon="📁")

session = require_session()
render_sidebar(session)
client = get_client(session)

TASK_STATUSES = [s.value for s in TaskStatus]


def _selected_project_id() -> Optional[str]:
    qp = st.query_params.get("project")
    if qp:
        return qp
    selected = st.session_state.get("selected_project_id")
    return str(selected) if selected is not None else None


project_id = _selected_project_id()
if project_id is None:
    with api_errors("Loading projects"):
        options = client.get_user_projects()
    if not options:
        st.info("No projects yet.")
        st.stop()
    chosen = st.selectbox("Project", options, format_func=lambda p: p.get("name") or str(p.get("id")))
    project_id = str(chosen["id"])

st.query_params["project"] = project_id

with st.spinner("Loading project..."), api_errors("Loading project"):
    data = load_project_details(client, project_id)

project = data.project
owner = project.get("owner") or {}
members: List[Dict[str, Any]] = project.get("members") or []
assignable = [owner] + [m for m in members if m.get("id") != owner.get("id")] if owner else members


@st.dialog("Task", width="large")
def task_dialog(task: Optional[Dict[str, Any]] = None):
    initial = TaskRequest.from_task(task) if task else None
    assignee_ids = [None] + [u.get("id") for u in assignable]
    labels = {u.get("id"): user_label(u) + (" (Owner)" if u.get("id") == owner.get("id") else "") for u in assignable}
    with st.form("task-form"):
        title = st.text_input("Title", value=initial.title if initial else "")
        description = st.text_area("Description", value=initial.description if initial else "")
        c1, c2 = st.columns(2)
        status = c1.selectbox(
            "Status",
            TASK_STATUSES,
            index=TASK_STATUSES.index(initial.status.value) if initial else 0,
            format_func=format_status_label,
        )
        priority = c2.selectbox(
            "Priority (1-5)",
            list(PRIORITY_LABELS),
            index=(initial.priority if initial else 3) - 1,
            format_func=PRIORITY_LABELS.get,
        )
        c3, c4 = st.columns(2)
        due = c3.date_input("Due date", value=initial.due_date if initial else None)
        current_assignee = initial.assignee_id if initial else None
        assignee = c4.selectbox(
            "Assignee",
            assignee_ids,
            index=assignee_ids.index(current_assignee) if current_assignee in assignee_ids else 0,
            format_func=lambda uid: "Select Assignee" if uid is None else labels.get(uid, str(uid)),
        )
        progress = st.slider("Progress (%)", 0, 100, value=initial.progress_percentage if initial else 0, step=5)
        submitted = st.form_submit_button("Update" if task else "Create", use_container_width=True)
    if not submitted:
        return
    try:
        request = TaskRequest(
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due,
            project_id=project.get("id"),
            assignee_id=assignee,
            progress_percentage=progress,
        )
    except ValidationError as exc:
        for msg in validation_messages(exc):
            st.error(msg)
        return
    with api_errors("Saving task"):
        if task:
            client.update_task(task["id"], request.to_payload())
        else:
            client.create_task(request.to_payload())
    st.rerun()


@st.dialog("Add member")
def member_dialog():
    candidates = non_members(data.users, project)
    if not candidates:
        st.write("All users are already members of this project.")
        return
    for user in candidates:
        c1, c2 = st.columns([3, 1])
        c1.write(f"{user_label(user)} ({user.get('email') or user.get('username')})")
        if c2.button("Add", key=f"add-member-{user.get('id')}"):
            with api_errors("Adding member"):
                client.add_project_member(project["id"], user["id"])
            st.rerun()


# ---------------- Header ----------------
st.title(project.get("name") or "Project")
st.markdown(status_badge_html(project.get("status")), unsafe_allow_html=True)
st.write(project.get("description") or "No description provided.")

m1, m2, m3 = st.columns(3)
m1.metric("Start", format_date(project.get("startDate")))
m2.metric("Due", format_date(project.get("dueDate")))
m3.metric("Owner", user_label(owner, missing="-"))
pct = project_completion_pct(project)
st.progress(pct / 100, text=f"Progress: {pct}% ({project.get('completedTasks', 0)}/{project.get('totalTasks', 0)} tasks)")

# ---------------- Tasks ----------------
t_head, t_action = st.columns([4, 1])
t_head.subheader("Tasks")
if t_action.button("Add Task", use_container_width=True):
    task_dialog()

groups = tasks_by_status(data.tasks)

# Unrecognised statuses land in a trailing "Unknown" tab.
tabs = st.tabs([f"{format_status_label(s)} ({len(tasks)})" for s, tasks in groups.items()])
for tab, status in zip(tabs, groups):
    with tab:
        if not groups[status]:
            st.caption("No tasks in this status.")
        for task in groups[status]:
            st.markdown(task_card_html(task, show_project=False), unsafe_allow_html=True)
            e1, e2, _ = st.columns([1, 1, 4])
            if e1.button("Edit", key=f"edit-task-{task['id']}", use_container_width=True):
                task_dialog(task)
            if e2.button("Delete", key=f"delete-task-{task['id']}", use_container_width=True):
                with api_errors("Deleting task"):
                    client.delete_task(task["id"])
                st.rerun()

# ---------------- Members ----------------
st.subheader("Team Members")
mc1, mc2 = st.columns([4, 1])
if mc2.button("Add Member", use_container_width=True):
    member_dialog()

if owner:
    st.markdown(f"**{user_label(owner)}** · Owner")
for member in members:
    if member.get("id") == owner.get("id"):
        continue
    r1, r2 = st.columns([4, 1])
    r1.write(f"{user_label(member)} ({member.get('email') or member.get('username')})")
    if r2.button("Remove", key=f"remove-member-{member.get('id')}", use_container_width=True):
        with api_errors("Removing member"):
            client.remove_project_member(project["id"], member["id"])
        st.rerun()
