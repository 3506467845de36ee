from datetime import date
from typing import Any, Dict, Optional

import streamlit as st
from pydantic import ValidationError

from projecthub.metrics import format_status_label, project_completion_pct
from projecthub.models import ProjectStatus
from projecthub.schemas import ProjectRequest, validation_messages
from projecthub.theme import set_theme
from projecthub.ui import api_errors, get_client, project_card_html, render_sidebar, require_session

set_theme(page_title="ProjectHub · Projects", page_icon="🗂️")

session = require_session()
render_sidebar(session)
client = get_client(session)

PROJECT_STATUSES = [s.value for s in ProjectStatus]


@st.dialog("Project", width="large")
def project_dialog(project: Optional[Dict[str, Any]] = None):
    initial = ProjectRequest.from_project(project) if project else None
    with st.form("project-form"):
        name = st.text_input("Project name", value=initial.name if initial else "")
        description = st.text_area("Description", value=initial.description if initial else "")
        c1, c2 = st.columns(2)
        start = c1.date_input("Start date", value=initial.start_date if initial else date.today())
        due = c2.date_input("Due date", value=initial.due_date if initial else None)
        status = st.selectbox(
            "Status",
            PROJECT_STATUSES,
            index=PROJECT_STATUSES.index(initial.status.value) if initial else 0,
            format_func=format_status_label,
        )
        submitted = st.form_submit_button("Update" if project else "Create", use_container_width=True)
    if not submitted:
        return
    try:
        request = ProjectRequest(
            name=name,
            description=description,
            start_date=start,
            due_date=due,
            status=status,
            member_ids=initial.member_ids if initial else [],
        )
    except ValidationError as exc:
        for msg in validation_messages(exc):
            st.error(msg)
        return
    with api_errors("Saving project"):
        if project:
            client.update_project(project["id"], request.to_payload())
        else:
            client.create_project(request.to_payload())
    st.rerun()


@st.dialog("Delete project")
def delete_dialog(project: Dict[str, Any]):
    st.write(f"Are you sure you want to delete **{project.get('name')}**?")
    if st.button("Delete", type="primary", use_container_width=True):
        with api_errors("Deleting project"):
            client.delete_project(project["id"])
        st.rerun()


head, action = st.columns([4, 1])
head.title("My Projects")
if action.button("Create New Project", use_container_width=True):
    project_dialog()

with st.spinner("Loading projects..."), api_errors("Loading projects"):
    projects = client.get_user_projects()

if not projects:
    st.info("You don't have any projects yet. Create your first project to get started!")

cols = st.columns(3)
for i, project in enumerate(projects):
    with cols[i % 3]:
        st.markdown(project_card_html(project), unsafe_allow_html=True)
        pct = project_completion_pct(project)
        st.progress(pct / 100, text=f"Progress: {pct}%")
        b1, b2, b3 = st.columns(3)
        if b1.button("Open", key=f"open-{project['id']}", use_container_width=True):
            st.session_state["selected_project_id"] = project["id"]
            st.switch_page("pages/3_Project_Details.py")
        if b2.button("Edit", key=f"edit-{project['id']}", use_container_width=True):
            project_dialog(project)
        if b3.button("Delete", key=f"delete-{project['id']}", use_container_width=True):
            delete_dialog(project)
