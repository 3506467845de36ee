import streamlit as st

from projecthub.charts import project_status_pie, task_status_bar
from projecthub.config import get_config
from projecthub.loaders import load_dashboard
from projecthub.metrics import compute_summary_stats, select_recent, select_upcoming
from projecthub.theme import set_theme
from projecthub.ui import (
    api_errors,
    get_client,
    project_card_html,
    render_sidebar,
    require_session,
    task_card_html,
)

set_theme(page_title="ProjectHub · Dashboard", page_icon="📊")

session = require_session()
render_sidebar(session)
cfg = get_config()

st.title("Dashboard")

with st.spinner("Loading dashboard..."), api_errors("Loading dashboard"):
    data = load_dashboard(get_client(session))

stats = compute_summary_stats(data.projects, data.tasks)

k1, k2, k3, k4 = st.columns(4)
k1.metric("Total Projects", stats.total_projects)
k2.metric("Total Tasks", stats.total_tasks)
k3.metric("Completed Tasks", stats.completed_tasks, f"{stats.completion_rate}%", delta_color="off")
k4.metric("Overdue Tasks", stats.overdue_tasks)

c1, c2 = st.columns(2)
# A bad status token only blanks its own chart.
with c1, api_errors("Building project status chart"):
    st.plotly_chart(project_status_pie(data.projects), use_container_width=True)
with c2, api_errors("Building task status chart"):
    st.plotly_chart(task_status_bar(data.tasks), use_container_width=True)

r1, r2 = st.columns(2)
with r1:
    st.subheader("Recent Projects")
    recent = select_recent(data.projects, cfg.recent_limit)
    if not recent:
        st.write("No projects found.")
    for project in recent:
        st.markdown(project_card_html(project), unsafe_allow_html=True)
        if st.button("Open", key=f"open-project-{project.get('id')}"):
            st.session_state["selected_project_id"] = project.get("id")
            st.switch_page("pages/3_Project_Details.py")

with r2:
    st.subheader("Upcoming Tasks")
    upcoming = select_upcoming(data.tasks, cfg.upcoming_limit)
    if not upcoming:
        st.write("No upcoming tasks found.")
    for task in upcoming:
        st.markdown(task_card_html(task), unsafe_allow_html=True)
