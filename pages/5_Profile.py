import html

import streamlit as st

from projecthub.loaders import load_profile
from projecthub.metrics import compute_summary_stats
from projecthub.theme import set_theme
from projecthub.ui import api_errors, get_client, render_sidebar, require_session, role_badge_html

set_theme(page_title="ProjectHub · Profile", page_icon="👤")

session = require_session()
render_sidebar(session)

st.title("My Profile")

with st.spinner("Loading profile..."), api_errors("Loading profile"):
    data = load_profile(get_client(session))

user = data.user
stats = compute_summary_stats(data.projects, data.tasks)

left, right = st.columns([1, 2])
with left:
    initial = (user.get("fullName") or user.get("username") or "?")[:1].upper()
    st.markdown(
        f"<div style='width:100px;height:100px;border-radius:50%;background:#007bff;color:#fff;"
        f"display:flex;align-items:center;justify-content:center;font-size:2.5rem;margin:0 auto'>{html.escape(initial)}</div>",
        unsafe_allow_html=True,
    )
    st.subheader(user.get("fullName") or session.username)
    st.caption(f"@{user.get('username') or session.username}")
    if user.get("email"):
        st.write(user["email"])
    if session.roles:
        st.markdown(" ".join(role_badge_html(r) for r in session.roles), unsafe_allow_html=True)

with right:
    st.subheader("Activity Summary")
    a1, a2 = st.columns(2)
    a1.metric("Projects", stats.total_projects)
    a2.metric("Tasks", stats.total_tasks)
    b1, b2 = st.columns(2)
    b1.metric("Completed Tasks", stats.completed_tasks)
    b2.metric("Overdue Tasks", stats.overdue_tasks)
    st.markdown("**Task Completion Rate**")
    st.progress(stats.completion_rate / 100, text=f"{stats.completion_rate}%")
