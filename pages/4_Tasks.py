import streamlit as st

from projecthub.loaders import load_task_list
from projecthub.metrics import filter_tasks, format_status_label, sort_tasks
from projecthub.models import ALL_STATUSES, SORT_KEYS, TaskStatus
from projecthub.theme import set_theme
from projecthub.ui import api_errors, get_client, render_sidebar, require_session, task_card_html

set_theme(page_title="ProjectHub · Tasks", page_icon="✅")

session = require_session()
render_sidebar(session)
client = get_client(session)

TASK_STATUSES = [s.value for s in TaskStatus]
PENDING_STATUS_KEY = "pending_status_change"


def _queue_status_change(task_id, widget_key):
    st.session_state[PENDING_STATUS_KEY] = (task_id, st.session_state[widget_key], widget_key)


# Status edits come only from the selectbox callback and are sent once,
# before the list is reloaded.
pending = st.session_state.pop(PENDING_STATUS_KEY, None)
if pending is not None:
    task_id, new_status, widget_key = pending
    # The selector shows the backend status again whether or not the update went through.
    st.session_state.pop(widget_key, None)
    with api_errors("Updating task status", stop=False):
        client.update_task_status(task_id, new_status)
        st.toast("Task status updated", icon="✅")

st.title("Tasks")

scope = st.radio(
    "Show",
    ["assigned", "all"],
    format_func=lambda s: "My Tasks" if s == "assigned" else "All Tasks",
    horizontal=True,
    key="task-scope",
)

fc1, fc2, fc3 = st.columns([2.2, 1.1, 1.1])
with fc1:
    search = st.text_input("Search (title / description / project)", placeholder="Type to filter…")
with fc2:
    status_filter = st.selectbox(
        "Status",
        [ALL_STATUSES] + TASK_STATUSES,
        format_func=lambda s: "All Statuses" if s == ALL_STATUSES else format_status_label(s),
    )
with fc3:
    sort_by = st.selectbox("Sort by", list(SORT_KEYS), format_func=SORT_KEYS.get)

with st.spinner("Loading tasks..."), api_errors("Loading tasks"):
    tasks = load_task_list(client, scope)

visible = sort_tasks(filter_tasks(tasks, search, status_filter), sort_by)
st.caption(f"{len(visible)} of {len(tasks)} tasks")

if not visible:
    st.info("No tasks found.")

for task in visible:
    card, control = st.columns([4, 1])
    card.markdown(task_card_html(task), unsafe_allow_html=True)
    current = task.get("status")
    options = TASK_STATUSES if current in TASK_STATUSES else TASK_STATUSES + [current]
    # The backend status is part of the key so a change made elsewhere
    # resets the widget instead of being overwritten.
    widget_key = f"status-{task.get('id')}-{current}"
    control.selectbox(
        "Update status",
        options,
        index=options.index(current),
        format_func=format_status_label,
        key=widget_key,
        on_change=_queue_status_change,
        args=(task.get("id"), widget_key),
    )
