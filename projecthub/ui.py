"""Streamlit helpers shared by every page."""
from __future__ import annotations

import html
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Mapping, Optional

import streamlit as st

from projecthub.api_client import ProjectHubClient
from projecthub.config import configure_logging, get_config
from projecthub.errors import ApiError, DataIntegrityError, UnauthorizedError
from projecthub.metrics import format_status_label, is_task_overdue, parse_timestamp
from projecthub.models import ProjectStatus, TaskStatus
from projecthub.session import Session, clear_session, get_session

logger = logging.getLogger(__name__)

SIGN_IN_PAGE = "app.py"
CLIENT_KEY = "projecthub_client"

_STATUS_TOKENS = frozenset(m.value for m in ProjectStatus) | frozenset(m.value for m in TaskStatus)


def status_badge_class(status: Any) -> str:
    token = status.value if isinstance(status, Enum) else str(status or "")
    return f"ph-status-{token}" if token in _STATUS_TOKENS else "ph-status-unknown"


def status_badge_html(status: Any) -> str:
    label = html.escape(format_status_label(status))
    return f'<span class="ph-badge {status_badge_class(status)}">{label}</span>'


def format_date(value: Any, missing: str = "Not set") -> str:
    parsed = parse_timestamp(value)
    return parsed.strftime("%Y-%m-%d") if parsed else missing


def user_label(user: Optional[Mapping[str, Any]], missing: str = "Unassigned") -> str:
    if not user:
        return missing
    return str(user.get("fullName") or user.get("username") or missing)


def task_card_html(task: Mapping[str, Any], *, show_project: bool = True) -> str:
    overdue = is_task_overdue(task)
    due = format_date(task.get("dueDate"), missing="No due date")
    due_html = f'<span class="ph-overdue">Due: {due} (Overdue)</span>' if overdue else f"Due: {due}"
    parts = [
        f'<div class="ph-card{" ph-card-overdue" if overdue else ""}">',
        f'<div class="ph-card-title">{html.escape(str(task.get("title") or "Untitled"))} '
        f'{status_badge_html(task.get("status"))}</div>',
        f'<div class="ph-card-meta">{due_html} · Priority: {task.get("priority", "-")}'
        f' · Progress: {int(task.get("progressPercentage") or 0)}%</div>',
    ]
    if show_project and task.get("projectName"):
        parts.append(f'<div class="ph-card-meta">Project: {html.escape(str(task["projectName"]))}</div>')
    parts.append(f'<div class="ph-card-meta">Assignee: {html.escape(user_label(task.get("assignee")))}</div>')
    parts.append("</div>")
    return "".join(parts)


def _bootstrap_logging() -> None:
    if not st.session_state.get("_logging_configured"):
        configure_logging(get_config().log_level)
        st.session_state["_logging_configured"] = True


def get_client(session: Optional[Session] = None) -> ProjectHubClient:
    """Return this browser session's client, rebuilding it when the user changes.

    The client and its connection pool live in session state across reruns.
    """
    _bootstrap_logging()
    client = st.session_state.get(CLIENT_KEY)
    if isinstance(client, ProjectHubClient) and client.session is session:
        return client
    if isinstance(client, ProjectHubClient):
        client.close()
    client = ProjectHubClient.from_config(get_config(), session=session)
    st.session_state[CLIENT_KEY] = client
    return client


def anonymous_client() -> ProjectHubClient:
    return get_client(None)


def require_session() -> Session:
    """Return the signed-in session or send the user to the sign-in page."""
    _bootstrap_logging()
    session = get_session(st.session_state)
    if session is None:
        st.switch_page(SIGN_IN_PAGE)
    return session


def sign_out() -> None:
    clear_session(st.session_state)
    st.switch_page(SIGN_IN_PAGE)


@contextmanager
def api_errors(action: str = "Request", *, stop: bool = True) -> Iterator[None]:
    """Map backend and data-contract errors to their UI responses.

    401 clears the session and returns to sign-in. An unknown status token is
    reported as a contract problem in place and the page carries on. Any other
    backend failure is shown inline and, unless ``stop`` is False, ends the
    current page run.
    """
    try:
        yield
    except UnauthorizedError:
        logger.info("Session rejected by backend; signing out")
        clear_session(st.session_state)
        st.session_state["flash"] = "Your session has expired. Please sign in again."
        st.switch_page(SIGN_IN_PAGE)
    except DataIntegrityError as exc:
        logger.error("%s failed: %s", action, exc)
        st.error(
            f"{action} failed: the server returned a status this client does not recognise "
            f"({exc.value!r} for {exc.enum_name}). Client and server are out of sync."
        )
    except ApiError as exc:
        logger.warning("%s failed: %s", action, exc.to_dict())
        st.error(f"{action} failed: {exc.message}")
        if stop:
            st.stop()


def render_sidebar(session: Session) -> None:
    with st.sidebar:
        st.markdown(f"**{session.username}**")
        if session.role_labels:
            st.caption(", ".join(session.role_labels))
        if st.button("Logout", key="sidebar-logout", use_container_width=True):
            sign_out()


def project_card_html(project: Mapping[str, Any], *, description_limit: int = 100) -> str:
    description = str(project.get("description") or "No description provided.")
    if len(description) > description_limit:
        description = description[:description_limit] + "..."
    return (
        '<div class="ph-card">'
        f'<div class="ph-card-title">{html.escape(str(project.get("name") or "Untitled"))} '
        f'{status_badge_html(project.get("status"))}</div>'
        f'<div class="ph-card-meta">{html.escape(description)}</div>'
        f'<div class="ph-card-meta">Start: {format_date(project.get("startDate"))}'
        f' · Due: {format_date(project.get("dueDate"))}'
        f' · Tasks: {project.get("completedTasks", 0)}/{project.get("totalTasks", 0)}</div>'
        "</div>"
    )


def role_badge_html(role: str) -> str:
    variant = {"ROLE_ADMIN": "danger", "ROLE_MEMBER": "info"}.get(role, "secondary")
    label = role[5:] if role.startswith("ROLE_") else role
    return f'<span class="ph-badge ph-badge-{variant}">{html.escape(label)}</span>'
