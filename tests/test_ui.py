from unittest.mock import MagicMock

import pytest

from projecthub import ui
from projecthub.errors import ApiError, DataIntegrityError, UnauthorizedError
from projecthub.models import TaskStatus
from projecthub.session import SESSION_KEY, Session


@pytest.mark.parametrize(
    "status,css_class",
    [
        ("COMPLETED", "ph-status-COMPLETED"),
        ("IN_PROGRESS", "ph-status-IN_PROGRESS"),
        (TaskStatus.REVIEW, "ph-status-REVIEW"),
        ("SOMETHING_ELSE", "ph-status-unknown"),
        (None, "ph-status-unknown"),
        (["TODO"], "ph-status-unknown"),
    ],
)
def test_status_badge_class(status, css_class):
    assert ui.status_badge_class(status) == css_class


def test_status_badge_html():
    assert ui.status_badge_html("ON_HOLD") == '<span class="ph-badge ph-status-ON_HOLD">On Hold</span>'


def test_format_date():
    assert ui.format_date("2025-04-02T13:45:00") == "2025-04-02"
    assert ui.format_date(None) == "Not set"
    assert ui.format_date("", missing="-") == "-"


def test_user_label():
    assert ui.user_label({"fullName": "Alice Liddell", "username": "alice"}) == "Alice Liddell"
    assert ui.user_label({"username": "alice"}) == "alice"
    assert ui.user_label(None) == "Unassigned"


def test_task_card_escapes_and_flags_overdue(task_factory):
    card = ui.task_card_html(task_factory(title="<b>x</b>", overdue=True, projectName="Apollo"))
    assert "&lt;b&gt;x&lt;/b&gt;" in card
    assert "ph-card-overdue" in card
    assert "(Overdue)" in card
    assert "Project: Apollo" in card
    assert "Project:" not in ui.task_card_html(task_factory(projectName="Apollo"), show_project=False)


def test_project_card_truncates_description(project_factory):
    card = ui.project_card_html(project_factory(description="x" * 150), description_limit=100)
    assert "x" * 100 + "..." in card
    assert "x" * 101 not in card


def test_role_badge_html():
    assert ui.role_badge_html("ROLE_ADMIN") == '<span class="ph-badge ph-badge-danger">ADMIN</span>'


@pytest.fixture
def fake_st(monkeypatch):
    state = {SESSION_KEY: Session(token="t", username="u")}
    monkeypatch.setattr(ui.st, "session_state", state)
    for name in ("error", "stop", "switch_page"):
        monkeypatch.setattr(ui.st, name, MagicMock())
    return ui.st


def test_api_errors_unauthorized_signs_out(fake_st):
    with ui.api_errors("Loading"):
        raise UnauthorizedError("expired", status_code=401)
    assert SESSION_KEY not in fake_st.session_state
    assert "flash" in fake_st.session_state
    fake_st.switch_page.assert_called_once_with(ui.SIGN_IN_PAGE)


def test_api_errors_integrity_is_reported_distinctly(fake_st):
    with ui.api_errors("Loading"):
        raise DataIntegrityError("ARCHIVED", "TaskStatus", 3)
    message = fake_st.error.call_args[0][0]
    assert "does not recognise" in message
    assert "ARCHIVED" in message
    fake_st.stop.assert_not_called()


def test_api_errors_api_error_shows_message(fake_st):
    with ui.api_errors("Saving task"):
        raise ApiError("Validation failed", status_code=400)
    fake_st.error.assert_called_once_with("Saving task failed: Validation failed")
    fake_st.stop.assert_called_once()
    assert SESSION_KEY in fake_st.session_state


def test_api_errors_leaves_other_exceptions_alone(fake_st):
    with pytest.raises(KeyError):
        with ui.api_errors():
            raise KeyError("x")


def test_api_errors_can_report_without_stopping(fake_st):
    with ui.api_errors("Updating task status", stop=False):
        raise ApiError("Conflict", status_code=409)
    fake_st.error.assert_called_once_with("Updating task status failed: Conflict")
    fake_st.stop.assert_not_called()


def test_get_client_is_reused_for_the_same_session(fake_st):
    session = fake_st.session_state[SESSION_KEY]
    first = ui.get_client(session)
    assert ui.get_client(session) is first
    assert fake_st.session_state[ui.CLIENT_KEY] is first


def test_get_client_closes_previous_client_when_user_changes(fake_st):
    anonymous = ui.anonymous_client()
    anonymous._http = MagicMock()
    signed_in = ui.get_client(fake_st.session_state[SESSION_KEY])
    assert signed_in is not anonymous
    assert signed_in.session is fake_st.session_state[SESSION_KEY]
    anonymous._http.close.assert_called_once()
