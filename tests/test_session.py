import pytest

from projecthub.session import SESSION_KEY, Session, clear_session, get_session, is_logged_in, set_session


def test_from_signin_accepts_access_token_alias():
    session = Session.from_signin({"accessToken": "abc", "tokenType": "Bearer", "username": "bob"})
    assert session.token == "abc"
    assert session.username == "bob"
    assert session.authorization_header == "Bearer abc"


def test_from_signin_without_token_raises():
    with pytest.raises(ValueError):
        Session.from_signin({"username": "bob"})


def test_role_labels_strip_prefix():
    session = Session(token="t", username="u", roles=("ROLE_ADMIN", "MANAGER"))
    assert session.role_labels == ("ADMIN", "MANAGER")


def test_state_helpers_round_trip():
    state = {}
    assert get_session(state) is None
    session = Session(token="t", username="u")
    set_session(state, session)
    assert get_session(state) is session
    assert is_logged_in(state)
    clear_session(state)
    assert not is_logged_in(state)


def test_foreign_object_in_slot_is_not_a_session():
    assert get_session({SESSION_KEY: {"token": "t"}}) is None


def test_session_is_immutable():
    session = Session(token="t", username="u")
    with pytest.raises(AttributeError):
        session.token = "other"
