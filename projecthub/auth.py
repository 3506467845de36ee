import logging
from typing import Any, MutableMapping

from projecthub.api_client import ProjectHubClient
from projecthub.schemas import LoginRequest, SignupRequest
from projecthub.session import Session, clear_session, is_logged_in, set_session

logger = logging.getLogger(__name__)

__all__ = ["login", "register", "logout", "is_logged_in"]


def login(client: ProjectHubClient, username: str, password: str) -> Session:
    """Exchange credentials for a session.

    Raises pydantic.ValidationError for blank fields and ApiError (with the
    backend's message) for rejected credentials.
    """
    creds = LoginRequest(username=username, password=password)
    data = client.sign_in(creds.username, creds.password)
    session = Session.from_signin(data or {})
    logger.info("Signed in as %s", session.username)
    return session


def login_into(state: MutableMapping[str, Any], client: ProjectHubClient, username: str, password: str) -> Session:
    session = login(client, username, password)
    set_session(state, session)
    return session


def register(client: ProjectHubClient, request: SignupRequest) -> str:
    data = client.sign_up(request.to_payload())
    message = data.get("message") if isinstance(data, dict) else None
    logger.info("Registered user %s", request.username)
    return message or "Registration successful"


def logout(state: MutableMapping[str, Any]) -> None:
    clear_session(state)
