"""Explicit per-user session object and its Streamlit session-state slot.

The session is handed to ``ProjectHubClient`` directly; nothing in the package
looks a token up from ambient storage.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, MutableMapping, Optional, Tuple

SESSION_KEY = "projecthub_session"


@dataclass(frozen=True)
class Session:
    token: str
    username: str
    token_type: str = "Bearer"
    user_id: Optional[Any] = None
    email: Optional[str] = None
    roles: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_signin(cls, data: Mapping[str, Any]) -> "Session":
        """Build a session from the backend's sign-in response.

        Older backends name the token ``accessToken``; both are accepted.
        """
        token = data.get("token") or data.get("accessToken")
        if not token:
            raise ValueError("Sign-in response did not contain a token")
        return cls(
            token=str(token),
            username=str(data.get("username") or ""),
            token_type=str(data.get("type") or data.get("tokenType") or "Bearer"),
            user_id=data.get("id"),
            email=data.get("email"),
            roles=tuple(str(r) for r in (data.get("roles") or [])),
        )

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.token}"

    @property
    def role_labels(self) -> Tuple[str, ...]:
        return tuple(r[5:] if r.startswith("ROLE_") else r for r in self.roles)


def get_session(state: Mapping[str, Any]) -> Optional[Session]:
    session = state.get(SESSION_KEY)
    return session if isinstance(session, Session) else None


def set_session(state: MutableMapping[str, Any], session: Session) -> None:
    state[SESSION_KEY] = session


def clear_session(state: MutableMapping[str, Any]) -> None:
    state.pop(SESSION_KEY, None)


def is_logged_in(state: Mapping[str, Any]) -> bool:
    return get_session(state) is not None
