"""Error types raised by the ProjectHub client.

Transport problems and data-contract problems are kept apart so the UI can
react to each one differently: an expired session sends the user back to the
sign-in page, while an unknown status token is a client/server enum drift that
must never be mistaken for a network hiccup.
"""
from __future__ import annotations

from typing import Any, Optional


class ProjectHubError(Exception):
    """Base class for every error raised by the projecthub package."""


class ApiError(ProjectHubError):
    """A backend call failed (connection error or non-2xx response)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        url: str = "",
        method: str = "",
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.url = url
        self.method = method
        self.payload = payload

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "status_code": self.status_code,
            "url": self.url,
            "method": self.method,
        }


class UnauthorizedError(ApiError):
    """The backend rejected the bearer token (HTTP 401)."""


class DataIntegrityError(ProjectHubError):
    """A status token fell outside its declared enum."""

    def __init__(self, value: Any, enum_name: str, entity_id: Optional[Any] = None) -> None:
        where = f" on entity {entity_id!r}" if entity_id is not None else ""
        super().__init__(f"Unrecognised {enum_name} value {value!r}{where}")
        self.value = value
        self.enum_name = enum_name
        self.entity_id = entity_id
