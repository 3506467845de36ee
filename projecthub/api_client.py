from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from projecthub.config import ClientConfig
from projecthub.errors import ApiError, UnauthorizedError
from projecthub.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    ok: bool
    status_code: int
    url: str
    method: str
    data: Any = None
    text: Optional[str] = None
    error: Optional[str] = None


def _error_message(parsed: Any, text: Optional[str], status_code: int) -> str:
    # Spring error bodies carry "message"; validation errors sometimes "error".
    if isinstance(parsed, dict):
        for key in ("message", "error", "detail"):
            if parsed.get(key):
                return str(parsed[key])
    if text:
        return text[:500]
    return f"HTTP {status_code}"


class ProjectHubClient:
    """HTTP collaborator for the project-management backend.

    One instance per user session. ``session`` supplies the bearer token; pass
    ``None`` for the unauthenticated sign-in/sign-up calls.
    """

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[Session] = None,
        verify_ssl: bool = True,
        timeout_seconds: int = 30,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.session = session
        self.verify_ssl = bool(verify_ssl)
        self.timeout_seconds = int(timeout_seconds)

        self._http = requests.Session()

    def close(self) -> None:
        self._http.close()

    @classmethod
    def from_config(cls, config: ClientConfig, session: Optional[Session] = None) -> "ProjectHubClient":
        return cls(
            base_url=config.api_url,
            session=session,
            verify_ssl=config.verify_ssl,
            timeout_seconds=config.timeout_seconds,
        )

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.session is not None and self.session.token:
            headers["Authorization"] = self.session.authorization_header
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
    ) -> ApiResponse:
        method_u = (method or "GET").upper().strip()
        if not path.startswith("/"):
            path = "/" + path
        url = f"{self.base_url}{path}"

        logger.debug("%s %s params=%s", method_u, url, params)
        try:
            resp = self._http.request(
                method_u,
                url,
                params=params,
                json=json_body,
                headers=self._build_headers(),
                verify=self.verify_ssl,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method_u, url, exc)
            return ApiResponse(ok=False, status_code=0, url=url, method=method_u, error=str(exc))

        text = resp.text or None
        parsed: Any = None
        if text:
            try:
                parsed = json.loads(text)
            except ValueError:
                parsed = None

        status = int(resp.status_code)
        if 200 <= status < 300:
            return ApiResponse(
                ok=True,
                status_code=status,
                url=url,
                method=method_u,
                data=parsed if parsed is not None else text,
            )

        logger.warning("%s %s -> HTTP %s", method_u, url, status)
        return ApiResponse(
            ok=False,
            status_code=status,
            url=url,
            method=method_u,
            data=parsed,
            text=text[:2000] if text else None,
            error=_error_message(parsed, text, status),
        )

    def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        """Run a request and return its payload, raising on any failure."""
        resp = self.request(method, path, **kwargs)
        if resp.ok:
            return resp.data
        error_cls = UnauthorizedError if resp.status_code == 401 else ApiError
        raise error_cls(
            resp.error or f"HTTP {resp.status_code}",
            status_code=resp.status_code,
            url=resp.url,
            method=resp.method,
            payload=resp.data,
        )

    def _list(self, path: str) -> List[Dict[str, Any]]:
        data = self._call("GET", path)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError(f"Expected a JSON list from {path}", url=f"{self.base_url}{path}", method="GET", payload=data)
        return data

    # ---------------- Auth ----------------

    def sign_in(self, username: str, password: str) -> Dict[str, Any]:
        return self._call("POST", "/api/auth/signin", json_body={"username": username, "password": password})

    def sign_up(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("POST", "/api/auth/signup", json_body=payload)

    # ---------------- Projects ----------------

    def get_all_projects(self) -> List[Dict[str, Any]]:
        return self._list("/api/projects")

    def get_user_projects(self) -> List[Dict[str, Any]]:
        """Projects the signed-in user owns or is a member of."""
        return self._list("/api/projects/user")

    def get_project(self, project_id: Any) -> Dict[str, Any]:
        return self._call("GET", f"/api/projects/{project_id}")

    def create_project(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("POST", "/api/projects", json_body=payload)

    def update_project(self, project_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("PUT", f"/api/projects/{project_id}", json_body=payload)

    def delete_project(self, project_id: Any) -> Any:
        return self._call("DELETE", f"/api/projects/{project_id}")

    def add_project_member(self, project_id: Any, user_id: Any) -> Dict[str, Any]:
        return self._call("POST", f"/api/projects/{project_id}/members/{user_id}")

    def remove_project_member(self, project_id: Any, user_id: Any) -> Dict[str, Any]:
        return self._call("DELETE", f"/api/projects/{project_id}/members/{user_id}")

    # ---------------- Tasks ----------------

    def get_all_tasks(self) -> List[Dict[str, Any]]:
        return self._list("/api/tasks")

    def get_project_tasks(self, project_id: Any) -> List[Dict[str, Any]]:
        return self._list(f"/api/tasks/project/{project_id}")

    def get_assigned_tasks(self) -> List[Dict[str, Any]]:
        return self._list("/api/tasks/assigned")

    def get_task(self, task_id: Any) -> Dict[str, Any]:
        return self._call("GET", f"/api/tasks/{task_id}")

    def create_task(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("POST", "/api/tasks", json_body=payload)

    def update_task(self, task_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("PUT", f"/api/tasks/{task_id}", json_body=payload)

    def delete_task(self, task_id: Any) -> Any:
        return self._call("DELETE", f"/api/tasks/{task_id}")

    def update_task_status(self, task_id: Any, status: str) -> Dict[str, Any]:
        token = status.value if isinstance(status, Enum) else str(status)
        return self._call("PATCH", f"/api/tasks/{task_id}/status", params={"status": token})

    def update_task_progress(self, task_id: Any, progress: int) -> Dict[str, Any]:
        return self._call("PATCH", f"/api/tasks/{task_id}/progress", params={"progress": int(progress)})

    def assign_task(self, task_id: Any, user_id: Any) -> Dict[str, Any]:
        return self._call("PATCH", f"/api/tasks/{task_id}/assign/{user_id}")

    # ---------------- Users ----------------

    def get_all_users(self) -> List[Dict[str, Any]]:
        return self._list("/api/users")

    def get_user(self, user_id: Any) -> Dict[str, Any]:
        return self._call("GET", f"/api/users/{user_id}")

    def get_current_user(self) -> Dict[str, Any]:
        return self._call("GET", "/api/users/me")
