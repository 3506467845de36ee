"""Runtime configuration for the ProjectHub client.

Env-first with local-dev defaults. This is UI/runtime configuration, not
Streamlit's config.toml.

Env vars:
- PROJECTHUB_API_URL (default http://localhost:8080)
- PROJECTHUB_VERIFY_SSL (default true)
- PROJECTHUB_TIMEOUT_SECONDS (default 30)
- PROJECTHUB_LOG_LEVEL (default INFO)
- PROJECTHUB_RECENT_LIMIT / PROJECTHUB_UPCOMING_LIMIT (default 5)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


def env_str(name: str, default: str, *, strip: bool = True) -> str:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip() if strip else value


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


def env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


@dataclass(frozen=True)
class ClientConfig:
    api_url: str
    verify_ssl: bool
    timeout_seconds: int
    log_level: str
    recent_limit: int
    upcoming_limit: int

    DEFAULT_API_URL: str = "http://localhost:8080"
    DEFAULT_TIMEOUT_SECONDS: int = 30
    DEFAULT_LOG_LEVEL: str = "INFO"
    DEFAULT_LIST_LIMIT: int = 5

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            api_url=env_str("PROJECTHUB_API_URL", cls.DEFAULT_API_URL).rstrip("/"),
            verify_ssl=env_bool("PROJECTHUB_VERIFY_SSL", True),
            timeout_seconds=env_int("PROJECTHUB_TIMEOUT_SECONDS", cls.DEFAULT_TIMEOUT_SECONDS, minimum=1),
            log_level=env_str("PROJECTHUB_LOG_LEVEL", cls.DEFAULT_LOG_LEVEL).upper(),
            recent_limit=env_int("PROJECTHUB_RECENT_LIMIT", cls.DEFAULT_LIST_LIMIT, minimum=0),
            upcoming_limit=env_int("PROJECTHUB_UPCOMING_LIMIT", cls.DEFAULT_LIST_LIMIT, minimum=0),
        )

    def to_dict(self) -> dict:
        return {
            "api_url": self.api_url,
            "verify_ssl": self.verify_ssl,
            "timeout_seconds": self.timeout_seconds,
            "log_level": self.log_level,
            "recent_limit": self.recent_limit,
            "upcoming_limit": self.upcoming_limit,
        }


_config: Optional[ClientConfig] = None


def get_config() -> ClientConfig:
    """Return the process-wide config (read from the environment once)."""
    global _config
    if _config is None:
        _config = ClientConfig.from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=numeric,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    root.setLevel(numeric)
