"""Runtime configuration sourced from the environment and the command line."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

ENV_PREFIX = "DEVTOOLS_MCP_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(ENV_PREFIX + key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{key} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{ENV_PREFIX}{key} must not be negative, got {raw!r}")
    return value


def _env_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(ENV_PREFIX + key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}") from exc


@dataclass
class ServerSettings:
    host: str = "127.0.0.1"
    port: int = 8000
    sse_path: str = "/sse"
    message_path: str = "/messages"
    # Seconds without traffic before a session is closed; 0 disables expiry.
    session_idle_timeout: float = 1800.0
    ping_interval: int = 15
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerSettings":
        env = os.environ if environ is None else environ
        defaults = cls()
        log_level = env.get(ENV_PREFIX + "LOG_LEVEL", "").strip().upper() or defaults.log_level
        if log_level not in LOG_LEVELS:
            raise ValueError(f"{ENV_PREFIX}LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return cls(
            host=env.get(ENV_PREFIX + "HOST", "").strip() or defaults.host,
            port=_env_int(env, "PORT", defaults.port),
            session_idle_timeout=_env_float(
                env, "SESSION_IDLE_TIMEOUT", defaults.session_idle_timeout
            ),
            ping_interval=_env_int(env, "PING_INTERVAL", defaults.ping_interval),
            log_level=log_level,
        )


__all__ = ["ENV_PREFIX", "LOG_LEVELS", "ServerSettings"]
