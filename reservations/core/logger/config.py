"""
Logger configuration, built in code or from env.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

_TRUTHY = ("1", "true", "yes")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class LoggerConfig:
    """
    Configuration for the project logger.

    Use LoggerConfig.from_env() for env-based config, or build explicitly.
    """

    # DEBUG, INFO, WARNING, ERROR, CRITICAL
    level: str = "INFO"
    # Rotating file is skipped when None
    log_dir: Optional[str] = None
    log_file_basename: str = "reservations"
    max_bytes: int = 5 * 1024 * 1024  # 5 MB
    backup_count: int = 5
    # Handlers attach here; module loggers under reservations.* inherit them
    root_name: str = "reservations"
    console: bool = True
    file_rotating: bool = True

    @classmethod
    def from_env(cls) -> "LoggerConfig":
        """
        Env:
            LOG_LEVEL, LOG_DIR, LOG_FILE_BASENAME, LOG_MAX_BYTES,
            LOG_BACKUP_COUNT, LOG_CONSOLE, LOG_FILE_ROTATING
        """
        return cls(
            level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_dir=os.environ.get("LOG_DIR") or None,
            log_file_basename=os.environ.get("LOG_FILE_BASENAME", "reservations"),
            max_bytes=int(os.environ.get("LOG_MAX_BYTES", "5242880")),
            backup_count=int(os.environ.get("LOG_BACKUP_COUNT", "5")),
            console=_env_flag("LOG_CONSOLE", True),
            file_rotating=_env_flag("LOG_FILE_ROTATING", True),
        )

    def with_overrides(self, **changes: object) -> "LoggerConfig":
        """Return a new config with the given fields replaced (None values are ignored)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
