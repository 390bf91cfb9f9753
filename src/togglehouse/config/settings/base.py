"""Config settings – Settings base class and ServerSettings."""
from __future__ import annotations

import dataclasses
import logging

from togglehouse.config.validation import InvalidSettingValueError

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class ServerSettings(Settings):
    """Runtime configuration of the toggle server.

    Every field maps to a ``TOGGLEHOUSE_<FIELD>`` environment variable, e.g.
    ``TOGGLEHOUSE_DATABASE_URL=postgresql+asyncpg://...``.
    """

    _prefix: dataclasses.ClassVar[str] = "TOGGLEHOUSE"

    database_url: str = "sqlite+aiosqlite:///./togglehouse.db"
    database_echo: bool = False
    create_schema: bool = True
    log_level: str = "INFO"
    log_json: bool = True
    host: str = "127.0.0.1"
    port: int = 4242

    def _validate(self) -> None:
        if not self.database_url:
            raise InvalidSettingValueError("database_url", self.database_url, "must not be empty")
        if not 0 < self.port < 65536:
            raise InvalidSettingValueError("port", self.port, "must be between 1 and 65535")
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise InvalidSettingValueError(
                "log_level", self.log_level, f"must be one of {', '.join(_LOG_LEVELS)}"
            )

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


__all__ = ["ServerSettings", "Settings"]
