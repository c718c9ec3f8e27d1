"""Pydantic models for gapply configuration validation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ApplyConfig(BaseModel):
    """Settings for how patches are applied.

    Example in config.json:
        "apply": {
            "root": "~/src/project",
            "set_permissions": false
        }
    """

    model_config = ConfigDict(extra="forbid")

    root: str | None = None
    """Directory that patch paths are relative to (default: current directory)."""

    set_permissions: bool = True
    """Apply file modes from 'new mode' / 'index' lines on POSIX systems."""


class LoggingConfig(BaseModel):
    """Settings for diagnostic logging."""

    model_config = ConfigDict(extra="forbid")

    level: LogLevel = "WARNING"
    """Minimum level written to stderr."""

    file: str | None = None
    """Optional log file (rotated at 5MB)."""

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    apply: ApplyConfig = ApplyConfig()
    logging: LoggingConfig = LoggingConfig()
