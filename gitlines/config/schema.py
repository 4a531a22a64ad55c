"""Pydantic models for git-lines configuration validation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class GitConfig(BaseModel):
    """How the git executable is invoked."""

    model_config = ConfigDict(extra="forbid")

    executable: str = "git"
    """git binary name or absolute path."""

    timeout: float | None = Field(default=None, gt=0)
    """Seconds to wait for each git command. None = wait indefinitely."""

    @field_validator("executable")
    @classmethod
    def _executable_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("executable cannot be empty")
        return v


class OutputConfig(BaseModel):
    """Console output settings."""

    model_config = ConfigDict(extra="forbid")

    color: bool = True
    """Colorize diff output (additions green, deletions red)."""

    quiet: bool = False
    """Suppress the 'Staged:' summary after staging."""


class LoggingConfig(BaseModel):
    """Diagnostic logging settings."""

    model_config = ConfigDict(extra="forbid")

    level: LogLevel = "WARNING"
    """Level for the gitlines logger. -v on the command line forces DEBUG."""

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class Config(BaseModel):
    """Root configuration model.

    Example config.json:
        {
            "git": {"executable": "/usr/bin/git", "timeout": 30},
            "output": {"color": false},
            "logging": {"level": "INFO"}
        }
    """

    model_config = ConfigDict(extra="forbid")

    git: GitConfig = GitConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()
