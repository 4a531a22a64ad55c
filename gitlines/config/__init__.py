"""Configuration loading and validation."""

from gitlines.config.loader import load_config
from gitlines.config.schema import Config, GitConfig, LoggingConfig, OutputConfig

__all__ = [
    "Config",
    "GitConfig",
    "LoggingConfig",
    "OutputConfig",
    "load_config",
]
