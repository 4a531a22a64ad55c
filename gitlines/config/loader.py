"""Configuration loading with layered merging.

Two optional layers are merged, later overriding earlier:

1. Global user config (~/.gitlines/config.json)
2. Repository local config (<repo>/.gitlines/config.json)

An explicit --config file replaces both layers. Nested objects merge key
by key; any other value in a later layer replaces the earlier one.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gitlines.config.schema import Config
from gitlines.core.constants import get_global_config_path, get_local_config_path
from gitlines.core.errors import ConfigError, LoadError

logger = logging.getLogger(__name__)


def read_json_object(path: Path) -> dict[str, Any]:
    """Read a JSON object from path. An empty or whitespace-only file is ``{}``.

    Raises:
        LoadError: Missing or unreadable file, invalid JSON, or a top-level
            value that is not an object.
    """
    try:
        # utf-8-sig: editors on Windows like to prepend a BOM
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise LoadError(f"File not found: {path}") from e
    except OSError as e:
        raise LoadError(f"Failed to read {path}: {e}") from e

    if not text.strip():
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise LoadError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def merge_layers(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Overlay layer onto base without modifying either."""
    merged = dict(base)
    for key, value in layer.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_layers(current, value)
        else:
            merged[key] = value
    return merged


def _load_layer(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        logger.debug("No config at %s", path)
        return None
    try:
        return read_json_object(path)
    except LoadError as e:
        raise ConfigError(e.message) from e


def load_config(path: Path | None = None, repo_path: Path | None = None) -> Config:
    """Load configuration, merging the global and repository layers.

    Args:
        path: Explicit config file path. If provided, skips layered loading.
        repo_path: Repository directory for the local layer. Defaults to Path.cwd().

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If any config file contains invalid JSON or the merged
            config fails validation.
    """
    if path is not None:
        return _load_from_path(path)

    merged: dict[str, Any] = {}
    loaded_from: list[Path] = []

    for layer in (get_global_config_path(), get_local_config_path(repo_path or Path.cwd())):
        data = _load_layer(layer)
        if data:
            merged = merge_layers(merged, data)
            loaded_from.append(layer)

    if not loaded_from:
        logger.debug("No config files found, using defaults")
        return Config()

    logger.debug("Config loaded from: %s", [str(p) for p in loaded_from])
    try:
        return Config.model_validate(merged)
    except ValidationError as e:
        sources = ", ".join(str(p) for p in loaded_from)
        raise ConfigError(f"Config validation failed (merged from {sources}): {e}") from e


def _load_from_path(path: Path) -> Config:
    try:
        data = read_json_object(path)
    except LoadError as e:
        raise ConfigError(e.message) from e

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e
