"""Configuration loading with layered merging.

Config is merged from two layers, later layers overriding earlier ones:
1. Global user config (~/.gapply/config.json, or $GAPPLY_HOME/config.json)
2. Project local config (<cwd>/.gapply/config.json)

Missing layers are skipped; with no files at all the Pydantic defaults apply.
Every config section is a flat object, so layers merge key by key within
each section.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gapply.config.schema import Config
from gapply.core.constants import GAPPLY_DIR_NAME, get_default_config_path
from gapply.core.encoding import ENCODING
from gapply.core.errors import ConfigError

logger = logging.getLogger(__name__)


def load_config(path: Path | None = None, cwd: Path | None = None) -> Config:
    """Load configuration from file with layered merging.

    Args:
        path: Explicit config file path. If provided, skips layered loading.
        cwd: Working directory for the local layer. Defaults to Path.cwd().

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If any config file is unreadable, contains invalid JSON,
            or the merged config fails validation.
    """
    if path is not None:
        data = _read_layer(path, required=True) or {}
        return _validate(data, str(path))

    effective_cwd = cwd or Path.cwd()
    layers = [
        get_default_config_path(),
        effective_cwd / GAPPLY_DIR_NAME / "config.json",
    ]

    merged: dict[str, Any] = {}
    loaded_from: list[str] = []
    seen: set[Path] = set()
    for layer in layers:
        resolved = layer.resolve()
        # The local layer is the global one when running from the home directory
        if resolved in seen:
            continue
        seen.add(resolved)

        data = _read_layer(layer, required=False)
        if data:
            merged = _merge_layers(merged, data)
            loaded_from.append(str(layer))

    if not loaded_from:
        logger.debug("No config files found, using Pydantic defaults")
        return Config()

    logger.info("Config loaded from: %s", loaded_from)
    return _validate(merged, ", ".join(loaded_from))


def _read_layer(path: Path, *, required: bool) -> dict[str, Any] | None:
    """Read one JSON config file.

    Returns:
        The parsed object ({} for an empty file), or None when an optional
        layer does not exist.

    Raises:
        ConfigError: If a required file is missing, or the file cannot be
            read or does not hold a JSON object.
    """
    try:
        # utf-8-sig: editors on Windows like to prepend a BOM
        text = path.read_text(encoding=f"{ENCODING}-sig")
    except FileNotFoundError:
        if required:
            raise ConfigError(f"Config file not found: {path}") from None
        logger.debug("Config file not found: %s", path)
        return None
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    if not text.strip():
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must hold a JSON object, got {type(data).__name__}"
        )
    return data


def _merge_layers(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay one layer on another, section by section."""
    merged = dict(base)
    for section, values in override.items():
        current = merged.get(section)
        if isinstance(current, dict) and isinstance(values, dict):
            merged[section] = {**current, **values}
        else:
            merged[section] = values
    return merged


def _validate(data: dict[str, Any], source: str) -> Config:
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed ({source}): {e}") from e
