"""Core constants and paths for gapply.

Single source of truth for global paths and diff sentinels.
"""

import os
from pathlib import Path

GAPPLY_DIR_NAME = ".gapply"
GAPPLY_HOME_ENV = "GAPPLY_HOME"

# Path used by diffs for the missing side of a created or deleted file
DEV_NULL = "/dev/null"

# Permission bits can only be applied where the OS has them
SUPPORTS_PERMISSIONS: bool = os.name == "posix"


def get_gapply_dir() -> Path:
    """Get the global config directory (~/.gapply, or $GAPPLY_HOME)."""
    override = os.environ.get(GAPPLY_HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / GAPPLY_DIR_NAME


def get_default_config_path() -> Path:
    """Get default config file path."""
    return get_gapply_dir() / "config.json"
