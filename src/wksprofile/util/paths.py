# src/wksprofile/util/paths.py: Path resolution helpers.
# Resolves the per-user configuration location through platformdirs and
# expands user-supplied paths (environment variables and "~").

import os
from pathlib import Path

import platformdirs

APP_NAME = "wksprofile"


def get_config_home() -> Path:
    """Get the per-user configuration directory for the application."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_default_config_path() -> Path:
    """Get the default path of the YAML configuration file."""
    return get_config_home() / "config.yaml"


def expand_path(path: str | Path) -> Path:
    """Expand environment variables and user home directory in a path."""
    return Path(os.path.expandvars(os.path.expanduser(str(path))))
