# src/wksprofile/config.py: Pydantic models for configuration.
# This module defines the schema of the optional 'config.yaml' file using
# Pydantic models. It is responsible for loading, validating, and providing
# access to the configuration. When no file exists at the default location the
# built-in defaults are used unchanged.

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .util.errors import ConfigError
from .util.paths import expand_path, get_default_config_path

APP_DEV_ALIAS = "app-dev"
APP_DEV_REPO_URL = "git@github.com:weaveworks/eks-quickstart-app-dev"

# --- Pydantic Models for Configuration Schema ---

class ProfileSettings(BaseModel):
    """Where profiles live and which repository addresses are accepted."""
    store_prefix: str = "profiles"
    aliases: Dict[str, str] = Field(default_factory=lambda: {APP_DEV_ALIAS: APP_DEV_REPO_URL})
    require_ssh: bool = False
    default_revision: str = "master"


class GitSettings(BaseModel):
    private_ssh_key_path: Optional[str] = None
    user: str = ""
    email: str = ""
    timeout_sec: Optional[int] = Field(default=None, gt=0)

    def resolved_key_path(self) -> Optional[str]:
        if not self.private_ssh_key_path:
            return None
        return str(expand_path(self.private_ssh_key_path))


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_format: bool = Field(False, alias="json")

    model_config = {"populate_by_name": True}


class Config(BaseModel):
    """Root configuration model."""
    version: int = 1
    profiles: ProfileSettings = Field(default_factory=ProfileSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# --- Configuration Loading ---

def load_config(path: Optional[Path] = None) -> Config:
    """
    Load, parse, and validate the configuration file.

    Args:
        path: Explicit configuration file. If None, the per-user default is
            used, and a missing default file yields the built-in defaults.

    Raises:
        ConfigError: If an explicit file is missing, or any file cannot be
            read, parsed or validated.
    """
    config_path = Path(path) if path else get_default_config_path()
    if not config_path.is_file():
        if path:
            raise ConfigError(f"Configuration file not found at '{config_path}'.")
        return Config()

    try:
        with open(config_path, "r") as f:
            raw_config = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML configuration '{config_path}': {e}") from e

    try:
        return Config.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed:\n{e}") from e
