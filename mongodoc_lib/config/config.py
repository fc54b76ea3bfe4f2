"""Settings for document indexing and modifier derivation.

Settings live in a small YAML file (``config/mongodoc.yml`` unless the
``MONGODOC_CONFIG`` environment variable points elsewhere)::

    log_level: DEBUG
    blackbox_keys:
      - profile.picture
    keep_arrays: false
    keep_empty_strings: false

A missing file gives the defaults.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("config/mongodoc.yml")
CONFIG_ENV_VAR = "MONGODOC_CONFIG"


class SettingsError(ValueError):
    """Raised when a settings file exists but does not hold valid settings."""


class Settings(BaseModel):
    log_level: str = "WARNING"
    blackbox_keys: List[str] = []
    keep_arrays: bool = False
    keep_empty_strings: bool = False

    def modifier_options(self) -> Dict[str, bool]:
        """Keyword arguments for `doc_to_modifier`."""
        return {"keep_arrays": self.keep_arrays, "keep_empty_strings": self.keep_empty_strings}


def load_yaml_file(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def settings_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return Path(path)
    env = os.environ.get(CONFIG_ENV_VAR)
    return Path(env) if env else CONFIG_PATH


def load_settings(path: Optional[Path] = None) -> Settings:
    cfg_path = settings_path(path)
    try:
        raw: Any = load_yaml_file(cfg_path)
    except yaml.YAMLError as e:
        raise SettingsError(f"Could not parse settings file {cfg_path}: {e}") from e
    if not isinstance(raw, dict):
        raise SettingsError(f"Settings file {cfg_path} must contain a mapping")
    try:
        settings = Settings(**raw)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {cfg_path}: {e}") from e
    logger.debug("Loaded settings from %s: %s", cfg_path, settings)
    return settings
