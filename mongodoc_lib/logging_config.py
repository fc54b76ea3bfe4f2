from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from mongodoc_lib.config.config import SettingsError, load_settings

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s]: %(message)s'


def _level_from_settings(config_path: Optional[Path]) -> int:
    try:
        name = load_settings(config_path).log_level
    except SettingsError as e:
        logging.getLogger(__name__).warning("Ignoring settings for log level: %s", e)
        return logging.WARNING
    level = logging.getLevelName(name.upper())
    # getLevelName maps unknown names to the string "Level <name>"
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(config_path: Optional[Path] = None) -> logging.Logger:
    """Set up root logging for an application embedding mongodoc.

    The level comes from `log_level` in the settings file; a missing,
    invalid or unknown level means WARNING. Existing root handlers are
    replaced. The library itself never calls this.
    """
    level = _level_from_settings(config_path)

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    logger = logging.getLogger(__name__)
    logger.info("Log level set to: %s", logging.getLevelName(level))
    return logger
