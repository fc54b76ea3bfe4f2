"""Settings loading for mongodoc."""

from .config import Settings, SettingsError, load_settings, load_yaml_file

__all__ = ["Settings", "SettingsError", "load_settings", "load_yaml_file"]
