"""
Settings package for ogmo_schema.

Configuration is persisted through Qt's QSettings for cross-platform
storage.

Usage:
    from ogmo_schema.settings import AppSettings

    settings = AppSettings()
    options = settings.codec_options()
"""

from .codec import CodecSettings
from .core import AppSettings
from .logging import LoggingSettings
from .types import ConfigError, ConfigVersion, SettingsSection, ValidationResult

__all__ = [
    "AppSettings",
    "CodecSettings",
    "ConfigError",
    "ConfigVersion",
    "LoggingSettings",
    "SettingsSection",
    "ValidationResult",
]
