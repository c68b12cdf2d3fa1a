"""
Core settings management for ogmo_schema.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from PySide6.QtCore import QSettings

from ..codec.api import CodecOptions
from .codec import CodecSettings
from .logging import LoggingSettings
from .migration import SettingsMigrator
from .types import ConfigError, ConfigVersion, ValidationResult
from .validation import SettingsValidator

logger = logging.getLogger(__name__)


class AppSettings:
    """
    Configuration management using QSettings.

    Values are stored under a profile group in the platform's native
    store, or in an INI file when ``settings_file`` is given.
    """

    def __init__(
        self,
        profile: str = "default",
        settings_file: Optional[Union[str, Path]] = None,
    ):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: Optional INI file to use instead of the native store

        Raises:
            ConfigError: If the settings store cannot be opened
        """
        if settings_file is not None:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings("ogmo_schema", "ogmo_schema")
        if self.settings.status() != QSettings.Status.NoError:
            raise ConfigError(f"Cannot open settings store: {self.settings.fileName()}")
        self.profile = profile

        # ogmo_schema/<profile>/...
        self.settings.beginGroup(profile)

        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._logging = LoggingSettings(self.settings)
        self._codec = CodecSettings(self.settings)

        self._migrator.ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    @property
    def codec(self) -> CodecSettings:
        """Access codec settings subsystem."""
        return self._codec

    @property
    def version(self) -> str:
        """Get configuration version."""
        value = self.settings.value("app/version", ConfigVersion.CURRENT.value)
        return str(value) if value is not None else ConfigVersion.CURRENT.value

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        return self._logging.log_file_path

    @log_file_path.setter
    def log_file_path(self, value: str) -> None:
        self._logging.log_file_path = value

    # === CODEC SETTINGS (DELEGATED) ===

    @property
    def preserve_unknown_fields(self) -> bool:
        return self._codec.preserve_unknown_fields

    @preserve_unknown_fields.setter
    def preserve_unknown_fields(self, value: bool) -> None:
        self._codec.preserve_unknown_fields = value

    @property
    def indent(self) -> bool:
        return self._codec.indent

    @indent.setter
    def indent(self, value: bool) -> None:
        self._codec.indent = value

    def codec_options(self) -> CodecOptions:
        """Build `CodecOptions` from the stored codec settings."""
        return self._codec.options()

    # === VALIDATION AND STORAGE ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    def get_settings_file_path(self) -> str:
        """Get path to the settings file."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force write settings to storage."""
        self.settings.sync()
