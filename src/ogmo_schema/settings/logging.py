"""
Where ogmo_schema writes its log output.

Console output goes to stderr at a configurable level. File output is a
rotating CSV log, off unless enabled.
"""

import logging

from .types import SettingsSection

logger = logging.getLogger(__name__)

# Relative paths are resolved against the working directory
LOG_FILE_PATH = "logs/ogmo_schema.csv"

VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(SettingsSection):
    """Console and file logging switches stored under ``logging/``."""

    # === CONSOLE ===

    @property
    def console_logging(self) -> bool:
        return self._get_bool("logging/console_enabled", True)

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._set("logging/console_enabled", value)

    @property
    def console_log_level(self) -> str:
        """Level name for console output, WARNING unless changed."""
        return self._get_str("logging/console_level", "WARNING")

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        level = value.upper()
        if level not in VALID_LEVELS:
            logger.warning(
                f"Ignoring unknown console log level '{value}', staying at {self.console_log_level}"
            )
            return
        self._set("logging/console_level", level)

    @property
    def console_use_colors(self) -> bool:
        return self._get_bool("logging/console_use_colors", True)

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._set("logging/console_use_colors", value)

    # === FILE ===

    @property
    def file_logging(self) -> bool:
        return self._get_bool("logging/file_enabled", False)

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._set("logging/file_enabled", value)

    @property
    def log_file_path(self) -> str:
        """CSV log file, `LOG_FILE_PATH` by default."""
        return self._get_str("logging/file_path", LOG_FILE_PATH)

    @log_file_path.setter
    def log_file_path(self, value: str) -> None:
        self._set("logging/file_path", str(value))
