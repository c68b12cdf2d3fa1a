"""
Shared building blocks of the settings package.

`SettingsSection` is the base of every group of settings (logging, codec):
it owns the QSettings handle and converts the loosely typed values an INI
file or the registry hands back.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, List

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

TRUE_STRINGS = ("true", "1", "yes", "on")


class ConfigVersion(Enum):
    """Layout version stamped into the store as ``app/version``."""
    V1_0 = "1.0"
    CURRENT = V1_0


class ConfigError(Exception):
    """The settings store could not be opened."""
    pass


@dataclass
class ValidationResult:
    """Problems found in the stored settings.

    Errors make the configuration unusable; warnings only point out
    choices that change how files are read or written.
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class SettingsSection:
    """One group of keys inside a QSettings store."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        value = self.settings.value(key, default)
        return default if value is None else str(value)

    def _get_bool(self, key: str, default: bool = False) -> bool:
        # INI files hand booleans back as strings
        value = self.settings.value(key, default)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in TRUE_STRINGS
        return bool(value)

    def _set(self, key: str, value: Any) -> None:
        self.settings.setValue(key, value)
        self.settings.sync()
