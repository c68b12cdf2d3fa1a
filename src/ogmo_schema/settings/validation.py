"""
Settings validation for ogmo_schema.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List

from .logging import VALID_LEVELS
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        level = self.settings.console_log_level
        if level.upper() not in VALID_LEVELS:
            errors.append(f"Unknown console log level: {level}")

        if self.settings.file_logging:
            log_dir = Path(self.settings.log_file_path).resolve().parent
            if log_dir.exists() and not log_dir.is_dir():
                errors.append(f"Log directory is not a directory: {log_dir}")
            elif not log_dir.exists():
                warnings.append(f"Log directory will be created: {log_dir}")

        if not self.settings.preserve_unknown_fields:
            warnings.append("Unknown fields will be dropped when files are decoded")

        if errors:
            logger.warning(f"Configuration has {len(errors)} error(s)")
        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
