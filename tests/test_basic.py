"""Basic unit tests for settings and logging configuration."""

import logging
from pathlib import Path
from typing import Iterator

import pytest

from ogmo_schema.settings import AppSettings, CodecSettings, LoggingSettings


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "settings.ini"


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSettingsInitialization:
    """Test settings initialization and basic operations."""

    def test_app_settings_init(self, settings_file: Path) -> None:
        """Test AppSettings can be initialized with defaults."""
        settings_obj = AppSettings(settings_file=settings_file)
        assert isinstance(settings_obj.logging, LoggingSettings)
        assert isinstance(settings_obj.codec, CodecSettings)
        assert settings_obj.version == "1.0"
        assert settings_obj.console_logging is True
        assert settings_obj.console_log_level == "WARNING"
        assert settings_obj.file_logging is False
        assert settings_obj.preserve_unknown_fields is True
        assert settings_obj.indent is False

    def test_app_settings_validation(self, settings_file: Path) -> None:
        """Test default settings validate cleanly."""
        validation = AppSettings(settings_file=settings_file).validate()
        assert validation.is_valid
        assert validation.errors == []

    def test_settings_file_path(self, settings_file: Path) -> None:
        settings_obj = AppSettings(settings_file=settings_file)
        assert Path(settings_obj.get_settings_file_path()) == settings_file


class TestSettingsPersistence:
    """Test values survive a new AppSettings instance."""

    def test_codec_settings_persist(self, settings_file: Path) -> None:
        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.indent = True
        settings_obj.preserve_unknown_fields = False

        reopened = AppSettings(settings_file=settings_file)
        options = reopened.codec_options()
        assert options.indent is True
        assert options.preserve_unknown_fields is False

    def test_profiles_are_isolated(self, settings_file: Path) -> None:
        """Test each profile keeps its own values."""
        AppSettings(profile="work", settings_file=settings_file).indent = True
        assert AppSettings(profile="home", settings_file=settings_file).indent is False
        assert AppSettings(profile="work", settings_file=settings_file).indent is True

    def test_log_level_normalized(self, settings_file: Path) -> None:
        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.console_log_level = "debug"
        assert settings_obj.console_log_level == "DEBUG"

    def test_invalid_log_level_ignored(self, settings_file: Path) -> None:
        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.console_log_level = "loud"
        assert settings_obj.console_log_level == "WARNING"


class TestSettingsValidation:
    """Test validation results."""

    def test_dropping_fields_warns(self, settings_file: Path) -> None:
        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.preserve_unknown_fields = False
        validation = settings_obj.validate()
        assert validation.is_valid
        assert any("dropped" in warning for warning in validation.warnings)

    def test_stored_invalid_level(self, settings_file: Path) -> None:
        """Test a hand-edited invalid level is reported as an error."""
        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.settings.setValue("logging/console_level", "LOUD")
        validation = settings_obj.validate()
        assert not validation.is_valid
        assert validation.errors == ["Unknown console log level: LOUD"]

    @pytest.mark.parametrize("stored, expected", [("yes", True), ("On", True), ("false", False), ("0", False)])
    def test_hand_edited_booleans(self, settings_file: Path, stored: str, expected: bool) -> None:
        """Test boolean keys written as text by hand are understood."""
        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.settings.setValue("codec/indent", stored)
        assert settings_obj.indent is expected
        assert settings_obj.codec_options().indent is expected


class TestUtilsLogging:
    """Test logging configuration."""

    @pytest.mark.usefixtures("restore_logging")
    def test_logging_setup_with_settings(self, settings_file: Path, tmp_path: Path) -> None:
        """Test logging setup writes CSV records to the configured file."""
        from ogmo_schema.utils.logging_config import setup_logging

        settings_obj = AppSettings(settings_file=settings_file)
        log_file = tmp_path / "logs" / "test.csv"
        settings_obj.file_logging = True
        settings_obj.log_file_path = str(log_file)

        setup_logging(settings=settings_obj)

        logger = logging.getLogger("ogmo_schema")
        assert logger.level == logging.DEBUG
        logger.info('Loaded "uno"')
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Logging initialized" in content
        assert '"Loaded ""uno"""' in content

    @pytest.mark.usefixtures("restore_logging")
    def test_console_only(self, settings_file: Path) -> None:
        from ogmo_schema.utils.logging_config import ColoredFormatter, setup_logging

        settings_obj = AppSettings(settings_file=settings_file)
        setup_logging(settings=settings_obj)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, ColoredFormatter)
        assert handlers[0].level == logging.WARNING

    def test_colored_formatter(self) -> None:
        """Test only the level name is colored."""
        from ogmo_schema.utils.logging_config import ColoredFormatter

        formatter = ColoredFormatter(fmt="%(levelname)s : %(message)s")
        record = logging.LogRecord("ogmo_schema", logging.WARNING, __file__, 1, "WARNING here", None, None)
        assert formatter.format(record) == "\033[33mWARNING\033[0m : WARNING here"
