"""
Tests for the configuration management module.
"""

import pytest
from pathlib import Path

import yaml
from pydantic import ValidationError

from empty_groups.config import (
    ConfigManager, AppConfig, DirectoryConfig, SheetConfig, NotificationConfig,
    StateConfig, OutputConfig, LoggingConfig
)


class TestDirectoryConfig:
    """Tests for DirectoryConfig model."""

    def test_directory_config_defaults(self):
        """Test DirectoryConfig with default values."""
        config = DirectoryConfig()

        assert config.customer_id == "my_customer"
        assert config.page_size == 200

    def test_directory_config_page_size_bounds(self):
        """Test that page size is limited to 1..200."""
        with pytest.raises(ValidationError):
            DirectoryConfig(page_size=0)

        with pytest.raises(ValidationError):
            DirectoryConfig(page_size=201)

    def test_directory_config_blank_customer(self):
        """Test DirectoryConfig with a blank customer ID."""
        with pytest.raises(ValidationError, match="Customer ID cannot be empty"):
            DirectoryConfig(customer_id="   ")


class TestSheetConfig:
    """Tests for SheetConfig model."""

    def test_sheet_config_defaults(self):
        config = SheetConfig()

        assert config.spreadsheet_id is None
        assert config.sheet_name == "Empty Groups"

    def test_sheet_config_empty_name(self):
        with pytest.raises(ValidationError, match="Sheet name cannot be empty"):
            SheetConfig(sheet_name="")


class TestNotificationConfig:
    """Tests for NotificationConfig model."""

    def test_notification_config_defaults(self):
        """Test the fixed subject and body template."""
        config = NotificationConfig()

        assert config.subject == "Empty Google Workspace Groups Report"
        assert config.body_template == "Found {count} empty groups in the primary domain: {domain}."

    def test_notification_config_invalid_recipient(self):
        with pytest.raises(ValidationError, match="Invalid recipient address"):
            NotificationConfig(recipient="not-an-address")

    def test_notification_config_template_missing_placeholder(self):
        """Test that the body template must contain both placeholders."""
        with pytest.raises(ValidationError, match="missing placeholders: \\{domain\\}"):
            NotificationConfig(body_template="Found {count} empty groups.")


class TestOutputConfig:
    """Tests for OutputConfig model."""

    def test_output_config_defaults(self):
        config = OutputConfig()

        assert config.formats == ["csv"]
        assert config.directory == "./reports"
        assert config.timestamp_format == "%Y%m%d_%H%M%S"

    def test_output_config_invalid_format(self):
        with pytest.raises(ValidationError, match="Unsupported formats"):
            OutputConfig(formats=["csv", "invalid"])

    def test_output_config_empty_directory(self):
        with pytest.raises(ValidationError, match="Directory cannot be empty"):
            OutputConfig(directory="")


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_logging_config_defaults(self):
        config = LoggingConfig()

        assert config.level == "INFO"
        assert "%(asctime)s" in config.format
        assert config.file == "empty_groups.log"

    def test_logging_config_case_insensitive_level(self):
        config = LoggingConfig(level="debug")
        assert config.level == "DEBUG"

    def test_logging_config_invalid_level(self):
        with pytest.raises(ValidationError, match="Invalid log level"):
            LoggingConfig(level="INVALID")


class TestAppConfig:
    """Tests for AppConfig model."""

    def test_app_config_defaults(self):
        config = AppConfig()

        assert config.timezone == "UTC"
        assert isinstance(config.directory, DirectoryConfig)
        assert isinstance(config.sheet, SheetConfig)
        assert isinstance(config.notification, NotificationConfig)
        assert isinstance(config.state, StateConfig)
        assert isinstance(config.output, OutputConfig)
        assert isinstance(config.logging, LoggingConfig)

    def test_app_config_timezone(self):
        config = AppConfig(timezone="Europe/Paris")
        assert config.tzinfo.key == "Europe/Paris"

    def test_app_config_invalid_timezone(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            AppConfig(timezone="Mars/Olympus_Mons")

    def test_app_config_nested_config(self):
        config_data = {
            "directory": {"customer_id": "C01abc", "page_size": 50},
            "sheet": {"spreadsheet_id": "sheet-123"},
            "logging": {"level": "DEBUG"}
        }

        config = AppConfig(**config_data)

        assert config.directory.customer_id == "C01abc"
        assert config.directory.page_size == 50
        assert config.sheet.spreadsheet_id == "sheet-123"
        assert config.logging.level == "DEBUG"


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_config_manager_default_path(self):
        manager = ConfigManager()
        assert "config.yaml" in str(manager.config_path)

    def test_config_manager_custom_path(self):
        custom_path = "/custom/path/config.yaml"
        manager = ConfigManager(custom_path)
        assert str(manager.config_path) == custom_path

    def test_load_config_missing_file(self, tmp_path):
        manager = ConfigManager(tmp_path / "missing.yaml")

        with pytest.raises(FileNotFoundError):
            manager.load_config()

    def test_load_config_valid(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.safe_dump({
            "timezone": "America/New_York",
            "sheet": {"spreadsheet_id": "abc"},
            "notification": {"recipient": "it@example.org"},
        }))

        config = ConfigManager(config_file).load_config()

        assert config.timezone == "America/New_York"
        assert config.sheet.spreadsheet_id == "abc"
        assert config.notification.recipient == "it@example.org"

    def test_load_config_empty_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        config = ConfigManager(config_file).load_config()
        assert config.directory.page_size == 200

    def test_load_config_invalid_values(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.safe_dump({"directory": {"page_size": 500}}))

        with pytest.raises(ValueError, match="Error loading configuration"):
            ConfigManager(config_file).load_config()

    def test_create_default_config_round_trip(self, tmp_path):
        """Test that the generated default config loads back."""
        output = tmp_path / "nested" / "config.yaml"
        created = ConfigManager().create_default_config(output)

        assert created == output
        assert output.exists()

        config = ConfigManager(output).load_config()
        assert config.sheet.spreadsheet_id == "your-spreadsheet-id"
        assert config.notification.subject == "Empty Google Workspace Groups Report"

    def test_validate_config_requires_spreadsheet(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.safe_dump({"state": {"path": str(tmp_path / "state.json")}}))

        assert ConfigManager(config_file).validate_config() is False

    def test_validate_config_success(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.safe_dump({
            "sheet": {"spreadsheet_id": "abc"},
            "state": {"path": str(tmp_path / "state" / "properties.json")},
        }))

        assert ConfigManager(config_file).validate_config() is True
        assert (tmp_path / "state").is_dir()
