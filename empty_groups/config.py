"""
Configuration Management Module

Handles loading and validation of YAML configuration files for the
Google Workspace empty group cleanup tool.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Any, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Empty Google Workspace Groups Report"
DEFAULT_BODY_TEMPLATE = "Found {count} empty groups in the primary domain: {domain}."


class DirectoryConfig(BaseModel):
    """Admin SDK Directory API settings."""
    customer_id: str = "my_customer"
    page_size: int = Field(default=200, ge=1, le=200)

    @field_validator('customer_id')
    @classmethod
    def validate_customer_id(cls, v):
        """Customer identifier must not be blank."""
        if not v or not v.strip():
            raise ValueError("Customer ID cannot be empty")
        return v.strip()


class SheetConfig(BaseModel):
    """Google Sheets report settings."""
    spreadsheet_id: Optional[str] = None
    sheet_name: str = "Empty Groups"

    @field_validator('sheet_name')
    @classmethod
    def validate_sheet_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Sheet name cannot be empty")
        return v


class NotificationConfig(BaseModel):
    """Email report settings."""
    recipient: str = "admin@example.com"
    subject: str = DEFAULT_SUBJECT
    body_template: str = DEFAULT_BODY_TEMPLATE

    @field_validator('recipient')
    @classmethod
    def validate_recipient(cls, v):
        """Validate that the recipient looks like an email address."""
        if '@' not in v:
            raise ValueError(f"Invalid recipient address: {v}")
        return v.strip()

    @field_validator('body_template')
    @classmethod
    def validate_body_template(cls, v):
        """The body must interpolate both the count and the domain."""
        missing = [name for name in ('{count}', '{domain}') if name not in v]
        if missing:
            raise ValueError(f"Body template is missing placeholders: {', '.join(missing)}")
        return v


class StateConfig(BaseModel):
    """Location of the persisted property store."""
    path: str = "./state/properties.json"

    @field_validator('path')
    @classmethod
    def validate_path(cls, v):
        if not v:
            raise ValueError("State path cannot be empty")
        return v


class OutputConfig(BaseModel):
    """Local export settings."""
    formats: List[str] = Field(default=["csv"])
    directory: str = "./reports"
    timestamp_format: str = "%Y%m%d_%H%M%S"

    @field_validator('formats')
    @classmethod
    def validate_formats(cls, v):
        """Validate supported output formats."""
        supported_formats = {"csv", "json", "excel"}
        invalid_formats = set(v) - supported_formats
        if invalid_formats:
            raise ValueError(f"Unsupported formats: {invalid_formats}. Supported: {supported_formats}")
        return v

    @field_validator('directory')
    @classmethod
    def validate_directory(cls, v):
        """Ensure directory path is valid."""
        if not v:
            raise ValueError("Directory cannot be empty")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration settings."""
    level: str = Field(default="INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = "empty_groups.log"

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {valid_levels}")
        return v.upper()


class AppConfig(BaseModel):
    """Main application configuration."""
    timezone: str = "UTC"
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig)
    sheet: SheetConfig = Field(default_factory=SheetConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)
    state: StateConfig = Field(default_factory=StateConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        """Timestamps in the sheet are rendered in this IANA timezone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class ConfigManager:
    """
    Configuration manager for loading and validating YAML configuration files.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses default location.
        """
        self.config_path = self._resolve_config_path(config_path)
        self._config: Optional[AppConfig] = None

    def _resolve_config_path(self, config_path: Optional[Union[str, Path]]) -> Path:
        """
        Resolve the configuration file path.

        Args:
            config_path: Optional path to config file

        Returns:
            Resolved Path object
        """
        if config_path is None:
            # Default to config/config.yaml relative to project root
            current_dir = Path(__file__).parent.parent
            config_path = current_dir / "config" / "config.yaml"

        return Path(config_path)

    def load_config(self) -> AppConfig:
        """
        Load and validate configuration from YAML file.

        Returns:
            Validated AppConfig object

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            ValueError: If configuration validation fails
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as file:
                config_data = yaml.safe_load(file)

            if config_data is None:
                config_data = {}

            self._config = AppConfig(**config_data)

            logger.info(f"Configuration loaded successfully from {self.config_path}")
            return self._config

        except yaml.YAMLError as e:
            error_msg = f"Error parsing YAML configuration: {e}"
            logger.error(error_msg)
            raise yaml.YAMLError(error_msg)

        except Exception as e:
            error_msg = f"Error loading configuration: {e}"
            logger.error(error_msg)
            raise ValueError(error_msg)

    def get_config(self) -> AppConfig:
        """
        Get the current configuration. Loads if not already loaded.

        Returns:
            AppConfig object
        """
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def create_default_config(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Create a default configuration file.

        Args:
            output_path: Path where to create the config file

        Returns:
            Path to created config file
        """
        if output_path is None:
            output_path = self.config_path

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = AppConfig().model_dump()
        yaml_content = self._generate_commented_yaml(config_dict)

        with open(output_path, 'w', encoding='utf-8') as file:
            file.write(yaml_content)

        logger.info(f"Default configuration created at {output_path}")
        return output_path

    def _generate_commented_yaml(self, config_dict: Dict[str, Any]) -> str:
        """
        Generate YAML with comments for better user experience.

        Args:
            config_dict: Configuration dictionary

        Returns:
            YAML string with comments
        """
        yaml_lines = [
            "# Google Workspace Empty Group Cleanup Configuration",
            "",
            "# IANA timezone used for creation dates and deletion timestamps",
            f"timezone: \"{config_dict['timezone']}\"",
            "",
            "# Admin SDK Directory API",
            "directory:",
            f"  customer_id: \"{config_dict['directory']['customer_id']}\"",
            f"  page_size: {config_dict['directory']['page_size']}",
            "",
            "# Spreadsheet receiving the report",
            "sheet:",
            "  spreadsheet_id: \"your-spreadsheet-id\"",
            f"  sheet_name: \"{config_dict['sheet']['sheet_name']}\"",
            "",
            "# Email report",
            "notification:",
            f"  recipient: \"{config_dict['notification']['recipient']}\"",
            f"  subject: \"{config_dict['notification']['subject']}\"",
            f"  body_template: \"{config_dict['notification']['body_template']}\"",
            "",
            "# Persisted page token and scheduled triggers",
            "state:",
            f"  path: \"{config_dict['state']['path']}\"",
            "",
            "# Local exports of the report sheet",
            "output:",
            "  formats:",
        ]

        for fmt in config_dict['output']['formats']:
            yaml_lines.append(f"    - {fmt}")

        yaml_lines.extend([
            f"  directory: \"{config_dict['output']['directory']}\"",
            f"  timestamp_format: \"{config_dict['output']['timestamp_format']}\"",
            "",
            "# Logging Configuration",
            "logging:",
            f"  level: \"{config_dict['logging']['level']}\"",
            f"  format: \"{config_dict['logging']['format']}\"",
            f"  file: \"{config_dict['logging']['file']}\"",
        ])

        return '\n'.join(yaml_lines) + '\n'

    def validate_config(self) -> bool:
        """
        Validate the current configuration.

        Returns:
            True if configuration is valid, False otherwise
        """
        try:
            config = self.get_config()

            if not config.sheet.spreadsheet_id:
                logger.error("No spreadsheet_id configured for the report sheet")
                return False

            # State file must be writable
            state_dir = Path(config.state.path).parent
            try:
                state_dir.mkdir(parents=True, exist_ok=True)
                test_file = state_dir / ".test_write"
                test_file.touch()
                test_file.unlink()
            except (OSError, PermissionError) as e:
                logger.error(f"State directory is not writable: {e}")
                return False

            logger.info("Configuration validation successful")
            return True

        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            return False
