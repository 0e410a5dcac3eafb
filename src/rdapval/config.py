"""Configuration management for rdapval using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rdapval.constants import DEFAULT_REFERENCE_BASE
from rdapval.models import ServerType

CONFIG_FILE_NAME = ".rdapval.json"


class OutputFormat(str, Enum):
    """Output format types."""
    TABLE = "table"
    JSON = "json"
    MARKDOWN = "markdown"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class FetchConfig(BaseModel):
    """HTTP fetch configuration section."""
    timeout: float = 30.0
    user_agent: str = Field(alias="userAgent", default="rdapval")
    follow_redirects: bool = Field(alias="followRedirects", default=True)
    verify_tls: bool = Field(alias="verifyTls", default=True)

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout must be > 0")
        return v

    model_config = ConfigDict(populate_by_name=True)


class ValidationConfig(BaseModel):
    """Validation configuration section."""
    default_server_type: ServerType = Field(alias="defaultServerType", default=ServerType.VANILLA)
    reference_base: str = Field(alias="referenceBase", default=DEFAULT_REFERENCE_BASE)

    @field_validator("reference_base")
    @classmethod
    def validate_reference_base(cls, v):
        """Reference links must be absolute http(s) URLs."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"reference_base must be an http(s) URL, got: {v}")
        return v

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.TABLE
    errors_only: bool = Field(alias="errorsOnly", default=False)
    show_info: bool = Field(alias="showInfo", default=True)

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class ValidatorConfig(BaseModel):
    """Complete rdapval configuration model."""
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> ValidatorConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .rdapval.json

    Returns:
        ValidatorConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return ValidatorConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except Exception as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
    else:
        return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .rdapval.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> ValidatorConfig:
    """Create default configuration."""
    return ValidatorConfig()
