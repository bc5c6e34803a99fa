"""
This module provides the logging configuration system with:
- Validated configuration sections (pydantic)
- YAML, JSON and TOML configuration file support
- Environment variable overrides
"""

import json
import logging
import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .constants import (
    BUFFER_SIZE_MIN,
    CONFIG_FILE_EXTENSIONS,
    CONFIG_SECTION_NAME,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_BACKUPS,
    DEFAULT_ROTATE_INTERVAL_MINUTES,
    ENV_VAR_MAPPING,
    ERROR_MESSAGES,
    MAX_BACKUPS_MIN,
    ROTATE_INTERVAL_MINUTES_MIN,
)
from .exceptions import ConfigFileNotFoundError, ConfigFormatError, ConfigValidationError
from .record import Level

logger: logging.Logger = logging.getLogger(__name__)


class FormatType(str, Enum):
    """Supported line formats."""
    LOGFMT: str = "logfmt"
    JSON: str = "json"


class ConsoleStream(str, Enum):
    """Standard streams the console output can target."""
    STDERR: str = "stderr"
    STDOUT: str = "stdout"


class ConfigSection(BaseModel):
    """Base class for configuration sections."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class RotationConfig(ConfigSection):
    """Time based rotation of the log file."""
    interval_minutes: int = Field(
        default=DEFAULT_ROTATE_INTERVAL_MINUTES,
        ge=ROTATE_INTERVAL_MINUTES_MIN,
        description="Minutes between rotations"
    )
    max_backups: int = Field(
        default=DEFAULT_MAX_BACKUPS,
        ge=MAX_BACKUPS_MIN,
        description="Archives to keep, 0 keeps all"
    )


class ConsoleConfig(ConfigSection):
    """Console output configuration."""
    enabled: bool = Field(default=True, description="Write records to a standard stream")
    stream: ConsoleStream = Field(default=ConsoleStream.STDERR, description="Target stream")


class FileConfig(ConfigSection):
    """File output configuration."""
    enabled: bool = Field(default=False, description="Write records to a file")
    path: Optional[Path] = Field(default=None, description="Active log file path")
    rotation: Optional[RotationConfig] = Field(default=None, description="Rotate the file on a schedule")


class LoggingConfig(ConfigSection):
    """Root handler chain configuration."""
    level: Level = Field(default=Level.from_string(DEFAULT_LOG_LEVEL), description="Minimum level delivered")
    format: FormatType = Field(default=FormatType(DEFAULT_LOG_FORMAT), description="Line format")
    console: ConsoleConfig = Field(default_factory=ConsoleConfig, description="Console output")
    file: FileConfig = Field(default_factory=FileConfig, description="File output")
    buffer_size: Optional[int] = Field(
        default=None,
        ge=BUFFER_SIZE_MIN,
        description="Deliver through a background queue of this size"
    )
    failover: bool = Field(default=False, description="Fall back to the console when the file fails")
    suppress_key: Optional[str] = Field(
        default=None,
        description="Drop records already carrying a non-nil value for this key"
    )
    context: Dict[str, Any] = Field(default_factory=dict, description="Context of the root logger")

    @field_validator("level", mode="before")
    @classmethod
    def parse_level(cls, v):
        """Accept level names in any supported spelling."""
        return Level.from_string(v)

    @model_validator(mode="after")
    def check_file_path(self):
        if self.file.enabled and self.file.path is None:
            raise ValueError(ERROR_MESSAGES["file_path_required"])
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Plain data suitable for YAML serialisation."""
        data = self.model_dump(mode="json")
        data["level"] = self.level.code
        return data


def config_from_dict(data: Mapping[str, Any]) -> LoggingConfig:
    """
    Build a LoggingConfig from parsed file content.

    Args:
        data: Either the section itself or a document holding it under
            a ``logging`` key

    Returns:
        LoggingConfig: Validated configuration

    Raises:
        ConfigValidationError: If any value fails validation
    """
    if CONFIG_SECTION_NAME in data and isinstance(data[CONFIG_SECTION_NAME], Mapping):
        data = data[CONFIG_SECTION_NAME]
    try:
        return LoggingConfig.model_validate(dict(data))
    except ValidationError as e:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise ConfigValidationError("Logging configuration is invalid", errors=errors, cause=e)


def _parse(path: Path, format_type: str) -> Dict[str, Any]:
    if format_type == "yaml":
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    if format_type == "json":
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    with open(path, "rb") as f:
        return tomllib.load(f)


def apply_env_overrides(
    config: LoggingConfig,
    environ: Optional[Mapping[str, str]] = None
) -> LoggingConfig:
    """
    Apply ``KVLOG_*`` environment variables on top of a configuration.

    Args:
        config: Configuration to update
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        LoggingConfig: A new, validated configuration
    """
    if environ is None:
        environ = os.environ

    data = config.to_dict()
    changed = False
    for env_var, path in ENV_VAR_MAPPING.items():
        value = environ.get(env_var)
        if value is None:
            continue
        target = data
        for part in path[:-1]:
            target = target[part]
        target[path[-1]] = value
        if path[0] == "file":
            data["file"]["enabled"] = True
        changed = True
        logger.debug(f"Config override from {env_var}: {value}")

    return config_from_dict(data) if changed else config


def load_config(
    path: Union[str, Path],
    environ: Optional[Mapping[str, str]] = None
) -> LoggingConfig:
    """
    Load logging configuration from a YAML, JSON or TOML file.

    Args:
        path: Configuration file path; the format follows the extension
        environ: Environment used for overrides, defaults to ``os.environ``

    Returns:
        LoggingConfig: Loaded configuration

    Raises:
        ConfigFileNotFoundError: If the file does not exist
        ConfigFormatError: If the file cannot be parsed
        ConfigValidationError: If the content is not a valid configuration
    """
    path = Path(path)
    if not path.exists():
        raise ConfigFileNotFoundError(path)

    suffix = path.suffix.lower()
    format_type = CONFIG_FILE_EXTENSIONS.get(suffix)
    if format_type is None:
        raise ConfigFormatError(
            path, suffix.lstrip(".") or "unknown",
            ERROR_MESSAGES["config_unsupported_format"].format(suffix=suffix)
        )

    try:
        data = _parse(path, format_type)
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        logger.error(f"Invalid {format_type} in config file {path}: {e}")
        raise ConfigFormatError(path, format_type, str(e), cause=e)

    if not isinstance(data, Mapping):
        raise ConfigFormatError(path, format_type, "top level must be a mapping")

    config = apply_env_overrides(config_from_dict(data), environ)
    logger.info(f"Logging configuration loaded from {path}")
    return config


def save_config(config: LoggingConfig, path: Union[str, Path]) -> Path:
    """
    Save configuration as YAML under a ``logging`` key.

    Args:
        config: Configuration to write
        path: Destination file

    Returns:
        Path: The written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({CONFIG_SECTION_NAME: config.to_dict()}, f, default_flow_style=False, indent=2, sort_keys=False)
    logger.info(f"Logging configuration saved to {path}")
    return path
