# kvlog/core/constants.py
"""
Centralized constants for the kvlog package.

This module provides the reserved context keys, wire-format constants,
rotation defaults and configuration defaults used throughout the package.
"""

from typing import Dict, Tuple

APP_NAME: str = "kvlog"
APP_VERSION: str = "1.0.0"


ERROR_KEY: str = "KVLOG_ERROR"
BAD_LAZY_MESSAGE: str = "bad lazy"
ODD_CONTEXT_MESSAGE: str = "Normalized odd number of arguments by adding None"
FAILOVER_KEY_PREFIX: str = "failover_err_"


DEFAULT_TIME_KEY: str = "t"
DEFAULT_LEVEL_KEY: str = "lvl"
DEFAULT_MESSAGE_KEY: str = "msg"
CALLER_FILE_KEY: str = "caller"
CALLER_FUNC_KEY: str = "fn"


LOGFMT_TIME_FORMAT: str = "%Y-%m-%dT%H:%M:%S%z"
LOGFMT_FLOAT_PRECISION: int = 3
LOGFMT_NIL: str = "nil"


ARCHIVE_TIME_FORMAT: str = "%Y%m%d%H%M"
ARCHIVE_SUFFIX_DIGITS: int = 12
SECONDS_PER_MINUTE: int = 60
DEFAULT_FILE_MODE: int = 0o644


DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_LOG_FORMAT: str = "logfmt"
DEFAULT_ROTATE_INTERVAL_MINUTES: int = 60
DEFAULT_MAX_BACKUPS: int = 0
ROTATE_INTERVAL_MINUTES_MIN: int = 1
MAX_BACKUPS_MIN: int = 0
BUFFER_SIZE_MIN: int = 0
BUFFER_STOP_TIMEOUT_SECONDS: float = 5.0


CONFIG_SECTION_NAME: str = "logging"
CONFIG_FILE_EXTENSIONS: Dict[str, str] = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
    ".toml": "toml",
}

ENV_VAR_PREFIX: str = "KVLOG_"

ENV_VAR_MAPPING: Dict[str, Tuple[str, ...]] = {
    f"{ENV_VAR_PREFIX}LEVEL": ("level",),
    f"{ENV_VAR_PREFIX}FORMAT": ("format",),
    f"{ENV_VAR_PREFIX}FILE": ("file", "path"),
}


ERROR_MESSAGES: Dict[str, str] = {
    "config_unsupported_format": "Unsupported configuration file extension: {suffix}",
    "file_path_required": "file.path is required when file output is enabled",
    "lazy_not_callable": "lazy value is not callable: {value!r}",
    "lazy_takes_arguments": "lazy function must take no arguments: {name}",
    "lazy_returns_nothing": "lazy function must return a value: {name}",
    "lazy_raised": "lazy function raised {error_type}: {error}",
}
