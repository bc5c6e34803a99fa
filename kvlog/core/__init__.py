# kvlog/core/__init__.py
"""
Core module for kvlog.

This module provides the record model, loggers, formatters, configuration
and the process-wide default logger.
"""

from .constants import (
    APP_NAME,
    APP_VERSION,
    ERROR_KEY,
    FAILOVER_KEY_PREFIX,
)

from .exceptions import (
    KvlogError,
    ConfigurationError,
    ConfigFileNotFoundError,
    ConfigFormatError,
    ConfigValidationError,
    InvalidLevelError,
    HandlerError,
    HandlerClosedError,
    LazyResolutionError,
    LoggingError,
    LogFileError,
    RotationError,
)

from .record import (
    Level,
    KeyNames,
    CallSite,
    Record,
    Lazy,
    normalize_context,
    resolve_lazy,
)

from .formatters import (
    Formatter,
    FuncFormatter,
    LogfmtFormatter,
    JsonFormatter,
    format_logfmt_value,
    logfmt_format,
    json_format,
)

from .logger import HandlerCell, Logger

from .config import (
    FormatType,
    ConsoleStream,
    ConfigSection,
    RotationConfig,
    ConsoleConfig,
    FileConfig,
    LoggingConfig,
    config_from_dict,
    apply_env_overrides,
    load_config,
    save_config,
)

from .manager import (
    LogManager,
    build_handler,
    get_log_manager,
    initialize_logging,
    replace_root,
    shutdown_logging,
)
