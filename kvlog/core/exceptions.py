# kvlog/core/exceptions.py
"""
Custom exceptions for the kvlog package.

This module provides the exception hierarchy raised by configuration
loading, handler composition, lazy value resolution and the rotating
file writer.
"""

from typing import Optional, Any, Dict, List, Union
from pathlib import Path


class KvlogError(Exception):
    """
    Base exception for all kvlog errors.

    All custom exceptions in the package inherit from this class so callers
    can catch every library failure with a single except clause.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize KvlogError.

        Args:
            message: Human-readable error message
            details: Additional error details (structured data)
            cause: Original exception that caused this error
        """
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(message)

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} [{details_str}]"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


# ============================================================================
# Configuration Exceptions
# ============================================================================

class ConfigurationError(KvlogError):
    """
    Base exception for configuration-related errors.
    """
    pass


class ConfigFileNotFoundError(ConfigurationError):
    """
    Raised when a configuration file cannot be found.
    """

    def __init__(self, path: Union[str, Path], **kwargs):
        """
        Initialize ConfigFileNotFoundError.

        Args:
            path: Path to the missing configuration file
            **kwargs: Additional details
        """
        path_str = str(path)
        message = f"Configuration file not found: {path_str}"
        details = {"path": path_str, **kwargs}
        super().__init__(message, details)


class ConfigFormatError(ConfigurationError):
    """
    Raised when a configuration file has invalid format.

    This occurs when the config file contains malformed YAML, JSON,
    or TOML content, or uses an extension no parser is registered for.
    """

    def __init__(
        self,
        path: Union[str, Path],
        format_type: str,
        parse_error: str,
        cause: Optional[Exception] = None,
        **kwargs
    ):
        """
        Initialize ConfigFormatError.

        Args:
            path: Path to the configuration file
            format_type: Expected format (yaml/json/toml)
            parse_error: Detailed parse error message
            cause: Underlying parser exception
            **kwargs: Additional details
        """
        path_str = str(path)
        message = f"Invalid {format_type.upper()} format in config file: {path_str}"
        details = {
            "path": path_str,
            "format": format_type,
            "parse_error": parse_error,
            **kwargs
        }
        super().__init__(message, details, cause)


class ConfigValidationError(ConfigurationError):
    """
    Raised when configuration validation fails.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        cause: Optional[Exception] = None,
        **kwargs
    ):
        """
        Initialize ConfigValidationError.

        Args:
            message: Error message
            errors: List of specific validation errors
            cause: Underlying validation exception
            **kwargs: Additional details
        """
        details = {"validation_errors": errors or [], **kwargs}
        super().__init__(message, details, cause)


class InvalidLevelError(ConfigurationError, ValueError):
    """
    Raised when a level name cannot be parsed.
    """

    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"Unknown log level: {name!r}", {"level": str(name)})


# ============================================================================
# Handler Exceptions
# ============================================================================

class HandlerError(KvlogError):
    """
    Base exception for errors raised by handlers.
    """
    pass


class HandlerClosedError(HandlerError):
    """
    Raised when a record is handed to a handler that has been closed.
    """

    def __init__(self, handler: Any):
        name = type(handler).__name__
        super().__init__(f"Handler is closed: {name}", {"handler": name})


class LazyResolutionError(KvlogError):
    """
    Raised internally when a lazy value cannot be evaluated.

    Never escapes a logging call; its text becomes the diagnostic value
    placed in the record context.
    """
    pass


# ============================================================================
# Logging Output Exceptions
# ============================================================================

class LoggingError(KvlogError):
    """
    Base exception for log output errors.
    """
    pass


class LogFileError(LoggingError):
    """
    Raised when there are issues with log files.
    """

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        cause: Optional[Exception] = None,
        **kwargs
    ):
        """
        Initialize LogFileError.

        Args:
            message: Error message
            path: Path to log file
            cause: Underlying OS error
            **kwargs: Additional details
        """
        details = {"log_error": message, **kwargs}
        if path:
            details["path"] = str(path)

        super().__init__(f"Log file error: {message}", details, cause)


class RotationError(LogFileError):
    """
    Raised when rotating a log file fails.

    The writer is left in whatever state the failed step produced; the
    next write reopens the active file if no handle is open.
    """

    def __init__(
        self,
        step: str,
        path: Optional[Union[str, Path]] = None,
        cause: Optional[Exception] = None,
        **kwargs
    ):
        """
        Initialize RotationError.

        Args:
            step: Rotation step that failed (close/remove/rename/prune/open)
            path: Path involved in the failed step
            cause: Underlying OS error
            **kwargs: Additional details
        """
        self.step = step
        super().__init__(
            f"rotation failed during {step}: {cause}",
            path=path,
            cause=cause,
            step=step,
            **kwargs
        )
