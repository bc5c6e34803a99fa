# kvlog/core/manager.py
"""
Process-wide default logger.

The LogManager singleton owns the root Logger and any handlers it built
from a LoggingConfig. Initialisation and replacement are explicit; nothing
is configured lazily behind the caller's back.
"""

import logging
import sys
import threading
from typing import Any, List, Optional

from ..handlers.base import DiscardHandler, FileHandler, Handler, StreamHandler
from ..handlers.buffered import BufferedHandler
from ..handlers.composite import FailoverHandler, MultiHandler
from ..handlers.filters import LevelFilterHandler, MatchFilterHandler
from ..utilities.timerotate import TimeRotateWriter
from .config import ConsoleStream, LoggingConfig
from .formatters import FORMATTERS
from .logger import Logger
from .record import Level

logger = logging.getLogger(__name__)


class _WriterHandler(StreamHandler):
    """StreamHandler that owns the TimeRotateWriter it writes to."""

    def close(self) -> None:
        self._stream.close()


def build_handler(config: LoggingConfig, owned: Optional[List[Any]] = None) -> Handler:
    """
    Build a root handler chain from configuration.

    Args:
        config: Logging configuration
        owned: Receives every handler or writer that must be closed when
            the chain is discarded, innermost first

    Returns:
        Handler: The outermost handler of the chain
    """
    if owned is None:
        owned = []
    formatter = FORMATTERS[config.format.value]()

    console: Optional[Handler] = None
    if config.console.enabled:
        stream = sys.stdout if config.console.stream == ConsoleStream.STDOUT else sys.stderr
        console = StreamHandler(stream, formatter)

    file_handler: Optional[Handler] = None
    if config.file.enabled:
        rotation = config.file.rotation
        if rotation is not None:
            writer = TimeRotateWriter(config.file.path, rotation.interval_minutes, rotation.max_backups)
            file_handler = _WriterHandler(writer, formatter)
        else:
            file_handler = FileHandler(config.file.path, formatter)
        owned.append(file_handler)

    if file_handler is not None and console is not None:
        if config.failover:
            handler: Handler = FailoverHandler(file_handler, console)
        else:
            handler = MultiHandler(file_handler, console)
    else:
        handler = file_handler or console
        if handler is None:
            handler = DiscardHandler()

    if config.suppress_key:
        handler = MatchFilterHandler(config.suppress_key, None, handler)

    handler = LevelFilterHandler(config.level, handler)

    if config.buffer_size is not None:
        handler = BufferedHandler(config.buffer_size, handler)
        owned.append(handler)

    return handler


class LogManager:

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self._base = Logger()
        self._root = self._base
        self._owned: List[Any] = []
        self._config: Optional[LoggingConfig] = None
        self._state_lock = threading.Lock()

    @property
    def config(self) -> Optional[LoggingConfig]:
        return self._config

    def root(self) -> Logger:
        return self._root

    def initialize(self, config: Optional[LoggingConfig] = None) -> Logger:
        """Install a handler chain built from ``config`` on the root logger."""
        config = config or LoggingConfig()
        owned: List[Any] = []
        handler = build_handler(config, owned)

        with self._state_lock:
            previous_owned = self._owned
            self._owned = owned
            self._config = config
            self._base.set_handler(handler)
            self._root = self._base.new(config.context) if config.context else self._base

        self._close_all(previous_owned)
        logger.info(f"kvlog initialized: level={config.level.code} format={config.format.value}")
        return self._root

    def replace_root(self, root: Logger) -> Logger:
        """Make ``root`` the process-wide logger and return the previous one."""
        with self._state_lock:
            previous, self._root = self._root, root
        return previous

    def shutdown(self) -> None:
        """Close every handler and writer built by ``initialize``."""
        with self._state_lock:
            owned, self._owned = self._owned, []
            self._config = None
            self._base.set_handler(DiscardHandler())
            self._root = self._base
        self._close_all(owned)

    @staticmethod
    def _close_all(owned: List[Any]) -> None:
        for resource in reversed(owned):
            try:
                resource.close()
            except Exception as e:
                logger.error(f"Failed to close {type(resource).__name__}: {e}")


_log_manager = LogManager()


def get_log_manager() -> LogManager:
    return _log_manager


def root() -> Logger:
    return _log_manager.root()


def new(*ctx: Any, **kwargs: Any) -> Logger:
    return _log_manager.root().new(*ctx, **kwargs)


def initialize_logging(config: Optional[LoggingConfig] = None) -> Logger:
    return _log_manager.initialize(config)


def replace_root(new_root: Logger) -> Logger:
    return _log_manager.replace_root(new_root)


def shutdown_logging() -> None:
    _log_manager.shutdown()


def debug(msg: str, /, *ctx: Any, **kwargs: Any) -> None:
    _log_manager.root()._log(Level.DEBUG, msg, ctx, kwargs)


def info(msg: str, /, *ctx: Any, **kwargs: Any) -> None:
    _log_manager.root()._log(Level.INFO, msg, ctx, kwargs)


def warn(msg: str, /, *ctx: Any, **kwargs: Any) -> None:
    _log_manager.root()._log(Level.WARN, msg, ctx, kwargs)


def error(msg: str, /, *ctx: Any, **kwargs: Any) -> None:
    _log_manager.root()._log(Level.ERROR, msg, ctx, kwargs)


def crit(msg: str, /, *ctx: Any, **kwargs: Any) -> None:
    _log_manager.root()._log(Level.CRIT, msg, ctx, kwargs)
