# kvlog/__init__.py

"""
kvlog - structured key/value logging
Records built from a message plus ordered context, delivered through a
composable chain of handlers, with a time-rotating file writer.
"""

__version__ = "1.0.0"
__author__ = "kvlog Team"
__description__ = "Structured key/value logging with composable handlers"

from .core import (
    Level, Record, Lazy, KeyNames, CallSite, ERROR_KEY,
    Logger, Formatter, LogfmtFormatter, JsonFormatter, FuncFormatter,
    LoggingConfig, load_config, save_config,
    KvlogError, HandlerError, HandlerClosedError, LogFileError, RotationError,
    ConfigurationError,
)

from .core.manager import (
    root, new, initialize_logging, replace_root, shutdown_logging,
    debug, info, warn, error, crit,
)

from .handlers import (
    Handler, FuncHandler, DiscardHandler, SyncHandler, StreamHandler,
    FileHandler, FilterHandler, LevelFilterHandler, MatchFilterHandler,
    MultiHandler, FailoverHandler, CallerFileHandler, CallerFuncHandler,
    BufferedHandler,
)

from .utilities import TimeRotateWriter
