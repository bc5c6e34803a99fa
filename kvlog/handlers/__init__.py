# kvlog/handlers/__init__.py

"""Handlers: the capability interface, sinks and delivery-policy decorators."""

from .base import (
    Handler, FuncHandler, DiscardHandler, SyncHandler,
    StreamHandler, FileHandler
)

from .filters import (
    FilterHandler, LevelFilterHandler, MatchFilterHandler
)

from .composite import (
    MultiHandler, FailoverHandler
)

from .context import (
    CallerFileHandler, CallerFuncHandler
)

from .buffered import (
    BufferedHandler, BufferWorker
)
