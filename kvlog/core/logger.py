# kvlog/core/logger.py
"""
Context-carrying loggers.

A Logger owns an immutable context and a reference to a shared
HandlerCell. Deriving a child copies and extends the context but shares
the cell, so ``set_handler`` on any logger of a family is seen by all of
them.
"""

import logging
import os
import sys
import threading
from datetime import datetime
from typing import Any, Optional, Tuple, Union

from ..handlers.base import DiscardHandler, Handler
from .record import CallSite, Level, Record, normalize_context, resolve_lazy

logger = logging.getLogger(__name__)


class HandlerCell:
    """Shared, swappable reference to the active root handler."""

    def __init__(self, handler: Optional[Handler] = None):
        if handler is None:
            handler = DiscardHandler()
        self._handler = handler
        self._lock = threading.Lock()

    def get(self) -> Handler:
        return self._handler

    def swap(self, handler: Handler) -> Handler:
        """Install ``handler`` and return the one it replaced."""
        with self._lock:
            previous, self._handler = self._handler, handler
        return previous


class Logger:
    """
    Produces records from a message plus key/value context.

    Context may be given as alternating positional ``key, value`` values,
    as a single mapping, or as keyword arguments (appended after positional
    context). Records carry the logger's context first, then the call-site
    context.

    Logging is fire-and-forget: an exception raised by the handler chain is
    recorded on this module's stdlib logger at DEBUG and not re-raised.
    Wrap the chain in a FailoverHandler to react to delivery failures.
    """

    def __init__(self, /, *ctx: Any, handler: Optional[Handler] = None, **kwargs: Any):
        self._ctx: Tuple[Any, ...] = tuple(normalize_context(ctx, kwargs))
        self._cell = HandlerCell(handler)

    @property
    def context(self) -> Tuple[Any, ...]:
        return self._ctx

    def new(self, /, *ctx: Any, **kwargs: Any) -> "Logger":
        """Return a child logger whose context extends this one."""
        child = Logger.__new__(Logger)
        child._ctx = self._ctx + tuple(normalize_context(ctx, kwargs))
        child._cell = self._cell
        return child

    def get_handler(self) -> Handler:
        return self._cell.get()

    def set_handler(self, handler: Handler) -> None:
        self._cell.swap(handler)

    def _log(self, level: Level, msg: str, args: Tuple[Any, ...], kwargs: dict, stacklevel: int = 2) -> None:
        ctx = list(self._ctx)
        ctx.extend(normalize_context(args, kwargs))
        resolve_lazy(ctx)

        record = Record(
            time=datetime.now().astimezone(),
            level=level,
            msg=str(msg),
            ctx=tuple(ctx),
            call=_find_caller(stacklevel + 1),
        )

        handler = self._cell.get()
        try:
            handler.handle(record)
        except Exception as e:
            logger.debug(f"Handler {type(handler).__name__} failed for {record!r}: {e}")

    def log(self, level: Union[Level, str], msg: str, /, *ctx: Any, **kwargs: Any) -> None:
        self._log(Level.from_string(level), msg, ctx, kwargs)

    def debug(self, msg: str, /, *ctx: Any, **kwargs: Any) -> None:
        self._log(Level.DEBUG, msg, ctx, kwargs)

    def info(self, msg: str, /, *ctx: Any, **kwargs: Any) -> None:
        self._log(Level.INFO, msg, ctx, kwargs)

    def warn(self, msg: str, /, *ctx: Any, **kwargs: Any) -> None:
        self._log(Level.WARN, msg, ctx, kwargs)

    def error(self, msg: str, /, *ctx: Any, **kwargs: Any) -> None:
        self._log(Level.ERROR, msg, ctx, kwargs)

    def crit(self, msg: str, /, *ctx: Any, **kwargs: Any) -> None:
        self._log(Level.CRIT, msg, ctx, kwargs)

    warning = warn
    critical = crit

    def __repr__(self) -> str:
        return f"Logger(ctx={list(self._ctx)!r})"


def _find_caller(depth: int) -> Optional[CallSite]:
    try:
        frame = sys._getframe(depth)
    except ValueError:
        return None
    code = frame.f_code
    return CallSite(
        filename=os.path.normpath(code.co_filename),
        lineno=frame.f_lineno,
        function=code.co_name,
    )
