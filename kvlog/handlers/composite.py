# kvlog/handlers/composite.py
"""
Handlers that route one record to several inner handlers.

- MultiHandler fans a record out to every handler
- FailoverHandler tries handlers in order until one accepts the record
"""

import logging
from typing import List, Optional

from ..core.constants import FAILOVER_KEY_PREFIX
from ..core.record import Record
from .base import Handler

logger = logging.getLogger(__name__)


class MultiHandler(Handler):
    """
    Delivers each record to every handler, in order, on the calling thread.

    A failing handler does not stop delivery to the rest; the first
    exception is re-raised once all handlers have been called.
    """

    def __init__(self, *handlers: Handler):
        self.handlers: List[Handler] = list(handlers)

    def handle(self, record: Record) -> None:
        first_error: Optional[Exception] = None
        for handler in self.handlers:
            try:
                handler.handle(record)
            except Exception as e:
                logger.debug(f"Fan-out target {type(handler).__name__} failed: {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error


class FailoverHandler(Handler):
    """
    Tries each handler in turn until one succeeds.

    Every failed attempt appends ``failover_err_N`` (N being the failed
    handler's index) and the error text to a copy of the record before the
    next handler is tried. When all handlers fail the last error is raised.
    """

    def __init__(self, *handlers: Handler):
        if not handlers:
            raise ValueError("FailoverHandler needs at least one handler")
        self.handlers: List[Handler] = list(handlers)

    def handle(self, record: Record) -> None:
        last_error: Optional[Exception] = None
        for index, handler in enumerate(self.handlers):
            try:
                handler.handle(record)
                return
            except Exception as e:
                last_error = e
                logger.debug(f"Failover handler {index} failed: {e}")
                record = record.with_context(f"{FAILOVER_KEY_PREFIX}{index}", str(e))
        raise last_error
