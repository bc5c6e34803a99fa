# kvlog/handlers/context.py
"""Handlers that annotate records with where they were logged from."""

import os

from ..core.constants import CALLER_FILE_KEY, CALLER_FUNC_KEY
from ..core.record import Record
from .base import Handler


class CallerFileHandler(Handler):
    """Appends ``caller=<file>:<line>`` to each record before passing it on"""

    def __init__(self, inner: Handler, full_path: bool = False):
        self._inner = inner
        self._full_path = full_path

    def handle(self, record: Record) -> None:
        if record.call is not None:
            filename = record.call.filename
            if not self._full_path:
                filename = os.path.basename(filename)
            record = record.with_context(CALLER_FILE_KEY, f"{filename}:{record.call.lineno}")
        self._inner.handle(record)


class CallerFuncHandler(Handler):
    """Appends ``fn=<function>`` to each record before passing it on"""

    def __init__(self, inner: Handler):
        self._inner = inner

    def handle(self, record: Record) -> None:
        if record.call is not None:
            record = record.with_context(CALLER_FUNC_KEY, record.call.function)
        self._inner.handle(record)
