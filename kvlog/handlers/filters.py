# kvlog/handlers/filters.py
"""Handlers that decide whether a record reaches the wrapped handler."""

from typing import Any, Callable, Union

from ..core.record import Level, Record
from .base import Handler


class FilterHandler(Handler):
    """Passes a record to ``inner`` only when ``predicate(record)`` is true"""

    def __init__(self, predicate: Callable[[Record], bool], inner: Handler):
        self._predicate = predicate
        self._inner = inner

    def handle(self, record: Record) -> None:
        if self._predicate(record):
            self._inner.handle(record)


class LevelFilterHandler(FilterHandler):
    """Drops records less severe than ``min_level``"""

    def __init__(self, min_level: Union[Level, str], inner: Handler):
        self.min_level = Level.from_string(min_level)
        super().__init__(lambda r: r.level >= self.min_level, inner)


class MatchFilterHandler(FilterHandler):
    """
    Drops records whose context carries ``key`` with a matching value.

    With ``value=None`` any non-None value matches, which suppresses records
    that already carry, say, an ``err`` entry. A record passes when the key
    is absent or its value is None.
    """

    def __init__(self, key: str, value: Any, inner: Handler):
        self.key = key
        self.value = value
        super().__init__(self._passes, inner)

    def _passes(self, record: Record) -> bool:
        ctx = record.ctx
        for i in range(0, len(ctx) - 1, 2):
            if ctx[i] != self.key:
                continue
            found = ctx[i + 1]
            if found is None:
                continue
            if self.value is None or found == self.value:
                return False
        return True
