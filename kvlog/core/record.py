# kvlog/core/record.py
"""
Record data model for kvlog.

This module provides:
- The ordered severity levels and their short wire codes
- The immutable Record handed to handlers
- Context normalisation (positional pairs, mappings, keyword arguments)
- Lazy values resolved once per logging call
"""

import inspect
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import IntEnum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .constants import (
    BAD_LAZY_MESSAGE,
    DEFAULT_LEVEL_KEY,
    DEFAULT_MESSAGE_KEY,
    DEFAULT_TIME_KEY,
    ERROR_KEY,
    ERROR_MESSAGES,
    ODD_CONTEXT_MESSAGE,
)
from .exceptions import InvalidLevelError, LazyResolutionError


class Level(IntEnum):
    """Severity levels, ordered from least to most severe."""
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    CRIT = 4

    @property
    def code(self) -> str:
        return _LEVEL_CODES[self]

    @classmethod
    def from_string(cls, name: Any) -> "Level":
        if isinstance(name, Level):
            return name
        try:
            return _LEVEL_ALIASES[str(name).strip().lower()]
        except KeyError:
            raise InvalidLevelError(name) from None

    def __str__(self) -> str:
        return self.code


_LEVEL_CODES: Dict[Level, str] = {
    Level.DEBUG: "dbug",
    Level.INFO: "info",
    Level.WARN: "warn",
    Level.ERROR: "eror",
    Level.CRIT: "crit",
}

_LEVEL_ALIASES: Dict[str, Level] = {
    "debug": Level.DEBUG,
    "dbug": Level.DEBUG,
    "info": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "eror": Level.ERROR,
    "crit": Level.CRIT,
    "critical": Level.CRIT,
}


@dataclass(frozen=True)
class KeyNames:
    """Reserved keys formatters use for the record's own fields."""
    time: str = DEFAULT_TIME_KEY
    lvl: str = DEFAULT_LEVEL_KEY
    msg: str = DEFAULT_MESSAGE_KEY


@dataclass(frozen=True)
class CallSite:
    """Where a logging call was made."""
    filename: str
    lineno: int
    function: str

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}"


@dataclass(frozen=True)
class Record:
    """
    One log event.

    Records are never mutated once built. Decorators that add context
    produce a new Record via ``with_context``.
    """
    time: datetime
    level: Level
    msg: str
    ctx: Tuple[Any, ...] = ()
    call: Optional[CallSite] = None
    key_names: KeyNames = field(default_factory=KeyNames)

    def with_context(self, *pairs: Any) -> "Record":
        return replace(self, ctx=self.ctx + tuple(pairs))

    def pairs(self) -> List[Tuple[Any, Any]]:
        """Return the context as (key, value) tuples, preserving duplicates."""
        return [(self.ctx[i], self.ctx[i + 1]) for i in range(0, len(self.ctx) - 1, 2)]

    def __repr__(self) -> str:
        return f"Record({self.level.code}, {self.msg!r}, ctx={list(self.ctx)!r})"


class Lazy:
    """
    A value computed when the record is assembled.

    Wrap a zero-argument callable; each logging call invokes it again, so
    the record always carries the value current at call time.
    """

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[], Any]):
        self.fn = fn

    def evaluate(self) -> Any:
        fn = self.fn
        if not callable(fn):
            raise LazyResolutionError(ERROR_MESSAGES["lazy_not_callable"].format(value=fn))

        name = getattr(fn, "__qualname__", repr(fn))
        try:
            signature = inspect.signature(fn)
        except (TypeError, ValueError):
            signature = None

        if signature is not None:
            required = [
                p for p in signature.parameters.values()
                if p.default is inspect.Parameter.empty
                and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
            ]
            if required:
                raise LazyResolutionError(ERROR_MESSAGES["lazy_takes_arguments"].format(name=name))
            if signature.return_annotation in (None, "None"):
                raise LazyResolutionError(ERROR_MESSAGES["lazy_returns_nothing"].format(name=name))

        try:
            return fn()
        except Exception as e:
            raise LazyResolutionError(
                ERROR_MESSAGES["lazy_raised"].format(error_type=type(e).__name__, error=e),
                cause=e
            )

    def __repr__(self) -> str:
        return f"Lazy({self.fn!r})"


def normalize_context(args: Sequence[Any], kwargs: Optional[Mapping[str, Any]] = None) -> List[Any]:
    """
    Flatten call-site context into an alternating key/value list.

    Accepts positional ``key, value`` pairs or a single mapping, followed by
    keyword arguments. A mapping is flattened in its own iteration order,
    which for a plain dict is insertion order. An odd number of positional
    values is padded with None and flagged with an ``ERROR_KEY`` pair.
    """
    if len(args) == 1 and isinstance(args[0], Mapping):
        ctx: List[Any] = []
        for key, value in args[0].items():
            ctx.extend((key, value))
    else:
        ctx = list(args)
        if len(ctx) % 2 != 0:
            ctx.extend((None, ERROR_KEY, ODD_CONTEXT_MESSAGE))

    if kwargs:
        for key, value in kwargs.items():
            ctx.extend((key, value))
    return ctx


def resolve_lazy(ctx: List[Any]) -> List[Any]:
    """
    Replace every Lazy value in ``ctx`` with its current result.

    A value that fails to resolve is replaced by its diagnostic text and a
    single ``(ERROR_KEY, "bad lazy")`` pair is appended; nothing is raised.
    """
    had_error = False
    for i in range(1, len(ctx), 2):
        value = ctx[i]
        if isinstance(value, Lazy):
            try:
                ctx[i] = value.evaluate()
            except LazyResolutionError as e:
                ctx[i] = e.message
                had_error = True
    if had_error:
        ctx.extend((ERROR_KEY, BAD_LAZY_MESSAGE))
    return ctx
