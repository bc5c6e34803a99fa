# kvlog/core/formatters.py
"""
Record formatters.

Formatters are pure functions from a Record to the bytes of one output
line. They hold no mutable state and are safe to share between threads.

- LogfmtFormatter: ``t=... lvl=... msg=... k=v`` lines, every context pair
  printed in order (duplicate keys included)
- JsonFormatter: one JSON object per line, last duplicate key wins
"""

import json
import math
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pythonjsonlogger import json as jsonlogger

from .constants import ERROR_KEY, LOGFMT_FLOAT_PRECISION, LOGFMT_NIL, LOGFMT_TIME_FORMAT
from .record import Level, Record


class Formatter(ABC):
    """Abstract base class for record formatters"""

    @abstractmethod
    def format(self, record: Record) -> bytes:
        """Render a record as one line of output, newline included"""
        pass


class FuncFormatter(Formatter):
    """Adapts a plain ``record -> bytes`` callable to the Formatter interface"""

    def __init__(self, fn: Callable[[Record], bytes]):
        self._fn = fn

    def format(self, record: Record) -> bytes:
        return self._fn(record)


def _needs_quoting(text: str) -> bool:
    if not text:
        return True
    for ch in text:
        if ch in ('=', '"') or ch <= ' ' or ch == '\x7f' or ch.isspace():
            return True
    return False


def _escape(text: str) -> str:
    if _needs_quoting(text):
        return json.dumps(text, ensure_ascii=False)
    return text


def format_logfmt_value(value: Any) -> str:
    if value is None:
        return LOGFMT_NIL
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Level):
        return value.code
    if isinstance(value, float):
        return f"{value:.{LOGFMT_FLOAT_PRECISION}f}"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.strftime(LOGFMT_TIME_FORMAT)
    if isinstance(value, Enum):
        return format_logfmt_value(value.value)
    return _escape(str(value))


class LogfmtFormatter(Formatter):
    """
    Formats records as logfmt.

    Example:
        t=2024-05-01T10:20:30+0200 lvl=eror msg="some message" x=1 y=3.200
    """

    def format(self, record: Record) -> bytes:
        names = record.key_names
        parts: List[str] = [
            f"{names.time}={record.time.strftime(LOGFMT_TIME_FORMAT)}",
            f"{names.lvl}={record.level.code}",
            f"{names.msg}={_escape(record.msg)}",
        ]

        ctx = record.ctx
        for i in range(0, len(ctx) - 1, 2):
            key, value = ctx[i], ctx[i + 1]
            if not isinstance(key, str):
                key, value = ERROR_KEY, key
            parts.append(f"{key}={format_logfmt_value(value)}")

        return (" ".join(parts) + "\n").encode("utf-8")


class JsonFormatter(Formatter):
    """
    Formats records as JSON objects, one per line.

    Context values are serialised with python-json-logger's encoder, which
    handles datetimes, exceptions, enums and dataclasses and falls back to
    ``str`` for anything else. NaN and infinite floats are written as the
    strings "nan", "inf" and "-inf" so every line stays valid JSON.
    """

    def __init__(self, indent: Optional[int] = None, ensure_ascii: bool = False):
        self._indent = indent
        self._ensure_ascii = ensure_ascii

    def _props(self, record: Record) -> Dict[str, Any]:
        names = record.key_names
        props: Dict[str, Any] = {
            names.time: record.time.isoformat(),
            names.lvl: record.level.code,
            names.msg: record.msg,
        }

        ctx = record.ctx
        for i in range(0, len(ctx) - 1, 2):
            key, value = ctx[i], ctx[i + 1]
            if not isinstance(key, str):
                props[ERROR_KEY] = f"key is not a string: {key!r}"
                continue
            if isinstance(value, Level):
                value = value.code
            elif isinstance(value, BaseException):
                value = str(value)
            elif isinstance(value, float) and not math.isfinite(value):
                value = str(value)
            props[key] = value
        return props

    def format(self, record: Record) -> bytes:
        line = json.dumps(
            self._props(record),
            cls=jsonlogger.JsonEncoder,
            indent=self._indent,
            ensure_ascii=self._ensure_ascii,
        )
        return (line + "\n").encode("utf-8")


def logfmt_format() -> LogfmtFormatter:
    return LogfmtFormatter()


def json_format(indent: Optional[int] = None) -> JsonFormatter:
    return JsonFormatter(indent=indent)


FORMATTERS: Dict[str, Callable[[], Formatter]] = {
    "logfmt": logfmt_format,
    "json": json_format,
}
