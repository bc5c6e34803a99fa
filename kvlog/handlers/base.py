# kvlog/handlers/base.py
"""
Handler capability and in-process sinks.

A handler consumes records. ``handle`` returns normally on success and
raises on failure; decorators decide what a failure means.
"""

import io
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO, Callable, IO, Optional, Union

from ..core.exceptions import HandlerClosedError, LogFileError
from ..core.formatters import Formatter, LogfmtFormatter
from ..core.record import Record


class Handler(ABC):
    """Abstract base class for handlers"""

    @abstractmethod
    def handle(self, record: Record) -> None:
        """Deliver a record, raising if delivery failed"""
        pass

    def close(self) -> None:
        """Release resources owned by this handler"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class FuncHandler(Handler):
    """Adapts a ``record -> None`` callable to the Handler interface"""

    def __init__(self, fn: Callable[[Record], Any]):
        self._fn = fn

    def handle(self, record: Record) -> None:
        self._fn(record)


class DiscardHandler(Handler):
    """Accepts every record and does nothing with it"""

    def handle(self, record: Record) -> None:
        return None


class SyncHandler(Handler):
    """Serialises calls to an inner handler"""

    def __init__(self, inner: Handler):
        self._inner = inner
        self._lock = threading.Lock()

    def handle(self, record: Record) -> None:
        with self._lock:
            self._inner.handle(record)


class StreamHandler(Handler):
    """
    Writes formatted records to a stream.

    Binary streams (and anything exposing ``write(bytes)``, such as
    TimeRotateWriter) receive bytes; ``io.TextIOBase`` streams receive text.
    Writes are serialised so lines from concurrent callers never interleave.
    The stream is not owned: closing the handler leaves it open.
    """

    def __init__(self, stream: Union[IO[str], BinaryIO, Any], formatter: Optional[Formatter] = None):
        self._stream = stream
        self._formatter = formatter or LogfmtFormatter()
        self._text = isinstance(stream, io.TextIOBase)
        self._lock = threading.Lock()

    @property
    def formatter(self) -> Formatter:
        return self._formatter

    def handle(self, record: Record) -> None:
        data = self._formatter.format(record)
        with self._lock:
            if self._text:
                self._stream.write(data.decode("utf-8"))
            else:
                self._stream.write(data)
            flush = getattr(self._stream, "flush", None)
            if flush is not None:
                flush()


class FileHandler(StreamHandler):
    """Appends formatted records to a file it owns"""

    def __init__(self, path: Union[str, Path], formatter: Optional[Formatter] = None):
        self._path = Path(path)
        try:
            directory = self._path.parent
            if str(directory) and not directory.exists():
                os.makedirs(directory, exist_ok=True)
            stream = open(self._path, "ab")
        except OSError as e:
            raise LogFileError(f"cannot open {self._path}: {e}", path=self._path, cause=e)
        super().__init__(stream, formatter)
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    def handle(self, record: Record) -> None:
        if self._closed:
            raise HandlerClosedError(self)
        super().handle(record)

    def close(self) -> None:
        with self._lock:
            if not self._closed:
                self._closed = True
                self._stream.close()
