# kvlog/utilities/timerotate.py

"""
Time based log rotation writer.

Rotates the active log file every ``interval_minutes`` minutes. The
completed file is renamed to ``<filename>.<YYYYmmddHHMM>``, named after the
start of the interval it covers, and a fresh active file is opened.
"""

import glob
import logging
import os
import re
import threading
import time
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Union

from ..core.constants import (
    ARCHIVE_SUFFIX_DIGITS,
    ARCHIVE_TIME_FORMAT,
    DEFAULT_FILE_MODE,
    SECONDS_PER_MINUTE,
)
from ..core.exceptions import LogFileError, RotationError

logger = logging.getLogger(__name__)


class TimeRotateWriter:
    """
    Byte sink that rotates its file on a fixed wall-clock interval.

    All writes go through one lock, so rotation happens at most once per
    boundary and lines from concurrent writers never interleave.

    Args:
        filename: Path of the active log file
        interval_minutes: Minutes between rotations
        max_backups: Archives to keep, 0 keeps all of them
        clock: Returns the current time as epoch seconds
    """

    def __init__(
        self,
        filename: Union[str, Path],
        interval_minutes: int,
        max_backups: int = 0,
        clock: Callable[[], float] = time.time
    ):
        if interval_minutes < 1:
            raise ValueError(f"interval_minutes must be >= 1, got {interval_minutes}")
        if max_backups < 0:
            raise ValueError(f"max_backups must be >= 0, got {max_backups}")

        self.filename = str(filename)
        self.interval_minutes = interval_minutes
        self.max_backups = max_backups
        self.interval_seconds = interval_minutes * SECONDS_PER_MINUTE
        self._clock = clock
        self._file: Optional[BinaryIO] = None
        self._lock = threading.Lock()
        self._archive_pattern = re.compile(
            re.escape(os.path.basename(self.filename)) + r"\.(\d{%d})$" % ARCHIVE_SUFFIX_DIGITS
        )

        self.rotate_at = self._next_rotate_time()
        try:
            self._open()
        except OSError as e:
            raise LogFileError(f"cannot open {self.filename}: {e}", path=self.filename, cause=e)

    @property
    def closed(self) -> bool:
        return self._file is None

    def write(self, data: Union[bytes, str]) -> int:
        """
        Append ``data`` to the active file, rotating first if due.

        Raises:
            LogFileError: the active file could not be opened
            RotationError: a rotation step failed; ``data`` was not written
        """
        if isinstance(data, str):
            data = data.encode("utf-8")

        with self._lock:
            try:
                self._open()
            except OSError as e:
                raise LogFileError(f"cannot open {self.filename}: {e}", path=self.filename, cause=e)

            if self._clock() >= self.rotate_at:
                self._rotate()

            try:
                written = self._file.write(data)
                self._file.flush()
            except OSError as e:
                raise LogFileError(f"write to {self.filename} failed: {e}", path=self.filename, cause=e)
            return written

    def flush(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()

    def close(self) -> None:
        with self._lock:
            self._close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def archive_path(self, interval_start: float) -> str:
        """Archive name for the interval that began at ``interval_start``."""
        return f"{self.filename}.{time.strftime(ARCHIVE_TIME_FORMAT, time.localtime(interval_start))}"

    def list_archives(self) -> List[str]:
        """Archives of this file, newest first."""
        found = []
        for path in glob.glob(glob.escape(self.filename) + ".*"):
            match = self._archive_pattern.match(os.path.basename(path))
            if match:
                found.append((match.group(1), path))
        found.sort(reverse=True)
        return [path for _, path in found]

    def _open(self) -> None:
        if self._file is None:
            fd = os.open(self.filename, os.O_CREAT | os.O_APPEND | os.O_WRONLY, DEFAULT_FILE_MODE)
            self._file = os.fdopen(fd, "ab")

    def _close(self) -> None:
        if self._file is not None:
            fd = self._file
            self._file = None
            fd.close()

    def _next_rotate_time(self) -> int:
        now = int(self._clock())
        return now - now % SECONDS_PER_MINUTE + self.interval_seconds

    def _rotate(self) -> None:
        try:
            self._close()
        except OSError as e:
            raise RotationError("close", path=self.filename, cause=e)

        dst_path = self.archive_path(self.rotate_at - self.interval_seconds)

        if os.path.exists(dst_path):
            try:
                os.remove(dst_path)
            except OSError as e:
                raise RotationError("remove", path=dst_path, cause=e)

        try:
            os.rename(self.filename, dst_path)
        except OSError as e:
            raise RotationError("rename", path=dst_path, cause=e)

        self.rotate_at = self._next_rotate_time()
        logger.info(f"Rotated {self.filename} to {dst_path}")

        if self.max_backups > 0:
            self._delete_expired()

        try:
            self._open()
        except OSError as e:
            raise RotationError("open", path=self.filename, cause=e)

    def _delete_expired(self) -> None:
        for path in self.list_archives()[self.max_backups:]:
            try:
                os.remove(path)
            except OSError as e:
                raise RotationError("prune", path=path, cause=e)
            logger.debug(f"Deleted expired archive {path}")
