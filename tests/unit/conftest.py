# tests/unit/conftest.py

"""Shared fixtures for kvlog unit tests."""

from datetime import datetime

import pytest

from kvlog.core.logger import Logger
from kvlog.core.record import Level, Record
from kvlog.handlers.base import Handler


class RecordingHandler(Handler):
    """Keeps every record it receives."""

    def __init__(self):
        self.records = []

    def handle(self, record):
        self.records.append(record)

    @property
    def last(self):
        return self.records[-1] if self.records else None


class FailingWriter:
    """Byte sink whose writes fail while ``fail`` is set."""

    def __init__(self, fail=False):
        self.fail = fail
        self.data = b""

    def write(self, data):
        if self.fail:
            raise OSError("fail")
        self.data += data
        return len(data)


@pytest.fixture
def recorder():
    """Create a recording handler."""
    return RecordingHandler()


@pytest.fixture
def recording_logger(recorder):
    """Create a logger whose records land in ``recorder``."""
    return Logger(handler=recorder)


@pytest.fixture
def make_record():
    """Build records with a fixed timestamp."""
    def _make(level=Level.INFO, msg="test", ctx=()):
        return Record(time=datetime(2024, 5, 1, 10, 20, 30).astimezone(), level=level, msg=msg, ctx=tuple(ctx))
    return _make


@pytest.fixture
def make_recorder():
    """Factory for additional recording handlers."""
    return RecordingHandler


@pytest.fixture
def failing_writer():
    """Create a byte sink that can be switched into failure mode."""
    return FailingWriter()
