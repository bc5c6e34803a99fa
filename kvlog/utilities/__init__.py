# kvlog/utilities/__init__.py

"""Utilities package providing byte sinks used underneath stream handlers."""

from .timerotate import TimeRotateWriter
