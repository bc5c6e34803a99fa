# tests/unit/__init__.py

"""Unit tests package for kvlog, organised by component."""
