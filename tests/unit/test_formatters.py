# tests/unit/test_formatters.py

"""Unit tests for the logfmt and JSON formatters."""

import io
import json
from datetime import datetime, timezone

import pytest

from kvlog.core.constants import ERROR_KEY
from kvlog.core.formatters import (
    FORMATTERS,
    FuncFormatter,
    JsonFormatter,
    LogfmtFormatter,
    format_logfmt_value,
)
from kvlog.core.logger import Logger
from kvlog.core.record import KeyNames, Level, Record
from kvlog.handlers.base import StreamHandler


# ============================================================================
# Logfmt
# ============================================================================

class TestLogfmtFormatter:

    def test_logfmt_line(self):
        buf = io.BytesIO()
        log = Logger(handler=StreamHandler(buf, LogfmtFormatter()))

        log.error("some message", "x", 1, "y", 3.2, "equals", "=", "quote", '"')

        line = buf.getvalue().decode("utf-8")
        assert line[27:] == 'lvl=eror msg="some message" x=1 y=3.200 equals="=" quote="\\""\n'
        assert line.startswith("t=")

    def test_time_field_width(self, make_record):
        line = LogfmtFormatter().format(make_record()).decode("utf-8")
        assert line[26] == " "
        assert line[27:].startswith("lvl=info")

    def test_duplicate_keys_all_printed(self, make_record):
        line = LogfmtFormatter().format(make_record(ctx=("k", 1, "k", 2))).decode("utf-8")
        assert line.rstrip("\n").endswith("k=1 k=2")

    def test_non_string_key_is_flagged(self, make_record):
        line = LogfmtFormatter().format(make_record(ctx=(5, "v"))).decode("utf-8")
        assert f"{ERROR_KEY}=5" in line

    def test_custom_key_names(self):
        record = Record(
            time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            level=Level.WARN,
            msg="hi",
            key_names=KeyNames(time="ts", lvl="level", msg="message"),
        )
        line = LogfmtFormatter().format(record).decode("utf-8")
        assert line == "ts=2024-01-01T00:00:00+0000 level=warn message=hi\n"

    @pytest.mark.parametrize("value,expected", [
        (None, "nil"),
        (True, "true"),
        (False, "false"),
        (7, "7"),
        (0.5, "0.500"),
        ("plain", "plain"),
        ("two words", '"two words"'),
        ("", '""'),
        ("tab\there", '"tab\\there"'),
        ("a\xa0b", '"a\xa0b"'),
        ("line\u2028sep", '"line\u2028sep"'),
        (Level.CRIT, "crit"),
    ])
    def test_value_rendering(self, value, expected):
        assert format_logfmt_value(value) == expected


# ============================================================================
# JSON
# ============================================================================

class TestJsonFormatter:

    def test_json_line(self):
        buf = io.BytesIO()
        log = Logger(handler=StreamHandler(buf, JsonFormatter()))

        log.error("some message", "x", 1, "y", 3.2)

        data = json.loads(buf.getvalue())
        assert data["x"] == 1
        assert data["y"] == 3.2
        assert data["lvl"] == "eror"
        assert data["msg"] == "some message"
        assert "t" in data

    def test_last_duplicate_wins(self, make_record):
        data = json.loads(JsonFormatter().format(make_record(ctx=("k", 1, "k", 2))))
        assert data["k"] == 2

    def test_one_object_per_line(self, make_record):
        out = JsonFormatter().format(make_record(ctx=("text", "line\nbreak")))
        assert out.count(b"\n") == 1
        assert json.loads(out)["text"] == "line\nbreak"

    def test_unserialisable_values(self, make_record):
        class Thing:
            def __str__(self):
                return "thing"

        when = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        err = ValueError("bad")
        data = json.loads(JsonFormatter().format(
            make_record(ctx=("obj", Thing(), "when", when, "err", err, "lvl2", Level.DEBUG))
        ))

        assert data["obj"] == "thing"
        assert data["when"].startswith("2024-05-01T10:00:00")
        assert data["err"] == "bad"
        assert data["lvl2"] == "dbug"

    def test_non_finite_floats_stay_valid_json(self, make_record):
        def reject(token):
            raise ValueError(f"non-standard JSON constant {token}")

        out = JsonFormatter().format(
            make_record(ctx=("nan", float("nan"), "inf", float("inf"), "ninf", float("-inf"), "ok", 1.5))
        )
        data = json.loads(out, parse_constant=reject)

        assert data["nan"] == "nan"
        assert data["inf"] == "inf"
        assert data["ninf"] == "-inf"
        assert data["ok"] == 1.5

    def test_non_string_key_is_flagged(self, make_record):
        data = json.loads(JsonFormatter().format(make_record(ctx=(3, "v"))))
        assert ERROR_KEY in data

    def test_non_ascii_kept(self, make_record):
        out = JsonFormatter().format(make_record(msg="héllo"))
        assert "héllo".encode("utf-8") in out


class TestFormatterRegistry:

    def test_registry(self):
        assert isinstance(FORMATTERS["logfmt"](), LogfmtFormatter)
        assert isinstance(FORMATTERS["json"](), JsonFormatter)

    def test_func_formatter(self, make_record):
        fmt = FuncFormatter(lambda r: r.msg.encode() + b"\n")
        assert fmt.format(make_record(msg="raw")) == b"raw\n"
