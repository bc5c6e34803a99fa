# tests/unit/test_record.py

"""Unit tests for the record model.

Tests cover level ordering and parsing, context normalisation, lazy value
evaluation and record immutability.
"""

import dataclasses

import pytest

from kvlog.core.constants import BAD_LAZY_MESSAGE, ERROR_KEY, ODD_CONTEXT_MESSAGE
from kvlog.core.exceptions import InvalidLevelError, LazyResolutionError
from kvlog.core.record import Lazy, Level, normalize_context, resolve_lazy


class TestLevel:

    def test_levels_are_ordered_by_severity(self):
        assert Level.DEBUG < Level.INFO < Level.WARN < Level.ERROR < Level.CRIT

    def test_short_codes(self):
        assert [lvl.code for lvl in Level] == ["dbug", "info", "warn", "eror", "crit"]

    @pytest.mark.parametrize("name,expected", [
        ("debug", Level.DEBUG),
        ("dbug", Level.DEBUG),
        ("INFO", Level.INFO),
        ("warning", Level.WARN),
        ("eror", Level.ERROR),
        ("critical", Level.CRIT),
    ])
    def test_from_string(self, name, expected):
        assert Level.from_string(name) is expected

    def test_from_string_passes_levels_through(self):
        assert Level.from_string(Level.ERROR) is Level.ERROR

    def test_from_string_rejects_unknown_names(self):
        with pytest.raises(InvalidLevelError):
            Level.from_string("loud")


class TestNormalizeContext:

    def test_positional_pairs_kept_in_order(self):
        assert normalize_context(("a", 1, "a", 2)) == ["a", 1, "a", 2]

    def test_mapping_is_flattened(self):
        ctx = normalize_context(({"x": 1, "y": "foo", "z": None},))
        assert len(ctx) == 6
        assert dict(zip(ctx[::2], ctx[1::2])) == {"x": 1, "y": "foo", "z": None}

    def test_keyword_arguments_follow_positional(self):
        assert normalize_context(("a", 1), {"b": 2}) == ["a", 1, "b", 2]

    def test_odd_context_is_padded_and_flagged(self):
        ctx = normalize_context(("lonely",))
        assert ctx == ["lonely", None, ERROR_KEY, ODD_CONTEXT_MESSAGE]


class TestLazy:

    def test_evaluates_on_every_call(self):
        state = {"x": 1}
        lazy = Lazy(lambda: state["x"])
        assert lazy.evaluate() == 1
        state["x"] = 2
        assert lazy.evaluate() == 2

    def test_default_arguments_are_allowed(self):
        assert Lazy(lambda x=5: x).evaluate() == 5

    def test_non_callable_is_rejected(self):
        with pytest.raises(LazyResolutionError):
            Lazy(1).evaluate()

    def test_function_taking_arguments_is_rejected(self):
        with pytest.raises(LazyResolutionError):
            Lazy(lambda x: x).evaluate()

    def test_function_returning_nothing_is_rejected(self):
        def nothing() -> None:
            pass

        with pytest.raises(LazyResolutionError):
            Lazy(nothing).evaluate()

    def test_raising_function_is_rejected(self):
        def boom():
            raise RuntimeError("no value")

        with pytest.raises(LazyResolutionError) as exc_info:
            Lazy(boom).evaluate()
        assert "no value" in str(exc_info.value)


class TestResolveLazy:

    def test_lazy_values_replaced(self):
        ctx = resolve_lazy(["x", Lazy(lambda: 42), "y", "plain"])
        assert ctx == ["x", 42, "y", "plain"]

    def test_bad_lazy_appends_one_error_pair(self):
        ctx = resolve_lazy(["x", Lazy(1), "y", Lazy(lambda z: z)])
        assert len(ctx) == 6
        assert ctx[4:] == [ERROR_KEY, BAD_LAZY_MESSAGE]
        assert isinstance(ctx[1], str)

    def test_lazy_in_key_position_is_left_alone(self):
        key = Lazy(lambda: "k")
        assert resolve_lazy([key, 1]) == [key, 1]


class TestRecord:

    def test_with_context_returns_new_record(self, make_record):
        record = make_record(ctx=("a", 1))
        extended = record.with_context("b", 2)

        assert record.ctx == ("a", 1)
        assert extended.ctx == ("a", 1, "b", 2)
        assert extended.msg == record.msg
        assert extended.time == record.time

    def test_records_are_frozen(self, make_record):
        record = make_record()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.msg = "changed"

    def test_pairs_preserve_duplicates(self, make_record):
        record = make_record(ctx=("k", 1, "k", 2))
        assert record.pairs() == [("k", 1), ("k", 2)]
