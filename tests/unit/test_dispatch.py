"""Unit tests for container rules and the dispatcher."""

from __future__ import annotations

from collections import namedtuple
from dataclasses import dataclass
from types import SimpleNamespace

import numpy as np
import pandas as pd
import pytest

from filterguard import (
    UNDETERMINED,
    NestingDepthError,
    SanitizationError,
    sanitize_auto,
    sanitize_frame,
    sanitize_record,
    sanitize_sequence,
)
from filterguard.settings import MAX_DEPTH_CEILING


@dataclass(frozen=True)
class Signup:
    email: str
    age: str
    terms: str = "false"


Pair = namedtuple("Pair", ["left", "right"])


def _nested(depth: int, leaf: object = "<b>x</b>") -> object:
    value = leaf
    for _ in range(depth):
        value = [value]
    return value


class TestSanitizeAuto:
    """Tests for classification-driven dispatch."""

    @pytest.mark.parametrize(
        ("dirty", "expected"),
        [
            ("7226", 7226),
            (" 7226 ", 7226),
            ("7226.99", 7226.99),
            ("true", True),
            ("false", False),
            ("<b>HACK</b>", "HACK"),
            ("10.xyz", "10.xyz"),
            ("-5", "-5"),
            (7, 7),
            (2.5, 2.5),
            (False, False),
        ],
    )
    def test_scalars(self, dirty: object, expected: object) -> None:
        """Test strings that spell numbers or booleans are converted."""
        result = sanitize_auto(dirty)
        assert result == expected
        assert type(result) is type(expected)

    def test_markup_around_literal(self) -> None:
        """Test a literal hidden in markup is converted after cleaning."""
        assert sanitize_auto("<b>7</b>") == 7
        assert sanitize_auto("<i>true</i>") is True
        assert sanitize_auto(" <span>1.25</span> ") == 1.25

    @pytest.mark.parametrize("value", [None, UNDETERMINED, np.array(5)])
    def test_passthrough(self, value: object) -> None:
        """Test values without a rule are returned unchanged."""
        assert sanitize_auto(value) is value

    def test_bytes_are_text(self) -> None:
        """Test raw bytes are decoded with the requested encoding and cleaned."""
        assert sanitize_auto(b"<script>alert('x')</script>") == "alert(&#039;x&#039;)"
        assert sanitize_auto(bytearray(b"<b>42</b>")) == 42
        assert sanitize_auto({"name": b"Jos\xe9"}, encoding="latin-1") == {"name": "José"}

    def test_passthrough_object(self) -> None:
        marker = object()
        assert sanitize_auto(marker) is marker

    def test_mixed_record(self) -> None:
        """Test a record of string-encoded values is converted element-wise."""
        result = sanitize_auto({"int": "7335", "float": "67.09", "bool": "true"})
        assert result == {"int": 7335, "float": 67.09, "bool": True}
        assert type(result["int"]) is int
        assert type(result["float"]) is float

    def test_dirty_record(self, dirty_record: dict[str, object]) -> None:
        """Test record values are cleaned and key order is kept."""
        result = sanitize_auto(dirty_record)
        assert result == {"key": "ATTACK", "xss": "alert(&#039;XSS&#039;)"}
        assert list(result) == ["key", "xss"]

    def test_form_payload(self, form_payload: dict[str, object]) -> None:
        """Test a nested request payload keeps its shape."""
        result = sanitize_auto(form_payload)
        assert result == {
            "user": {"name": "Ann O&#039;Neil", "age": 42, "admin": False},
            "cart": [
                {"sku": "A-17", "qty": 3, "price": 19.99},
                {"sku": "B-02", "qty": 1, "price": 5.0},
            ],
            "coupon": None,
            "newsletter": True,
        }

    def test_does_not_mutate_input(self, form_payload: dict[str, object]) -> None:
        snapshot = repr(form_payload)
        sanitize_auto(form_payload)
        assert repr(form_payload) == snapshot

    @pytest.mark.parametrize(
        "dirty",
        [
            "<b>7</b>",
            "  it's <b>bold</b> & \\raw\\ ",
            {"a": ["1", "2.5", "true", "maybe", None], "b": ("x", {"c": "<i>0</i>"})},
            [[["deep"]], "63.73", float("nan")],
        ],
    )
    def test_idempotent(self, dirty: object) -> None:
        """Test sanitizing twice equals sanitizing once."""
        once = sanitize_auto(dirty)
        assert sanitize_auto(once) == once


class TestSanitizeSequence:
    """Tests for ordered containers."""

    def test_preserves_order_and_length(self) -> None:
        result = sanitize_sequence(["3", "<b>b</b>", "2.0", "true", None])
        assert result == [3, "b", 2.0, True, None]

    def test_tuple_types_kept(self) -> None:
        """Test tuples and named tuples keep their type."""
        assert sanitize_sequence(("1", "x")) == (1, "x")
        result = sanitize_sequence(Pair("<b>l</b>", "9"))
        assert isinstance(result, Pair)
        assert result == Pair("l", 9)

    def test_ndarray_becomes_list(self) -> None:
        result = sanitize_sequence(np.array([["1", "<b>x</b>"], ["2.5", "false"]]))
        assert result == [[1, "x"], [2.5, False]]

    def test_non_sequence_is_dispatched(self) -> None:
        assert sanitize_sequence("<b>5</b>") == 5
        assert sanitize_sequence({"a": "1"}) == {"a": 1}

    def test_empty(self) -> None:
        assert sanitize_sequence([]) == []
        assert sanitize_sequence(()) == ()


class TestSanitizeRecord:
    """Tests for key-value containers."""

    def test_keys_untouched(self) -> None:
        """Test keys are neither sanitized nor reordered."""
        result = sanitize_record({"<b>k</b>": "<b>v</b>", 1: "2", "z": "a"})
        assert list(result) == ["<b>k</b>", 1, "z"]
        assert result == {"<b>k</b>": "v", 1: 2, "z": "a"}

    def test_dataclass_copy(self) -> None:
        """Test dataclass instances are copied with sanitized fields."""
        dirty = Signup(email=" <b>ann@example.com</b> ", age="31")
        result = sanitize_record(dirty)
        assert result == Signup(email="ann@example.com", age=31, terms=False)
        assert dirty.age == "31"

    def test_namespace(self) -> None:
        result = sanitize_record(SimpleNamespace(a="1", b="<i>x</i>"))
        assert isinstance(result, SimpleNamespace)
        assert vars(result) == {"a": 1, "b": "x"}

    def test_non_record_is_dispatched(self) -> None:
        assert sanitize_record(["1"]) == [1]
        assert sanitize_record(None) is None


class TestSanitizeFrame:
    """Tests for pandas frames."""

    def test_dataframe(self, sample_frame: pd.DataFrame) -> None:
        result = sanitize_frame(sample_frame)
        assert list(result.index) == ["r1", "r2", "r3"]
        assert list(result.columns) == ["qty", "price", "note"]
        assert result["qty"].tolist() == [7, 8, 9]
        assert result["price"].tolist() == [1.5, 2.25, "10.xyz"]
        assert result["note"].tolist() == ["ok", "fine", "a &lt; b"]
        assert sample_frame.loc["r1", "qty"] == "7"

    def test_series(self) -> None:
        series = pd.Series(["1", "<b>x</b>"], index=["a", "b"], name="col")
        result = sanitize_frame(series)
        assert result.name == "col"
        assert result.to_dict() == {"a": 1, "b": "x"}

    def test_dispatched_from_auto(self, sample_frame: pd.DataFrame) -> None:
        result = sanitize_auto({"table": sample_frame})
        assert result["table"]["qty"].tolist() == [7, 8, 9]

    def test_empty_frame(self) -> None:
        result = sanitize_frame(pd.DataFrame())
        assert result.empty

    def test_idempotent(self, sample_frame: pd.DataFrame) -> None:
        once = sanitize_frame(sample_frame)
        pd.testing.assert_frame_equal(sanitize_frame(once), once)


class TestNestingDepth:
    """Tests for the recursion guard."""

    def test_moderate_nesting(self) -> None:
        """Test tens of levels are handled with the default limit."""
        result = sanitize_auto(_nested(60))
        for _ in range(60):
            assert isinstance(result, list) and len(result) == 1
            result = result[0]
        assert result == "x"

    def test_limit_is_inclusive(self) -> None:
        assert sanitize_auto(_nested(3), max_depth=3) == _nested(3, "x")
        with pytest.raises(NestingDepthError):
            sanitize_auto(_nested(4), max_depth=3)

    def test_default_limit(self) -> None:
        with pytest.raises(NestingDepthError) as excinfo:
            sanitize_auto(_nested(150))
        assert excinfo.value.max_depth == 100
        assert excinfo.value.code == "NESTING_TOO_DEEP"

    def test_explicit_limit_is_capped(self) -> None:
        """Test a huge explicit limit still fails with NestingDepthError, not a stack overflow."""
        with pytest.raises(NestingDepthError) as excinfo:
            sanitize_auto(_nested(5000), max_depth=10**6)
        assert excinfo.value.max_depth == MAX_DEPTH_CEILING

        deep_record: dict[str, object] = {"leaf": "1"}
        for _ in range(3000):
            deep_record = {"child": deep_record}
        with pytest.raises(NestingDepthError):
            sanitize_record(deep_record, max_depth=10**6)

    def test_cyclic_input(self) -> None:
        """Test self-referencing containers fail fast."""
        loop: list[object] = ["1"]
        loop.append(loop)
        with pytest.raises(NestingDepthError):
            sanitize_sequence(loop, max_depth=10)

    def test_error_taxonomy(self) -> None:
        with pytest.raises(RecursionError):
            sanitize_record({"a": {"b": {"c": 1}}}, max_depth=2)
        with pytest.raises(SanitizationError):
            sanitize_sequence([[1]], max_depth=1)

    def test_setting_controls_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from filterguard import reset_settings_cache

        monkeypatch.setenv("FILTERGUARD_MAX_DEPTH", "2")
        reset_settings_cache()
        assert sanitize_auto([["1"]]) == [[1]]
        with pytest.raises(NestingDepthError):
            sanitize_auto([[["1"]]])
        assert sanitize_auto([[["1"]]], max_depth=5) == [[[1]]]
