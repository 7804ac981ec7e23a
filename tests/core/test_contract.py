# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the shared type contract."""

import logging

import pytest

from kryo.builtins import INTEGER, STRING
from kryo.core.contract import Type, describe_ref, resolve_lazy
from kryo.core.errors import MaxLengthError
from kryo.io.json import JsonReader
from kryo.types.array import ArrayOptions, ArrayType
from kryo.types.string import StringType

# ###############
# Test Helpers
# ###############


class _CountingOptions:
    """Zero-argument producer counting its calls."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> ArrayOptions:
        self.calls += 1
        return ArrayOptions(item_type=INTEGER)


# ###############
# Contract
# ###############


class TestContract:
    def test_type_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            Type()  # type: ignore[abstract]

    def test_test_follows_test_error(self) -> None:
        assert STRING.test("abc")
        assert not STRING.test(1)

    def test_read_takes_trusted_path_for_trusted_readers(self) -> None:
        type_ = StringType(max_length=2)
        with pytest.raises(MaxLengthError):
            type_.read(JsonReader(), "abcd")
        assert type_.read(JsonReader(trust_input=True), "abcd") == "abcd"

    def test_default_describe_names_the_kind(self) -> None:
        assert STRING.describe() == {"kind": "string"}


# ###############
# Lazy Options
# ###############


class TestLazyOptions:
    def test_plain_options_are_returned_as_is(self) -> None:
        options = ArrayOptions(item_type=INTEGER)
        assert resolve_lazy(options, "array") is options

    def test_callable_options_are_resolved_once(self) -> None:
        producer = _CountingOptions()
        type_ = ArrayType(producer)
        assert producer.calls == 0
        assert type_.test([1, 2])
        assert type_.test([3])
        assert producer.calls == 1

    def test_resolution_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="kryo.core.contract"):
            ArrayType(_CountingOptions()).test([])
        assert "Resolving lazy options of array" in caplog.text


# ###############
# Descriptors
# ###############


def test_describe_ref_prefers_names() -> None:
    """A named child is referenced by name, other children are described inline."""
    names = {INTEGER: "integer"}
    assert describe_ref(INTEGER, names) == "integer"
    assert describe_ref(STRING, names) == {"kind": "string"}
    assert describe_ref(STRING, None) == {"kind": "string"}
