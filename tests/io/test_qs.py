# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the query-string reader and writer."""

from datetime import datetime, timezone

import pytest

from kryo.builtins import BOOLEAN, DATE, INTEGER, STRING
from kryo.core.errors import UnsupportedFormatError, WrongTypeError
from kryo.io.qs import QsReader, QsWriter
from kryo.types.array import ArrayType
from kryo.types.map import MapType

# ###############
# Scalars
# ###############


class TestScalars:
    @pytest.mark.parametrize(("value", "raw"), [(True, "true"), (False, "false")])
    def test_booleans_are_words(self, value: bool, raw: str) -> None:
        assert BOOLEAN.write(QsWriter(), value) == raw
        assert BOOLEAN.read(QsReader(), raw) is value

    @pytest.mark.parametrize(("value", "raw"), [(0, "0"), (-12, "-12"), (2147483647, "2147483647")])
    def test_integers_are_decimal_text(self, value: int, raw: str) -> None:
        assert INTEGER.write(QsWriter(), value) == raw
        assert INTEGER.read(QsReader(), raw) == value

    @pytest.mark.parametrize("raw", ["", "01", "1.0", "+1", "1e3", "one", 1])
    def test_integer_rejects(self, raw: object) -> None:
        with pytest.raises(WrongTypeError):
            INTEGER.read(QsReader(), raw)

    @pytest.mark.parametrize("raw", ["True", "1", "", True])
    def test_boolean_rejects(self, raw: object) -> None:
        with pytest.raises(WrongTypeError):
            BOOLEAN.read(QsReader(), raw)

    def test_dates_are_iso_text(self) -> None:
        epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert DATE.write(QsWriter(), epoch) == "1970-01-01T00:00:00.000Z"
        assert DATE.read(QsReader(), "1970-01-01T00:00:00.000Z") == epoch


# ###############
# Structures
# ###############


class TestStructures:
    def test_arrays_of_integers(self) -> None:
        type_ = ArrayType(item_type=INTEGER)
        assert type_.write(QsWriter(), [1, 2]) == ["1", "2"]
        assert type_.read(QsReader(), ["1", "2"]) == [1, 2]

    def test_map_keys_are_used_verbatim(self) -> None:
        type_ = MapType(key_type=STRING, value_type=INTEGER)
        assert type_.write(QsWriter(), {"a": 1}) == {"a": "1"}
        assert type_.read(QsReader(), {"a": "1"}) == {"a": 1}

    def test_integer_map_keys_are_decimal_text(self) -> None:
        type_ = MapType(key_type=INTEGER, value_type=STRING)
        assert type_.write(QsWriter(), {7: "x"}) == {"7": "x"}
        assert type_.read(QsReader(), {"7": "x"}) == {7: "x"}

    def test_non_string_map_keys_are_unsupported(self) -> None:
        type_ = MapType(key_type=ArrayType(item_type=STRING), value_type=INTEGER)
        with pytest.raises(UnsupportedFormatError):
            type_.write(QsWriter(), {("a",): 1})  # type: ignore[dict-item]
