# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the integer type and the bounded builtin integers."""

import pytest

from kryo.builtins import INTEGER, SINT8, SINT32, UINT8, UINT32
from kryo.core.errors import OutOfRangeError, WrongTypeError
from kryo.io.bson import BsonReader, BsonWriter
from kryo.io.json import JsonReader, JsonWriter
from kryo.io.qs import QsReader, QsWriter
from kryo.testing import IoCase, TestItem, check_item, item_id
from kryo.types.integer import MAX_SAFE_INTEGER, MIN_SAFE_INTEGER, IntegerType

# ###############
# Test Helpers
# ###############


def _io(value: int) -> list[IoCase]:
    """Round-trip cases of *value* in every format."""
    return [
        IoCase(JsonWriter(), JsonReader(), raw=value),
        IoCase(BsonWriter(), BsonReader(), raw=value),
        IoCase(QsWriter(), QsReader(), raw=str(value)),
    ]


# ###############
# Sint32
# ###############

SINT32_ITEMS = [
    TestItem(0, io=_io(0)),
    TestItem(1, io=_io(1)),
    TestItem(-1, io=_io(-1)),
    TestItem(2147483647, io=_io(2147483647)),
    TestItem(-2147483648, io=_io(-2147483648)),
    TestItem(2147483648, valid=False),
    TestItem(-2147483649, valid=False),
    TestItem(0.5, valid=False),
    TestItem(True, valid=False),
    TestItem("0", valid=False),
    TestItem(None, valid=False),
    TestItem(float("nan"), valid=False, name="nan"),
    TestItem(float("inf"), valid=False, name="inf"),
]


@pytest.mark.parametrize("item", SINT32_ITEMS, ids=item_id)
def test_sint32_items(item: TestItem) -> None:
    """Signed 32-bit integers accept exactly [-2**31, 2**31 - 1]."""
    check_item(SINT32, item)


def test_sint32_out_of_range_error() -> None:
    """The bound violation reports the value and both bounds."""
    error = SINT32.test_error(2147483648)
    assert isinstance(error, OutOfRangeError)
    assert (error.value, error.minimum, error.maximum) == (2147483648, -2147483648, 2147483647)


def test_sint32_read_rejects_out_of_range() -> None:
    """Decoding enforces the bounds too."""
    with pytest.raises(OutOfRangeError):
        SINT32.read(JsonReader(), 2147483648)


# ###############
# Bounds
# ###############


class TestBounds:
    @pytest.mark.parametrize(
        ("type_", "minimum", "maximum"),
        [
            (SINT8, -128, 127),
            (UINT8, 0, 255),
            (UINT32, 0, 4294967295),
            (INTEGER, MIN_SAFE_INTEGER, MAX_SAFE_INTEGER),
        ],
    )
    def test_builtin_bounds(self, type_: IntegerType, minimum: int, maximum: int) -> None:
        assert type_.test(minimum)
        assert type_.test(maximum)
        assert not type_.test(minimum - 1)
        assert not type_.test(maximum + 1)

    def test_empty_range_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            IntegerType(minimum=1, maximum=0)

    def test_booleans_are_not_integers(self) -> None:
        assert isinstance(INTEGER.test_error(True), WrongTypeError)

    def test_describe_omits_default_bounds(self) -> None:
        assert INTEGER.describe() == {"kind": "integer"}
        assert UINT8.describe() == {"kind": "integer", "minimum": 0, "maximum": 255}


# ###############
# Diffs
# ###############


class TestDiff:
    def test_diff_is_the_difference(self) -> None:
        assert INTEGER.diff(3, 10) == 7
        assert INTEGER.diff(3, 3) is None

    def test_chain(self) -> None:
        a, b, c = 5, -2, 40
        d1, d2 = INTEGER.diff(a, b), INTEGER.diff(b, c)
        assert INTEGER.patch(a, d1) == b
        assert INTEGER.patch(b, INTEGER.reverse_diff(d1)) == a
        assert INTEGER.squash(d1, d2) == INTEGER.diff(a, c)
        assert INTEGER.squash(d1, INTEGER.reverse_diff(d1)) is None
