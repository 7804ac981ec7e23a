# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the simple enum type."""

from enum import Enum

import pytest

from kryo.core.case_style import CaseStyle
from kryo.core.errors import DuplicateWireNameError, UnknownVariantError, WrongTypeError
from kryo.io.bson import BsonReader, BsonWriter
from kryo.io.json import JsonReader, JsonWriter
from kryo.io.qs import QsReader, QsWriter
from kryo.testing import IoCase, TestItem, check_item, check_read_errors, item_id
from kryo.types.simple_enum import SimpleEnumType

# ###############
# Test Helpers
# ###############


class Color(Enum):
    Red = 0
    Green = 1
    Blue = 2


class Node(Enum):
    Expression = 0
    BinaryOperator = 1
    BlockStatement = 2


def _io(raw: str) -> list[IoCase]:
    """Round-trip cases for the wire name *raw* in every format."""
    return [
        IoCase(JsonWriter(), JsonReader(), raw=raw),
        IoCase(BsonWriter(), BsonReader(), raw=raw),
        IoCase(QsWriter(), QsReader(), raw=raw),
    ]


COLOR = SimpleEnumType(Color)
NODE = SimpleEnumType(Node, rename=CaseStyle.KEBAB_CASE)


# ###############
# Plain Names
# ###############

COLOR_ITEMS = [
    TestItem(Color.Red, io=_io("Red")),
    TestItem(Color.Green, io=_io("Green")),
    TestItem(Color.Blue, io=_io("Blue")),
    TestItem(0, valid=False),
    TestItem("Red", valid=False),
    TestItem(Node.Expression, valid=False),
    TestItem(None, valid=False),
]


@pytest.mark.parametrize("item", COLOR_ITEMS, ids=item_id)
def test_color_items(item: TestItem) -> None:
    """Members are encoded by name."""
    check_item(COLOR, item)


# ###############
# Renamed
# ###############

NODE_ITEMS = [
    TestItem(Node.Expression, io=_io("expression")),
    TestItem(Node.BinaryOperator, io=_io("binary-operator")),
    TestItem(Node.BlockStatement, io=_io("block-statement")),
]


@pytest.mark.parametrize("item", NODE_ITEMS, ids=item_id)
def test_node_items(item: TestItem) -> None:
    """Renamed members are encoded in kebab case."""
    check_item(NODE, item)


def test_kebab_case_block_statement() -> None:
    """BlockStatement travels as block-statement, both ways."""
    assert NODE.write(JsonWriter(), Node.BlockStatement) == "block-statement"
    assert NODE.read(JsonReader(), "block-statement") is Node.BlockStatement


def test_unknown_names_fail() -> None:
    """Original names, unknown names and non-strings are rejected."""
    check_read_errors(JsonReader(), NODE, ["BlockStatement", "block_statement", "", 2, None])
    with pytest.raises(UnknownVariantError):
        NODE.read(JsonReader(), "statement")
    with pytest.raises(WrongTypeError):
        NODE.read(JsonReader(), 0)


def test_wire_name_tables() -> None:
    """Both lookup tables are exposed."""
    assert NODE.member_to_wire_name[Node.BinaryOperator] == "binary-operator"
    assert NODE.wire_name_to_member["binary-operator"] is Node.BinaryOperator


def test_colliding_wire_names_are_rejected() -> None:
    """Members whose renamed names coincide cannot be told apart on the wire."""
    legacy = Enum("Legacy", ["FooBar", "FOO_BAR"])
    assert SimpleEnumType(legacy).read(JsonReader(), "FOO_BAR") is legacy.FOO_BAR
    with pytest.raises(DuplicateWireNameError) as exc_info:
        SimpleEnumType(legacy, rename=CaseStyle.KEBAB_CASE)
    assert exc_info.value.wire_name == "foo-bar"
    assert exc_info.value.keys == ["FooBar", "FOO_BAR"]


# ###############
# Diffs
# ###############


class TestDiff:
    def test_diff_is_ordinal_delta(self) -> None:
        assert COLOR.diff(Color.Red, Color.Blue) == 2
        assert COLOR.diff(Color.Blue, Color.Green) == -1
        assert COLOR.diff(Color.Green, Color.Green) is None

    def test_chain(self) -> None:
        d1, d2 = COLOR.diff(Color.Green, Color.Blue), COLOR.diff(Color.Blue, Color.Red)
        assert COLOR.patch(Color.Green, d1) is Color.Blue
        assert COLOR.patch(Color.Blue, COLOR.reverse_diff(d1)) is Color.Green
        assert COLOR.squash(d1, d2) == COLOR.diff(Color.Green, Color.Red)

    @pytest.mark.parametrize(("start", "diff"), [(Color.Red, -1), (Color.Blue, 1), (Color.Green, 5)])
    def test_patch_out_of_range(self, start: Color, diff: int) -> None:
        """Patching past either end of the enumeration is an error, not a wrap-around."""
        with pytest.raises(UnknownVariantError):
            COLOR.patch(start, diff)

    def test_describe(self) -> None:
        assert NODE.describe() == {
            "kind": "simple-enum",
            "values": ["Expression", "BinaryOperator", "BlockStatement"],
            "rename": "kebab-case",
        }
