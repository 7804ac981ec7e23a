# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the record type."""

import itertools
from datetime import datetime, timezone

import pytest

from kryo.builtins import DATE, INTEGER, SINT32, STRING
from kryo.core.case_style import CaseStyle
from kryo.core.errors import (
    DuplicateWireNameError,
    ExtraKeysError,
    ForbiddenNullError,
    IncompatibleDiffError,
    MaxDepthError,
    MissingKeysError,
    PropertiesTestError,
    WrongTypeError,
)
from kryo.io.bson import BsonReader, BsonWriter
from kryo.io.json import JsonReader, JsonWriter, dumps
from kryo.io.qs import QsReader, QsWriter
from kryo.testing import IoCase, TestItem, check_item, item_id
from kryo.types.array import ArrayType
from kryo.types.record import DocumentType, PropertyDescriptor, RecordOptions, RecordType

# ###############
# Test Helpers
# ###############

EVENT = RecordType(
    properties={
        "name": PropertyDescriptor(STRING),
        "at": PropertyDescriptor(DATE),
        "attendees": PropertyDescriptor(SINT32, optional=True),
    }
)

STRICT = RecordType(
    properties={
        "a": PropertyDescriptor(INTEGER),
        "b": PropertyDescriptor(INTEGER, optional=True),
    },
    no_extra_keys=True,
)

_AT = datetime(2020, 1, 2, 3, 4, 5, 6000, tzinfo=timezone.utc)
_AT_ISO = "2020-01-02T03:04:05.006Z"


def _check_chain(type_: RecordType, a: dict, b: dict, c: dict) -> None:
    """Check the diff invariants over the value chain a -> b -> c."""
    d1, d2 = type_.diff(a, b), type_.diff(b, c)
    assert type_.equals(type_.patch(a, d1), b)
    assert type_.equals(type_.patch(b, type_.reverse_diff(d1)), a)
    squashed = type_.squash(d1, d2)
    assert type_.equals(type_.patch(a, squashed), c)
    assert squashed == type_.diff(a, c)


# ###############
# Items
# ###############

ITEMS = [
    TestItem(
        {"name": "launch", "at": _AT},
        name="without optional",
        io=[
            IoCase(JsonWriter(), JsonReader(), raw={"name": "launch", "at": _AT_ISO}),
            IoCase(BsonWriter(), BsonReader(), raw={"name": "launch", "at": _AT}),
            IoCase(QsWriter(), QsReader(), raw={"name": "launch", "at": _AT_ISO}),
        ],
    ),
    TestItem(
        {"name": "launch", "at": _AT, "attendees": 3},
        name="with optional",
        io=[
            IoCase(JsonWriter(), JsonReader(), raw={"name": "launch", "at": _AT_ISO, "attendees": 3}),
            IoCase(QsWriter(), QsReader(), raw={"name": "launch", "at": _AT_ISO, "attendees": "3"}),
        ],
    ),
    TestItem(
        {"name": "launch", "at": _AT, "attendees": None},
        name="optional null",
        io=[IoCase(JsonWriter(), JsonReader(), raw={"name": "launch", "at": _AT_ISO})],
    ),
    TestItem({"name": "launch", "at": _AT, "other": 1}, name="extra key allowed"),
    TestItem({"name": "launch"}, valid=False, name="missing"),
    TestItem({"name": None, "at": _AT}, valid=False, name="forbidden null"),
    TestItem({"name": 1, "at": _AT}, valid=False, name="wrong property"),
    TestItem([], valid=False),
    TestItem(None, valid=False),
]


@pytest.mark.parametrize("item", ITEMS, ids=item_id)
def test_items(item: TestItem) -> None:
    """Records hold every required property with a valid value."""
    check_item(EVENT, item)


# ###############
# Errors
# ###############


class TestErrors:
    def test_one_extra_key(self) -> None:
        error = STRICT.test_error({"a": 1, "foo": 2})
        assert isinstance(error, ExtraKeysError)
        assert error.keys == ["foo"]

    def test_two_extra_keys(self) -> None:
        error = STRICT.test_error({"a": 1, "foo": 2, "bar": 3})
        assert isinstance(error, ExtraKeysError)
        assert error.keys == ["foo", "bar"]

    def test_forbidden_null(self) -> None:
        error = STRICT.test_error({"a": None})
        assert isinstance(error, ForbiddenNullError)
        assert error.key == "a"

    def test_optional_accepts_null_or_absence(self) -> None:
        assert STRICT.test({"a": 1, "b": None})
        assert STRICT.test({"a": 1})

    def test_missing_keys(self) -> None:
        error = EVENT.test_error({})
        assert isinstance(error, MissingKeysError)
        assert error.keys == ["name", "at"]

    def test_property_errors_are_aggregated(self) -> None:
        error = EVENT.test_error({"name": 1, "at": "now", "attendees": 2**31})
        assert isinstance(error, PropertiesTestError)
        assert set(error.errors) == {"name", "at", "attendees"}

    def test_extra_keys_come_first(self) -> None:
        assert isinstance(STRICT.test_error({"a": None, "foo": 1}), ExtraKeysError)

    def test_not_a_dict(self) -> None:
        assert isinstance(STRICT.test_error([("a", 1)]), WrongTypeError)


# ###############
# Reading
# ###############


class TestRead:
    def test_missing_property(self) -> None:
        with pytest.raises(MissingKeysError) as exc_info:
            EVENT.read(JsonReader(), {"name": "x"})
        assert exc_info.value.keys == ["at"]

    def test_null_property(self) -> None:
        with pytest.raises(PropertiesTestError) as exc_info:
            EVENT.read(JsonReader(), {"name": None, "at": "2020-01-01T00:00:00Z"})
        assert isinstance(exc_info.value.errors["name"], ForbiddenNullError)

    def test_undeclared_wire_keys_are_ignored(self) -> None:
        value = STRICT.read(JsonReader(), {"a": 1, "zzz": 2})
        assert value == {"a": 1}

    def test_property_errors_are_aggregated(self) -> None:
        with pytest.raises(PropertiesTestError) as exc_info:
            EVENT.read(JsonReader(), {"name": 1, "at": True})
        assert set(exc_info.value.errors) == {"name", "at"}

    def test_trusted_read(self) -> None:
        raw = {"name": "x", "at": "2020-01-01T00:00:00.000Z", "attendees": 2**40}
        value = EVENT.read(JsonReader(trust_input=True), raw)
        assert value["attendees"] == 2**40


# ###############
# Wire Names
# ###############


class TestWireNames:
    RECT = RecordType(
        properties={
            "x_min": PropertyDescriptor(INTEGER),
            "x_max": PropertyDescriptor(INTEGER, change_case=CaseStyle.SCREAMING_SNAKE_CASE),
            "y_min": PropertyDescriptor(INTEGER, rename="__yMin"),
            "y_max": PropertyDescriptor(INTEGER),
        },
        rename={"x_min": "xmin"},
        change_case=CaseStyle.KEBAB_CASE,
    )

    def test_rename_precedence(self) -> None:
        value = {"x_min": 0, "x_max": 10, "y_min": 20, "y_max": 30}
        raw = {"xmin": 0, "X_MAX": 10, "__yMin": 20, "y-max": 30}
        check_item(self.RECT, TestItem(value, io=[IoCase(JsonWriter(), JsonReader(), raw=raw)]))
        assert dumps(self.RECT, value) == '{"xmin":0,"X_MAX":10,"__yMin":20,"y-max":30}'

    def test_wire_name_lookup(self) -> None:
        assert self.RECT.wire_name("y_max") == "y-max"

    def test_duplicate_wire_names_are_rejected(self) -> None:
        with pytest.raises(DuplicateWireNameError) as exc_info:
            RecordType(
                properties={
                    "a": PropertyDescriptor(INTEGER),
                    "b": PropertyDescriptor(INTEGER, rename="a"),
                }
            )
        assert exc_info.value.keys == ["a", "b"]


# ###############
# Equality
# ###############


class TestEquals:
    def test_equal_records(self) -> None:
        assert EVENT.equals({"name": "a", "at": _AT}, {"name": "a", "at": _AT, "attendees": None})

    def test_different_values(self) -> None:
        assert not EVENT.equals({"name": "a", "at": _AT}, {"name": "b", "at": _AT})

    def test_different_keys_raise(self) -> None:
        with pytest.raises(ExtraKeysError):
            EVENT.equals({"name": "a", "at": _AT, "attendees": 1}, {"name": "a", "at": _AT})
        with pytest.raises(MissingKeysError):
            EVENT.equals({"name": "a", "at": _AT}, {"name": "a", "at": _AT, "attendees": 1})

    def test_different_keys_lenient(self) -> None:
        assert not EVENT.equals({"name": "a", "at": _AT, "attendees": 1}, {"name": "a", "at": _AT}, lenient=True)


# ###############
# Diffs
# ###############

_CHAIN_VALUES = [
    {"a": 1},
    {"a": 2},
    {"a": 1, "b": 5},
    {"a": 3, "b": 6},
]


class TestDiff:
    def test_diff_sections(self) -> None:
        assert STRICT.diff({"a": 1}, {"a": 4, "b": 2}) == {"set": {"b": 2}, "update": {"a": 3}}
        assert STRICT.diff({"a": 1, "b": 2}, {"a": 1}) == {"unset": {"b": 2}}
        assert STRICT.diff({"a": 1, "b": None}, {"a": 1}) is None

    def test_reverse_swaps_set_and_unset(self) -> None:
        assert STRICT.reverse_diff({"set": {"b": 2}, "update": {"a": 3}}) == {"unset": {"b": 2}, "update": {"a": -3}}

    @pytest.mark.parametrize(("a", "b", "c"), list(itertools.product(_CHAIN_VALUES, repeat=3)))
    def test_chains(self, a: dict, b: dict, c: dict) -> None:
        _check_chain(STRICT, a, b, c)

    def test_patch_does_not_mutate(self) -> None:
        old = {"a": 1, "b": 2}
        STRICT.patch(old, {"unset": {"b": 2}, "update": {"a": 1}})
        assert old == {"a": 1, "b": 2}

    def test_nested_chain(self) -> None:
        type_ = RecordType(properties={"tags": PropertyDescriptor(ArrayType(item_type=STRING), optional=True)})
        _check_chain(type_, {"tags": ["a"]}, {}, {"tags": ["a", "b"]})

    def test_squash_rejects_diffs_that_do_not_follow_each_other(self) -> None:
        """Setting a property twice in a row cannot be squashed."""
        d1 = STRICT.diff({"a": 1}, {"a": 1, "b": 2})
        d2 = STRICT.diff({"a": 1}, {"a": 1, "b": 3})
        with pytest.raises(IncompatibleDiffError) as exc_info:
            STRICT.squash(d1, d2)
        assert (exc_info.value.first, exc_info.value.second, exc_info.value.key) == ("set", "set", "b")


# ###############
# Update Queries
# ###############


def test_update_query() -> None:
    """Diffs become $set/$unset partial updates keyed by wire name."""
    type_ = RecordType(
        properties={
            "display_name": PropertyDescriptor(STRING),
            "nick_name": PropertyDescriptor(STRING, optional=True),
            "created_at": PropertyDescriptor(DATE, optional=True),
        },
        change_case=CaseStyle.CAMEL_CASE,
    )
    old = {"display_name": "a", "nick_name": "n"}
    new = {"display_name": "b", "created_at": _AT}
    query = type_.to_update_query(new, type_.diff(old, new), BsonWriter())
    assert query == {
        "$set": {"displayName": "b", "createdAt": _AT},
        "$unset": {"nickName": True},
    }
    assert type_.to_update_query(new, None, BsonWriter()) == {"$set": {}, "$unset": {}}


# ###############
# Options
# ###############


class TestOptions:
    def test_document_type_alias(self) -> None:
        assert DocumentType is RecordType

    def test_lazy_options(self) -> None:
        type_ = RecordType(lambda: RecordOptions(properties={"a": PropertyDescriptor(INTEGER)}))
        assert repr(type_) == "RecordType(<lazy>)"
        assert type_.test({"a": 1})
        assert repr(type_) == "RecordType(properties=['a'])"

    def test_properties_are_required(self) -> None:
        with pytest.raises(TypeError):
            RecordType()

    def test_describe(self) -> None:
        assert STRICT.describe() == {
            "kind": "record",
            "properties": {
                "a": {"type": {"kind": "integer"}},
                "b": {"type": {"kind": "integer"}, "optional": True},
            },
            "no-extra-keys": True,
        }


# ###############
# Recursion
# ###############

LINK = RecordType(lambda: RecordOptions(properties={"next": PropertyDescriptor(LINK, optional=True)}))


def _chain(length: int) -> dict:
    value: dict = {}
    for _ in range(length - 1):
        value = {"next": value}
    return value


def test_recursive_record_depth_matches_readers() -> None:
    """Chains are valid exactly as deep as a reader accepts them."""
    assert LINK.test(_chain(64))
    assert LINK.read(JsonReader(), _chain(64)) == _chain(64)
    assert isinstance(LINK.test_error(_chain(65)), MaxDepthError)
    with pytest.raises(MaxDepthError):
        LINK.read(JsonReader(), _chain(65))


def test_self_referencing_record_is_an_error() -> None:
    """A record referencing itself fails validation without raising."""
    value: dict = {}
    value["next"] = value
    assert isinstance(LINK.test_error(value), MaxDepthError)
