# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Assertion helpers for testing kryo types against sample values.

Typical use with pytest::

    ITEMS = [
        TestItem(0, io=[IoCase(JsonWriter(), JsonReader(), raw=0)]),
        TestItem(2**31, valid=False),
    ]

    @pytest.mark.parametrize("item", ITEMS, ids=item_id)
    def test_sint32(item: TestItem) -> None:
        check_item(SINT32, item)
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Final

from kryo.core.contract import Type
from kryo.core.errors import KryoError
from kryo.io.interfaces import Reader, Writer

# ###############
# Public Interface
# ###############


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()
"""Marks an :class:`IoCase` without an expected raw value."""


@dataclass(frozen=True)
class IoCase:
    """A format to round-trip a value through.

    Attributes:
        writer: Writer encoding the value.
        reader: Reader decoding it back.
        raw: Expected encoded value, if it should be checked.
    """

    writer: Writer
    reader: Reader
    raw: Any = UNSET


@dataclass(frozen=True)
class TestItem:
    """A sample value and what is expected of it."""

    __test__ = False

    value: Any
    valid: bool = True
    name: str | None = None
    io: list[IoCase] = field(default_factory=list)


def item_id(item: TestItem) -> str:
    """Return a readable pytest id for *item*."""
    return item.name if item.name is not None else repr(item.value)


def check_valid(type_: Type[Any, Any], item: TestItem) -> None:
    """Assert that *item* passes the checks of *type_*."""
    error = type_.test_error(item.value)
    assert error is None, f"{item_id(item)} should be valid for {type_!r}, got {error!r}"
    assert type_.test(item.value)


def check_invalid(type_: Type[Any, Any], item: TestItem) -> None:
    """Assert that *item* fails the checks of *type_*."""
    error = type_.test_error(item.value)
    assert error is not None, f"{item_id(item)} should be invalid for {type_!r}"
    assert not type_.test(item.value)


def check_io(type_: Type[Any, Any], item: TestItem, case: IoCase) -> None:
    """Assert that *item* survives a round-trip through the format of *case*.

    The value is written, compared with the expected raw value when one is
    given, then read back both with validation and as trusted input.
    """
    raw = type_.write(case.writer, item.value)
    if not isinstance(case.raw, _Unset):
        assert raw == case.raw, f"{item_id(item)} was written as {raw!r}, expected {case.raw!r}"

    checked = type_.read(dataclasses.replace(case.reader, trust_input=False), raw)
    assert type_.test(checked), f"{item_id(item)} was read back as the invalid value {checked!r}"
    assert type_.equals(checked, item.value), f"{item_id(item)} was read back as {checked!r}"

    trusted = type_.read(dataclasses.replace(case.reader, trust_input=True), raw)
    assert type_.equals(trusted, item.value), f"{item_id(item)} was read back (trusted) as {trusted!r}"


def check_item(type_: Type[Any, Any], item: TestItem) -> None:
    """Run the checks matching the validity of *item*."""
    if not item.valid:
        check_invalid(type_, item)
        return
    check_valid(type_, item)
    for case in item.io:
        check_io(type_, item, case)


def check_read_errors(reader: Reader, type_: Type[Any, Any], raws: Iterable[Any]) -> None:
    """Assert that none of *raws* can be read by *type_*."""
    for raw in raws:
        try:
            value = type_.read(reader, raw)
        except KryoError:
            continue
        raise AssertionError(f"Reading {raw!r} with {type_!r} should fail, got {value!r}")
