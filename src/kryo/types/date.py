# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Date type with millisecond semantics.

Values are :class:`datetime.datetime` objects; naive values are taken as UTC.
Two dates are equal when they denote the same millisecond, and a diff is the
number of milliseconds between them. Decoded dates are timezone-aware UTC.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from kryo.core.contract import Type
from kryo.core.errors import InvalidTimestampError, WrongTypeError
from kryo.io._dates import from_millis, to_millis
from kryo.io.interfaces import Reader, ReadVisitor, Writer

# ###############
# Public Interface
# ###############


class DateType(Type[datetime, int]):
    """Describes points in time at millisecond precision."""

    name = "date"

    def test_error(self, val: Any) -> Exception | None:
        if not isinstance(val, datetime):
            return WrongTypeError("datetime", val)
        try:
            to_millis(val)
        except (OverflowError, ValueError):
            return InvalidTimestampError(val)
        return None

    def read_trusted(self, reader: Reader, raw: Any) -> datetime:
        return reader.read_date(raw, _IDENTITY)

    def _read_checked(self, reader: Reader, raw: Any) -> datetime:
        value = reader.read_date(raw, _IDENTITY)
        error = self.test_error(value)
        if error is not None:
            raise error
        return value

    def write(self, writer: Writer, val: datetime) -> Any:
        return writer.write_date(val)

    def equals(self, val1: datetime, val2: datetime) -> bool:
        return to_millis(val1) == to_millis(val2)

    def clone(self, val: datetime) -> datetime:
        return val

    def diff(self, old_val: datetime, new_val: datetime) -> int | None:
        return to_millis(new_val) - to_millis(old_val) or None

    def patch(self, old_val: datetime, diff: int | None) -> datetime:
        if not diff:
            return old_val
        return from_millis(to_millis(old_val) + diff)

    def reverse_diff(self, diff: int | None) -> int | None:
        return -diff if diff else None

    def squash(self, diff1: int | None, diff2: int | None) -> int | None:
        return (diff1 or 0) + (diff2 or 0) or None


# ################
# Implementation
# ################

_IDENTITY: ReadVisitor[datetime] = ReadVisitor(from_date=lambda value: value)
