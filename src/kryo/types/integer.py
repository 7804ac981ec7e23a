# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Integer type bounded by an inclusive ``[minimum, maximum]`` range.

The default range is the one of integers exactly representable by a double,
which keeps JSON numbers lossless across languages. Diffs are the arithmetic
difference ``new - old``.
"""

from __future__ import annotations

from typing import Any

from kryo.core.contract import Type
from kryo.core.errors import OutOfRangeError, WrongTypeError
from kryo.io.interfaces import Reader, ReadVisitor, Writer

# ###############
# Public Interface
# ###############

MAX_SAFE_INTEGER = 2**53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER


class IntegerType(Type[int, int]):
    """Describes integers in ``[minimum, maximum]``. ``bool`` is never an integer."""

    name = "integer"

    def __init__(self, *, minimum: int = MIN_SAFE_INTEGER, maximum: int = MAX_SAFE_INTEGER) -> None:
        if minimum > maximum:
            raise ValueError(f"Empty integer range: [{minimum}, {maximum}]")
        self.minimum = minimum
        self.maximum = maximum

    def test_error(self, val: Any) -> Exception | None:
        if not isinstance(val, int) or isinstance(val, bool):
            return WrongTypeError("integer", val)
        if val < self.minimum or val > self.maximum:
            return OutOfRangeError(val, self.minimum, self.maximum)
        return None

    def read_trusted(self, reader: Reader, raw: Any) -> int:
        return reader.read_integer(raw, _IDENTITY)

    def _read_checked(self, reader: Reader, raw: Any) -> int:
        value = reader.read_integer(raw, _IDENTITY)
        error = self.test_error(value)
        if error is not None:
            raise error
        return value

    def write(self, writer: Writer, val: int) -> Any:
        return writer.write_integer(val)

    def equals(self, val1: int, val2: int) -> bool:
        return val1 == val2

    def clone(self, val: int) -> int:
        return val

    def diff(self, old_val: int, new_val: int) -> int | None:
        return new_val - old_val or None

    def patch(self, old_val: int, diff: int | None) -> int:
        return old_val + (diff or 0)

    def reverse_diff(self, diff: int | None) -> int | None:
        return -diff if diff else None

    def squash(self, diff1: int | None, diff2: int | None) -> int | None:
        return (diff1 or 0) + (diff2 or 0) or None

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        descriptor: dict[str, Any] = {"kind": self.name}
        if self.minimum != MIN_SAFE_INTEGER:
            descriptor["minimum"] = self.minimum
        if self.maximum != MAX_SAFE_INTEGER:
            descriptor["maximum"] = self.maximum
        return descriptor

    def __repr__(self) -> str:
        return f"IntegerType(minimum={self.minimum}, maximum={self.maximum})"


# ################
# Implementation
# ################

_IDENTITY: ReadVisitor[int] = ReadVisitor(from_integer=lambda value: value)
