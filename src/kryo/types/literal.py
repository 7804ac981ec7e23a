# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Literal type: exactly one value of an underlying type.

Typically used as the discriminant of a record inside a union, e.g. the
``type`` property of a file-system node.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from kryo.core.contract import Type, describe_ref
from kryo.core.errors import LiteralMismatchError
from kryo.io.interfaces import Reader, Writer
from kryo.io.json import JsonWriter

# ###############
# Public Interface
# ###############

T = TypeVar("T")


class LiteralType(Type[T, None], Generic[T]):
    """Accepts only *value*, encoded through *type*. Its diffs are always ``None``."""

    name = "literal"

    def __init__(self, type: Type[T, Any], value: T) -> None:  # noqa: A002
        error = type.test_error(value)
        if error is not None:
            raise error
        self.type = type
        self.value = value

    def test_error(self, val: Any) -> Exception | None:
        return self.test_error_at(val, 0)

    def test_error_at(self, val: Any, depth: int) -> Exception | None:
        error = self.type.test_error_at(val, depth)
        if error is not None:
            return error
        if not self.type.equals(val, self.value):
            return LiteralMismatchError(self.value, val)
        return None

    def read_trusted(self, reader: Reader, raw: Any) -> T:
        return self.type.read_trusted(reader, raw)

    def _read_checked(self, reader: Reader, raw: Any) -> T:
        value = self.type.read(reader, raw)
        if not self.type.equals(value, self.value):
            raise LiteralMismatchError(self.value, value)
        return value

    def write(self, writer: Writer, val: T) -> Any:
        return self.type.write(writer, val)

    def equals(self, val1: T, val2: T) -> bool:
        return self.type.equals(val1, val2)

    def clone(self, val: T) -> T:
        return self.type.clone(val)

    def diff(self, old_val: T, new_val: T) -> None:
        return None

    def patch(self, old_val: T, diff: None) -> T:
        return self.type.clone(old_val)

    def reverse_diff(self, diff: None) -> None:
        return None

    def squash(self, diff1: None, diff2: None) -> None:
        return None

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        return {
            "kind": self.name,
            "type": describe_ref(self.type, names),
            "value": self.type.write(JsonWriter(), self.value),
        }

    def __repr__(self) -> str:
        return f"LiteralType({self.type!r}, {self.value!r})"
