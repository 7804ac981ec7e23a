# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Boolean type. Its diff is ``True`` when the value flipped."""

from __future__ import annotations

from typing import Any

from kryo.core.contract import Type
from kryo.core.errors import WrongTypeError
from kryo.io.interfaces import Reader, ReadVisitor, Writer

# ###############
# Public Interface
# ###############


class BooleanType(Type[bool, bool]):
    """Describes ``True`` and ``False``."""

    name = "boolean"

    def test_error(self, val: Any) -> Exception | None:
        if not isinstance(val, bool):
            return WrongTypeError("boolean", val)
        return None

    def read_trusted(self, reader: Reader, raw: Any) -> bool:
        return reader.read_boolean(raw, _VISITOR)

    def _read_checked(self, reader: Reader, raw: Any) -> bool:
        return reader.read_boolean(raw, _VISITOR)

    def write(self, writer: Writer, val: bool) -> Any:
        return writer.write_boolean(val)

    def equals(self, val1: bool, val2: bool) -> bool:
        return val1 == val2

    def clone(self, val: bool) -> bool:
        return val

    def diff(self, old_val: bool, new_val: bool) -> bool | None:
        return True if old_val != new_val else None

    def patch(self, old_val: bool, diff: bool | None) -> bool:
        return not old_val if diff else old_val

    def reverse_diff(self, diff: bool | None) -> bool | None:
        return diff

    def squash(self, diff1: bool | None, diff2: bool | None) -> bool | None:
        return True if bool(diff1) != bool(diff2) else None


# ################
# Implementation
# ################

_VISITOR: ReadVisitor[bool] = ReadVisitor(from_boolean=lambda value: value)
