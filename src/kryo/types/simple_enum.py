# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Enum type mapping the members of a Python :class:`enum.Enum` to wire names.

Members are numbered densely in declaration order; a diff is the difference
between the ordinals of the new and the old member. On the wire a member is
its name, optionally rewritten in another case style.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

from kryo.core.case_style import CaseStyle, rename
from kryo.core.contract import Type
from kryo.core.errors import DuplicateWireNameError, UnknownVariantError, WrongTypeError
from kryo.io.interfaces import Reader, ReadVisitor, Writer

# ###############
# Public Interface
# ###############

E = TypeVar("E", bound=Enum)


class SimpleEnumType(Type[E, int], Generic[E]):
    """Describes the members of *enum*.

    Args:
        enum: The enumeration whose members are the values of this type.
        rename: Case style applied to member names to obtain wire names.
    """

    name = "simple-enum"

    def __init__(self, enum: type[E], *, rename: CaseStyle | None = None) -> None:
        self.enum = enum
        self.rename = rename
        self.members: tuple[E, ...] = tuple(enum)
        self._ordinals = {member: index for index, member in enumerate(self.members)}
        self.member_to_wire_name = {member: _wire_name(member.name, rename) for member in self.members}
        self.wire_name_to_member: dict[str, E] = {}
        for member, wire in self.member_to_wire_name.items():
            other = self.wire_name_to_member.setdefault(wire, member)
            if other is not member:
                raise DuplicateWireNameError(wire, [other.name, member.name])
        self._visitor: ReadVisitor[E] = ReadVisitor(from_string=self._from_wire_name)

    def test_error(self, val: Any) -> Exception | None:
        if not isinstance(val, self.enum):
            return WrongTypeError(self.enum.__name__, val)
        return None

    def read_trusted(self, reader: Reader, raw: Any) -> E:
        return reader.read_string(raw, self._visitor)

    def _read_checked(self, reader: Reader, raw: Any) -> E:
        return reader.read_string(raw, self._visitor)

    def write(self, writer: Writer, val: E) -> Any:
        return writer.write_string(self.member_to_wire_name[val])

    def equals(self, val1: E, val2: E) -> bool:
        return val1 is val2

    def clone(self, val: E) -> E:
        return val

    def diff(self, old_val: E, new_val: E) -> int | None:
        return self._ordinals[new_val] - self._ordinals[old_val] or None

    def patch(self, old_val: E, diff: int | None) -> E:
        ordinal = self._ordinals[old_val] + (diff or 0)
        if not 0 <= ordinal < len(self.members):
            raise UnknownVariantError(self.enum.__name__, ordinal)
        return self.members[ordinal]

    def reverse_diff(self, diff: int | None) -> int | None:
        return -diff if diff else None

    def squash(self, diff1: int | None, diff2: int | None) -> int | None:
        return (diff1 or 0) + (diff2 or 0) or None

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        descriptor: dict[str, Any] = {"kind": self.name, "values": [member.name for member in self.members]}
        if self.rename is not None:
            descriptor["rename"] = self.rename.value
        return descriptor

    def __repr__(self) -> str:
        return f"SimpleEnumType({self.enum.__name__})"

    def _from_wire_name(self, wire_name: str) -> E:
        member = self.wire_name_to_member.get(wire_name)
        if member is None:
            raise UnknownVariantError(self.enum.__name__, wire_name)
        return member


# ################
# Implementation
# ################


def _wire_name(member_name: str, style: CaseStyle | None) -> str:
    return member_name if style is None else rename(member_name, style)
