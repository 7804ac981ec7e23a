# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Array type: a bounded list of values of one item type.

Arrays are bounded by default (``max_length=100``) so that decoding untrusted
input cannot allocate without limit; pass ``max_length=None`` explicitly for an
unbounded array.

An array diff is a dict with the keys:

* ``"lengths"``: ``(old_length, new_length)``, always present;
* ``"update"``: ``{index: item_diff}`` for the changed common positions;
* ``"push"``: items appended after the common prefix, or
* ``"pop"``: items removed after the common prefix.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from functools import cached_property
from typing import Any, NamedTuple

from kryo.core.contract import Lazy, Type, describe_ref, resolve_lazy
from kryo.core.errors import (
    IncompatibleDiffError,
    ItemsTestError,
    KryoError,
    MaxDepthError,
    MaxLengthError,
    WrongTypeError,
)
from kryo.io.interfaces import DEFAULT_MAX_DEPTH, Reader, ReadVisitor, Writer

# ###############
# Public Interface
# ###############

DEFAULT_MAX_LENGTH = 100

ArrayDiff = dict[str, Any]


@dataclass(frozen=True)
class ArrayOptions:
    """Configuration of an :class:`ArrayType`.

    Attributes:
        item_type: Type of every item.
        max_length: Maximum number of items, ``None`` for no limit.
        nullable_items: Accept ``None`` items (legacy document-store behavior).
    """

    item_type: Type[Any, Any]
    max_length: int | None = DEFAULT_MAX_LENGTH
    nullable_items: bool = False


class ArrayType(Type[list[Any], ArrayDiff]):
    """Describes lists whose items all belong to one type.

    Either pass the options as keywords or pass an :class:`ArrayOptions` (or a
    callable returning one, resolved on first use) as the only argument.
    """

    name = "array"

    def __init__(
        self,
        options: Lazy[ArrayOptions] | None = None,
        *,
        item_type: Type[Any, Any] | None = None,
        max_length: int | None = DEFAULT_MAX_LENGTH,
        nullable_items: bool = False,
    ) -> None:
        if options is None:
            if item_type is None:
                raise TypeError("ArrayType requires an item type")
            options = ArrayOptions(item_type=item_type, max_length=max_length, nullable_items=nullable_items)
        self._options = options
        self._visitor: ReadVisitor[list[Any]] = ReadVisitor(from_list=self._from_list_checked)
        self._trusted_visitor: ReadVisitor[list[Any]] = ReadVisitor(from_list=self._from_list_trusted)
        if not callable(options):
            _ = self.options

    @cached_property
    def options(self) -> ArrayOptions:
        return resolve_lazy(self._options, self.name)

    @property
    def item_type(self) -> Type[Any, Any]:
        return self.options.item_type

    @property
    def max_length(self) -> int | None:
        return self.options.max_length

    def test_error(self, val: Any) -> Exception | None:
        return self.test_error_at(val, 0)

    def test_error_at(self, val: Any, depth: int) -> Exception | None:
        if not isinstance(val, list):
            return WrongTypeError("list", val)
        if self.max_length is not None and len(val) > self.max_length:
            return MaxLengthError(val, len(val), self.max_length)
        if depth >= DEFAULT_MAX_DEPTH:
            return MaxDepthError(DEFAULT_MAX_DEPTH)
        errors: dict[int, Exception] = {}
        for index, item in enumerate(val):
            if item is None and self.options.nullable_items:
                continue
            error = self.item_type.test_error_at(item, depth + 1)
            if isinstance(error, MaxDepthError):
                return error
            if error is not None:
                errors[index] = error
        if errors:
            return ItemsTestError(errors)
        return None

    def read_trusted(self, reader: Reader, raw: Any) -> list[Any]:
        return reader.read_list(raw, self._trusted_visitor)

    def _read_checked(self, reader: Reader, raw: Any) -> list[Any]:
        return reader.read_list(raw, self._visitor)

    def write(self, writer: Writer, val: list[Any]) -> Any:
        item_type = self.item_type

        def write_item(index: int, item_writer: Writer) -> Any:
            item = val[index]
            if item is None:
                return item_writer.write_null()
            return item_type.write(item_writer, item)

        return writer.write_list(len(val), write_item)

    def equals(self, val1: list[Any], val2: list[Any]) -> bool:
        if len(val1) != len(val2):
            return False
        return all(self._equals_item(item1, item2) for item1, item2 in zip(val1, val2))

    def clone(self, val: list[Any]) -> list[Any]:
        return [self._clone_item(item) for item in val]

    def diff(self, old_val: list[Any], new_val: list[Any]) -> ArrayDiff | None:
        common = min(len(old_val), len(new_val))
        update: dict[int, Any] = {}
        for index in range(common):
            item_diff = self._diff_item(old_val[index], new_val[index])
            if item_diff is not None:
                update[index] = item_diff
        if not update and len(old_val) == len(new_val):
            return None
        result: ArrayDiff = {"lengths": (len(old_val), len(new_val))}
        if update:
            result["update"] = update
        if len(new_val) > common:
            result["push"] = [self._clone_item(item) for item in new_val[common:]]
        if len(old_val) > common:
            result["pop"] = [self._clone_item(item) for item in old_val[common:]]
        return result

    def patch(self, old_val: list[Any], diff: ArrayDiff | None) -> list[Any]:
        result = self.clone(old_val)
        if diff is None:
            return result
        for index, item_diff in diff.get("update", {}).items():
            result[index] = self._patch_item(old_val[index], item_diff)
        popped = diff.get("pop", [])
        if popped:
            del result[len(result) - len(popped) :]
        result.extend(self._clone_item(item) for item in diff.get("push", []))
        return result

    def reverse_diff(self, diff: ArrayDiff | None) -> ArrayDiff | None:
        if diff is None:
            return None
        old_length, new_length = diff["lengths"]
        result: ArrayDiff = {"lengths": (new_length, old_length)}
        if "update" in diff:
            result["update"] = {index: self._reverse_item(item_diff) for index, item_diff in diff["update"].items()}
        if "pop" in diff:
            result["push"] = [self._clone_item(item) for item in diff["pop"]]
        if "push" in diff:
            result["pop"] = [self._clone_item(item) for item in diff["push"]]
        return result

    def squash(self, diff1: ArrayDiff | None, diff2: ArrayDiff | None) -> ArrayDiff | None:
        if diff1 is None:
            return diff2
        if diff2 is None:
            return diff1
        len0, len1 = diff1["lengths"]
        mid, len2 = diff2["lengths"]
        if mid != len1:
            raise IncompatibleDiffError(self.name, (len0, len1), (mid, len2))
        update1: dict[int, Any] = diff1.get("update", {})
        update2: dict[int, Any] = diff2.get("update", {})
        push1, pop1 = diff1.get("push", []), diff1.get("pop", [])
        push2, pop2 = diff2.get("push", []), diff2.get("pop", [])

        update: dict[int, Any] = {}
        for index in range(min(len0, len2)):
            if index < len1:
                item_diff = self._squash_item(update1.get(index), update2.get(index))
            else:
                item_diff = self._diff_item(pop1[index - len1], push2[index - len1])
            if item_diff is not None:
                update[index] = item_diff

        pushed: list[Any] = []
        for index in range(len0, len2):
            if index < len1:
                pushed.append(self._patch_item(push1[index - len0], update2.get(index)))
            else:
                pushed.append(self._clone_item(push2[index - len1]))

        popped: list[Any] = []
        for index in range(len2, len0):
            if index < len1:
                popped.append(self._patch_item(pop2[index - len2], self._reverse_item(update1.get(index))))
            else:
                popped.append(self._clone_item(pop1[index - len1]))

        if not update and len0 == len2:
            return None
        result: ArrayDiff = {"lengths": (len0, len2)}
        if update:
            result["update"] = update
        if pushed:
            result["push"] = pushed
        if popped:
            result["pop"] = popped
        return result

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        descriptor: dict[str, Any] = {
            "kind": self.name,
            "items": describe_ref(self.item_type, names),
            "max-length": self.max_length,
        }
        if self.options.nullable_items:
            descriptor["nullable-items"] = True
        return descriptor

    def __repr__(self) -> str:
        if "options" not in self.__dict__:
            return "ArrayType(<lazy>)"
        return f"ArrayType(item_type={self.item_type!r}, max_length={self.max_length})"

    def _from_list_checked(self, items: Sequence[Any], reader: Reader) -> list[Any]:
        if self.max_length is not None and len(items) > self.max_length:
            raise MaxLengthError(items, len(items), self.max_length)
        result: list[Any] = []
        errors: dict[int, Exception] = {}
        for index, item in enumerate(items):
            if item is None and self.options.nullable_items:
                result.append(None)
                continue
            try:
                result.append(self.item_type.read(reader, item))
            except MaxDepthError:
                raise
            except KryoError as exc:
                errors[index] = exc
        if errors:
            raise ItemsTestError(errors)
        return result

    def _from_list_trusted(self, items: Sequence[Any], reader: Reader) -> list[Any]:
        item_type = self.item_type
        return [None if item is None else item_type.read_trusted(reader, item) for item in items]

    def _equals_item(self, item1: Any, item2: Any) -> bool:
        if item1 is None or item2 is None:
            return item1 is None and item2 is None
        return self.item_type.equals(item1, item2)

    def _clone_item(self, item: Any) -> Any:
        return None if item is None else self.item_type.clone(item)

    def _diff_item(self, old_item: Any, new_item: Any) -> Any:
        if old_item is None or new_item is None:
            if old_item is None and new_item is None:
                return None
            return _NullSwap(self._clone_item(old_item), self._clone_item(new_item))
        return self.item_type.diff(old_item, new_item)

    def _patch_item(self, old_item: Any, item_diff: Any) -> Any:
        if isinstance(item_diff, _NullSwap):
            return self._clone_item(item_diff.new)
        if item_diff is None:
            return self._clone_item(old_item)
        return self.item_type.patch(old_item, item_diff)

    def _reverse_item(self, item_diff: Any) -> Any:
        if isinstance(item_diff, _NullSwap):
            return _NullSwap(item_diff.new, item_diff.old)
        return self.item_type.reverse_diff(item_diff)

    def _squash_item(self, diff1: Any, diff2: Any) -> Any:
        if diff1 is None:
            return diff2
        if diff2 is None:
            return diff1
        if isinstance(diff1, _NullSwap):
            return self._diff_item(diff1.old, self._patch_item(diff1.new, diff2))
        if isinstance(diff2, _NullSwap):
            return self._diff_item(self._patch_item(diff2.old, self._reverse_item(diff1)), diff2.new)
        return self.item_type.squash(diff1, diff2)


# ################
# Implementation
# ################


class _NullSwap(NamedTuple):
    """Item diff of a nullable array where one side is ``None``."""

    old: Any
    new: Any
