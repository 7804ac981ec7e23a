# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Map type: a bounded dict whose keys and values each belong to one type.

Keys are written through the key type with the same writer as the values; the
writer then turns each raw key into a field name. Two keys mapping to the same
field name are an error rather than a silent overwrite.

Maps do not support the diff operations.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from kryo.core.contract import Lazy, Type, resolve_lazy
from kryo.core.errors import (
    DuplicateMapKeyError,
    EntriesTestError,
    InvalidMapKeyError,
    InvalidMapValueError,
    KryoError,
    MaxDepthError,
    MaxSizeError,
    NotImplementedOperationError,
    WrongTypeError,
)
from kryo.io.interfaces import DEFAULT_MAX_DEPTH, Reader, ReadVisitor, Writer
from kryo.io.json import JsonWriter

# ###############
# Public Interface
# ###############

DEFAULT_MAX_SIZE = 100


@dataclass(frozen=True)
class MapOptions:
    """Configuration of a :class:`MapType`.

    Attributes:
        key_type: Type of every key.
        value_type: Type of every value.
        max_size: Maximum number of entries.
    """

    key_type: Type[Any, Any]
    value_type: Type[Any, Any]
    max_size: int = DEFAULT_MAX_SIZE


class MapType(Type[dict[Any, Any], Any]):
    """Describes dicts with typed keys and values.

    Either pass the options as keywords or pass a :class:`MapOptions` (or a
    callable returning one, resolved on first use) as the only argument.

    Note:
        :meth:`equals` compares the JSON encodings of both maps, so two maps
        are equal exactly when their entries encode to the same JSON fields
        and values, regardless of insertion order.
    """

    name = "map"

    def __init__(
        self,
        options: Lazy[MapOptions] | None = None,
        *,
        key_type: Type[Any, Any] | None = None,
        value_type: Type[Any, Any] | None = None,
        max_size: int = DEFAULT_MAX_SIZE,
    ) -> None:
        if options is None:
            if key_type is None or value_type is None:
                raise TypeError("MapType requires a key type and a value type")
            options = MapOptions(key_type=key_type, value_type=value_type, max_size=max_size)
        self._options = options
        self._visitor: ReadVisitor[dict[Any, Any]] = ReadVisitor(from_map=self._from_map_checked)
        self._trusted_visitor: ReadVisitor[dict[Any, Any]] = ReadVisitor(from_map=self._from_map_trusted)
        if not callable(options):
            _ = self.options

    @cached_property
    def options(self) -> MapOptions:
        return resolve_lazy(self._options, self.name)

    @property
    def key_type(self) -> Type[Any, Any]:
        return self.options.key_type

    @property
    def value_type(self) -> Type[Any, Any]:
        return self.options.value_type

    @property
    def max_size(self) -> int:
        return self.options.max_size

    def test_error(self, val: Any) -> Exception | None:
        return self.test_error_at(val, 0)

    def test_error_at(self, val: Any, depth: int) -> Exception | None:
        if not isinstance(val, dict):
            return WrongTypeError("map", val)
        if len(val) > self.max_size:
            return MaxSizeError(len(val), self.max_size)
        if depth >= DEFAULT_MAX_DEPTH:
            return MaxDepthError(DEFAULT_MAX_DEPTH)
        errors: dict[Hashable, KryoError] = {}
        for key, value in val.items():
            key_error = self.key_type.test_error_at(key, depth + 1)
            if isinstance(key_error, MaxDepthError):
                return key_error
            if key_error is not None:
                errors[key] = InvalidMapKeyError(key, key_error)
                continue
            value_error = self.value_type.test_error_at(value, depth + 1)
            if isinstance(value_error, MaxDepthError):
                return value_error
            if value_error is not None:
                errors[key] = InvalidMapValueError(key, value_error)
        if errors:
            return EntriesTestError(errors)
        return None

    def read_trusted(self, reader: Reader, raw: Any) -> dict[Any, Any]:
        return reader.read_map(raw, self._trusted_visitor)

    def _read_checked(self, reader: Reader, raw: Any) -> dict[Any, Any]:
        return reader.read_map(raw, self._visitor)

    def write(self, writer: Writer, val: dict[Any, Any]) -> Any:
        entries = list(val.items())
        return writer.write_map(
            len(entries),
            lambda index, key_writer: self.key_type.write(key_writer, entries[index][0]),
            lambda index, value_writer: self.value_type.write(value_writer, entries[index][1]),
        )

    def equals(self, val1: dict[Any, Any], val2: dict[Any, Any]) -> bool:
        if len(val1) != len(val2):
            return False
        return self.write(_CANONICAL_WRITER, val1) == self.write(_CANONICAL_WRITER, val2)

    def clone(self, val: dict[Any, Any]) -> dict[Any, Any]:
        return {self.key_type.clone(key): self.value_type.clone(value) for key, value in val.items()}

    def diff(self, old_val: dict[Any, Any], new_val: dict[Any, Any]) -> Any:
        raise NotImplementedOperationError("map.diff")

    def patch(self, old_val: dict[Any, Any], diff: Any) -> dict[Any, Any]:
        raise NotImplementedOperationError("map.patch")

    def reverse_diff(self, diff: Any) -> Any:
        raise NotImplementedOperationError("map.reverse_diff")

    def squash(self, diff1: Any, diff2: Any) -> Any:
        raise NotImplementedOperationError("map.squash")

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        raise NotImplementedOperationError("map.describe")

    def __repr__(self) -> str:
        if "options" not in self.__dict__:
            return "MapType(<lazy>)"
        return f"MapType(key_type={self.key_type!r}, value_type={self.value_type!r})"

    def _from_map_checked(
        self, entries: list[tuple[Any, Any]], key_reader: Reader, value_reader: Reader
    ) -> dict[Any, Any]:
        if len(entries) > self.max_size:
            raise MaxSizeError(len(entries), self.max_size)
        result: dict[Any, Any] = {}
        errors: dict[Hashable, KryoError] = {}
        for raw_key, raw_value in entries:
            try:
                key = self.key_type.read(key_reader, raw_key)
            except MaxDepthError:
                raise
            except KryoError as exc:
                errors[_error_key(raw_key)] = InvalidMapKeyError(raw_key, exc)
                continue
            try:
                value = self.value_type.read(value_reader, raw_value)
            except MaxDepthError:
                raise
            except KryoError as exc:
                errors[_error_key(key)] = InvalidMapValueError(key, exc)
                continue
            if key in result:
                raise DuplicateMapKeyError(repr(key))
            result[key] = value
        if errors:
            raise EntriesTestError(errors)
        return result

    def _from_map_trusted(
        self, entries: list[tuple[Any, Any]], key_reader: Reader, value_reader: Reader
    ) -> dict[Any, Any]:
        return {
            self.key_type.read_trusted(key_reader, raw_key): self.value_type.read_trusted(value_reader, raw_value)
            for raw_key, raw_value in entries
        }


# ################
# Implementation
# ################

_CANONICAL_WRITER = JsonWriter()


def _error_key(key: Any) -> Hashable:
    return key if isinstance(key, Hashable) else repr(key)
