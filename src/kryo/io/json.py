# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""JSON binding of the reader and writer capabilities.

Raw values are the Python objects produced by :func:`json.loads` (``dict``,
``list``, ``str``, ``int``, ``float``, ``bool``, ``None``). Dates travel as
ISO-8601 strings with millisecond precision in UTC. Map keys are written as
the compact JSON text of the key type's own raw encoding.

:func:`dumps` and :func:`loads` wrap a type with the JSON text encoding.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, TypeVar

from kryo.core.errors import DuplicateMapKeyError, WrongTypeError
from kryo.io._dates import format_iso, from_millis, parse_iso
from kryo.io.interfaces import Reader, ReadVisitor, Writer, visit

if TYPE_CHECKING:
    from kryo.core.contract import Type

# ###############
# Public Interface
# ###############

T = TypeVar("T")


@dataclass(frozen=True)
class JsonReader(Reader):
    """Reads values decoded by :func:`json.loads`."""

    format_name = "json"

    def read_boolean(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if isinstance(raw, bool):
            return visit(visitor, "from_boolean", "boolean", raw, raw)
        raise WrongTypeError("boolean", raw)

    def read_string(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if isinstance(raw, str):
            return visit(visitor, "from_string", "string", raw, raw)
        raise WrongTypeError("string", raw)

    def read_integer(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        return visit(visitor, "from_integer", "integer", raw, read_json_integer(raw))

    def read_date(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if isinstance(raw, str):
            return visit(visitor, "from_date", "date", raw, parse_iso(raw))
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return visit(visitor, "from_date", "date", raw, from_millis(read_json_integer(raw)))
        raise WrongTypeError("date", raw)

    def read_list(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if isinstance(raw, list):
            return visit(visitor, "from_list", "list", raw, raw, self.nested())
        raise WrongTypeError("list", raw)

    def read_record(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if isinstance(raw, dict):
            return visit(visitor, "from_record", "record", raw, raw, self.nested())
        raise WrongTypeError("record", raw)

    def read_map(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if not isinstance(raw, dict):
            raise WrongTypeError("map", raw)
        entries = [(parse_json_key(field), value) for field, value in raw.items()]
        child = self.nested()
        return visit(visitor, "from_map", "map", raw, entries, child, child)

    def read_null(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if raw is None:
            return visit(visitor, "from_null", "null", raw)
        raise WrongTypeError("null", raw)


class JsonWriter(Writer):
    """Writes values encodable by :func:`json.dumps`."""

    format_name = "json"

    def write_boolean(self, value: bool) -> bool:
        return value

    def write_string(self, value: str) -> str:
        return value

    def write_integer(self, value: int) -> int:
        return value

    def write_date(self, value: datetime) -> str:
        return format_iso(value)

    def write_null(self) -> None:
        return None

    def write_list(self, size: int, handler: Callable[[int, Writer], Any]) -> list[Any]:
        return [handler(index, self) for index in range(size)]

    def write_record(self, keys: Iterable[str], handler: Callable[[str, Writer], Any]) -> dict[str, Any]:
        return {key: handler(key, self) for key in keys}

    def write_map(
        self,
        size: int,
        key_handler: Callable[[int, Writer], Any],
        value_handler: Callable[[int, Writer], Any],
    ) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for index in range(size):
            field = json_key(key_handler(index, self))
            if field in result:
                raise DuplicateMapKeyError(field)
            result[field] = value_handler(index, self)
        return result


def dumps(type_: Type[T, Any], value: T) -> str:
    """Serialize *value* to compact JSON text."""
    return json.dumps(type_.write(JsonWriter(), value), separators=(",", ":"))


def loads(type_: Type[T, Any], text: str, reader: JsonReader | None = None) -> T:
    """Deserialize JSON *text* with *type_*.

    Args:
        type_: The type describing the expected value.
        text: JSON text, usually produced by :func:`dumps`.
        reader: Reader to use; a validating :class:`JsonReader` by default.

    Raises:
        WrongTypeError: If *text* is not valid JSON.
        KryoError: If the decoded value is not valid for *type_*.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError:
        raise WrongTypeError("JSON text", text) from None
    return type_.read(reader if reader is not None else JsonReader(), raw)


def json_key(raw_key: Any) -> str:
    """Return the field name used for a raw map key."""
    return json.dumps(raw_key, separators=(",", ":"), sort_keys=True)


def parse_json_key(field: str) -> Any:
    """Parse a field name produced by :func:`json_key`."""
    try:
        return json.loads(field)
    except json.JSONDecodeError:
        raise WrongTypeError("JSON-encoded map key", field) from None


def read_json_integer(raw: Any) -> int:
    """Return *raw* as an ``int`` if it is an integral JSON number."""
    if isinstance(raw, bool):
        raise WrongTypeError("integer", raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    raise WrongTypeError("integer", raw)
