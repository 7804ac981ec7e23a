# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""BSON-document binding of the reader and writer capabilities.

Raw values are native BSON documents as handed over by a BSON library: dates
are ``datetime`` objects (UTC, millisecond precision), integers are ``int``.
Turning a document into bytes is left to the BSON library of the caller.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from kryo.core.errors import DuplicateMapKeyError, WrongTypeError
from kryo.io._dates import to_utc, truncate_millis
from kryo.io.interfaces import Reader, ReadVisitor, Writer, visit
from kryo.io.json import JsonReader, JsonWriter, json_key, parse_json_key, read_json_integer

# ###############
# Public Interface
# ###############

T = TypeVar("T")


@dataclass(frozen=True)
class BsonReader(Reader):
    """Reads native BSON document values."""

    format_name = "bson"

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
        if isinstance(raw, datetime):
            return visit(visitor, "from_date", "date", raw, to_utc(raw))
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
        # Map keys are JSON text whatever the document format.
        key_reader = JsonReader(trust_input=child.trust_input, max_depth=child.max_depth, depth=child.depth)
        return visit(visitor, "from_map", "map", raw, entries, key_reader, child)

    def read_null(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if raw is None:
            return visit(visitor, "from_null", "null", raw)
        raise WrongTypeError("null", raw)


class BsonWriter(Writer):
    """Writes native BSON document values."""

    format_name = "bson"

    def write_boolean(self, value: bool) -> bool:
        return value

    def write_string(self, value: str) -> str:
        return value

    def write_integer(self, value: int) -> int:
        return value

    def write_date(self, value: datetime) -> datetime:
        return truncate_millis(value)

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
            field = json_key(key_handler(index, _KEY_WRITER))
            if field in result:
                raise DuplicateMapKeyError(field)
            result[field] = value_handler(index, self)
        return result


# ################
# Implementation
# ################

_KEY_WRITER = JsonWriter()
