# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Query-string binding of the reader and writer capabilities.

Raw values are the nested structures produced by a query-string parser:
dicts, lists and strings. Every scalar travels as text: booleans as
``"true"``/``"false"``, integers as decimal digits, dates as ISO-8601. Map keys
must be written as strings by the key type and are used verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from kryo.core.errors import DuplicateMapKeyError, UnsupportedFormatError, WrongTypeError
from kryo.io._dates import format_iso, parse_iso
from kryo.io.interfaces import Reader, ReadVisitor, Writer, visit

# ###############
# Public Interface
# ###############

T = TypeVar("T")


@dataclass(frozen=True)
class QsReader(Reader):
    """Reads values parsed from a query string."""

    format_name = "qs"

    def read_boolean(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if raw == "true" or raw == "false":
            return visit(visitor, "from_boolean", "boolean", raw, raw == "true")
        raise WrongTypeError('"true" or "false"', raw)

    def read_string(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if isinstance(raw, str):
            return visit(visitor, "from_string", "string", raw, raw)
        raise WrongTypeError("string", raw)

    def read_integer(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if isinstance(raw, str) and _INTEGER.fullmatch(raw):
            return visit(visitor, "from_integer", "integer", raw, int(raw))
        raise WrongTypeError("decimal integer string", raw)

    def read_date(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if isinstance(raw, str):
            return visit(visitor, "from_date", "date", raw, parse_iso(raw))
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
        child = self.nested()
        return visit(visitor, "from_map", "map", raw, list(raw.items()), child, child)

    def read_null(self, raw: Any, visitor: ReadVisitor[T]) -> T:
        if raw is None:
            return visit(visitor, "from_null", "null", raw)
        raise WrongTypeError("null", raw)


class QsWriter(Writer):
    """Writes values for a query-string serializer."""

    format_name = "qs"

    def write_boolean(self, value: bool) -> str:
        return "true" if value else "false"

    def write_string(self, value: str) -> str:
        return value

    def write_integer(self, value: int) -> str:
        return str(value)

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
            field = key_handler(index, self)
            if not isinstance(field, str):
                raise UnsupportedFormatError(self.format_name, "non-string map keys")
            if field in result:
                raise DuplicateMapKeyError(field)
            result[field] = value_handler(index, self)
        return result


# ################
# Implementation
# ################

_INTEGER = re.compile(r"-?(0|[1-9][0-9]*)")
