# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Format-agnostic reader and writer capabilities.

Types never branch on a format name. To decode, a type calls the reader method
for the wire shape it expects and passes a :class:`ReadVisitor` describing how
to interpret each representation the format may hand back; the reader decides
which callback applies. Writers are the dual: one method per shape to produce.

Supporting a new format means implementing these two classes once.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

from kryo.core.errors import MaxDepthError, WrongTypeError

# ###############
# Public Interface
# ###############

T = TypeVar("T")

DEFAULT_MAX_DEPTH = 64


@dataclass(frozen=True)
class ReadVisitor(Generic[T]):
    """Callbacks interpreting the representations a reader may find.

    A reader invokes at most one callback. When the representation found in the
    input has no callback, the reader raises :class:`WrongTypeError`.

    Attributes:
        from_boolean: Receives a boolean.
        from_string: Receives a string.
        from_integer: Receives an integer.
        from_date: Receives a timezone-aware UTC datetime.
        from_list: Receives the raw items and the reader for them.
        from_record: Receives the raw fields keyed by wire name and the reader for them.
        from_map: Receives ``(raw_key, raw_value)`` pairs, the key reader and the value reader.
        from_null: Called without argument for the null value.
    """

    from_boolean: Callable[[bool], T] | None = None
    from_string: Callable[[str], T] | None = None
    from_integer: Callable[[int], T] | None = None
    from_date: Callable[[datetime], T] | None = None
    from_list: Callable[[Sequence[Any], Reader], T] | None = None
    from_record: Callable[[dict[str, Any], Reader], T] | None = None
    from_map: Callable[[list[tuple[Any, Any]], Reader, Reader], T] | None = None
    from_null: Callable[[], T] | None = None


@dataclass(frozen=True)
class Reader(ABC):
    """Decodes raw values of one wire format.

    Readers are immutable. Each nested structure is decoded with the reader
    returned by :meth:`nested`, one level deeper, so hostile input cannot
    recurse without bound.

    Attributes:
        trust_input: Decode through ``read_trusted`` (input produced by kryo itself).
        max_depth: Maximum nesting depth accepted.
        depth: Current nesting depth.
    """

    format_name = "abstract"

    trust_input: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    depth: int = 0

    def nested(self) -> Reader:
        """Return the reader for the children of the current structure."""
        if self.depth + 1 > self.max_depth:
            raise MaxDepthError(self.max_depth)
        return dataclasses.replace(self, depth=self.depth + 1)

    @abstractmethod
    def read_boolean(self, raw: Any, visitor: ReadVisitor[T]) -> T: ...

    @abstractmethod
    def read_string(self, raw: Any, visitor: ReadVisitor[T]) -> T: ...

    @abstractmethod
    def read_integer(self, raw: Any, visitor: ReadVisitor[T]) -> T: ...

    @abstractmethod
    def read_date(self, raw: Any, visitor: ReadVisitor[T]) -> T: ...

    @abstractmethod
    def read_list(self, raw: Any, visitor: ReadVisitor[T]) -> T: ...

    @abstractmethod
    def read_record(self, raw: Any, visitor: ReadVisitor[T]) -> T: ...

    @abstractmethod
    def read_map(self, raw: Any, visitor: ReadVisitor[T]) -> T: ...

    @abstractmethod
    def read_null(self, raw: Any, visitor: ReadVisitor[T]) -> T: ...


class Writer(ABC):
    """Encodes values into raw values of one wire format."""

    format_name = "abstract"

    @abstractmethod
    def write_boolean(self, value: bool) -> Any: ...

    @abstractmethod
    def write_string(self, value: str) -> Any: ...

    @abstractmethod
    def write_integer(self, value: int) -> Any: ...

    @abstractmethod
    def write_date(self, value: datetime) -> Any: ...

    @abstractmethod
    def write_null(self) -> Any: ...

    @abstractmethod
    def write_list(self, size: int, handler: Callable[[int, Writer], Any]) -> Any:
        """Produce a sequence whose item at each index is ``handler(index, writer)``."""

    @abstractmethod
    def write_record(self, keys: Iterable[str], handler: Callable[[str, Writer], Any]) -> Any:
        """Produce a keyed structure whose field ``key`` is ``handler(key, writer)``."""

    @abstractmethod
    def write_map(
        self,
        size: int,
        key_handler: Callable[[int, Writer], Any],
        value_handler: Callable[[int, Writer], Any],
    ) -> Any:
        """Produce a keyed structure from ``size`` entries.

        ``key_handler`` returns the raw key of each entry; the writer turns it
        into a field name and raises
        :class:`~kryo.core.errors.DuplicateMapKeyError` when two entries collide.
        """


def visit(visitor: ReadVisitor[T], callback: str, expected: str, raw: Any, *args: Any) -> T:
    """Invoke the *callback* of *visitor*, or raise :class:`WrongTypeError` if it is missing."""
    handler = getattr(visitor, callback)
    if handler is None:
        raise WrongTypeError(expected, raw)
    return handler(*args)
