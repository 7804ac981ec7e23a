# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Coroutine-based adapter over a synchronous type.

Only the codec operations suspend. Subclasses override :meth:`AsyncType.read`,
:meth:`AsyncType.read_trusted` or :meth:`AsyncType.write` when decoding or
encoding has to await something, for example fetching a referenced document.
Every other operation is pure and stays synchronous.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from kryo.core.contract import Type
from kryo.io.interfaces import Reader, Writer

# ###############
# Public Interface
# ###############

T = TypeVar("T")
D = TypeVar("D")


class AsyncType(Generic[T, D]):
    """Wraps *inner* and exposes its codec operations as coroutines."""

    def __init__(self, inner: Type[T, D]) -> None:
        self.inner = inner

    @property
    def name(self) -> str:
        return self.inner.name

    async def read(self, reader: Reader, raw: Any) -> T:
        return self.inner.read(reader, raw)

    async def read_trusted(self, reader: Reader, raw: Any) -> T:
        return self.inner.read_trusted(reader, raw)

    async def write(self, writer: Writer, val: T) -> Any:
        return self.inner.write(writer, val)

    def test_error(self, val: Any) -> Exception | None:
        return self.inner.test_error(val)

    def test(self, val: Any) -> bool:
        return self.inner.test(val)

    def equals(self, val1: T, val2: T) -> bool:
        return self.inner.equals(val1, val2)

    def clone(self, val: T) -> T:
        return self.inner.clone(val)

    def diff(self, old_val: T, new_val: T) -> D | None:
        return self.inner.diff(old_val, new_val)

    def patch(self, old_val: T, diff: D | None) -> T:
        return self.inner.patch(old_val, diff)

    def reverse_diff(self, diff: D | None) -> D | None:
        return self.inner.reverse_diff(diff)

    def squash(self, diff1: D | None, diff2: D | None) -> D | None:
        return self.inner.squash(diff1, diff2)

    def __repr__(self) -> str:
        return f"AsyncType({self.inner!r})"


def lift(inner: Type[T, D]) -> AsyncType[T, D]:
    """Return the asynchronous view of *inner*."""
    return AsyncType(inner)
