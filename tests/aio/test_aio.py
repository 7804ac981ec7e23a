# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the coroutine-based adapter."""

from typing import Any

import pytest

from kryo.aio import AsyncType, lift
from kryo.builtins import SINT8, STRING
from kryo.core.errors import OutOfRangeError
from kryo.io.interfaces import Reader
from kryo.io.json import JsonReader, JsonWriter
from kryo.types.record import PropertyDescriptor, RecordType

# ###############
# Test Helpers
# ###############

USER = RecordType(properties={"name": PropertyDescriptor(STRING), "age": PropertyDescriptor(SINT8)})


class _FetchingType(AsyncType[dict[str, Any], Any]):
    """Reads a user by its id from an in-memory store."""

    def __init__(self, store: dict[str, Any]) -> None:
        super().__init__(USER)
        self.store = store

    async def read(self, reader: Reader, raw: Any) -> dict[str, Any]:
        return await super().read(reader, self.store[raw])


# ###############
# Codec
# ###############


@pytest.mark.asyncio
async def test_round_trip() -> None:
    """Values written by the adapter are read back unchanged."""
    user = lift(USER)
    value = {"name": "alice", "age": 30}
    raw = await user.write(JsonWriter(), value)
    assert raw == {"name": "alice", "age": 30}
    assert user.equals(await user.read(JsonReader(), raw), value)
    assert user.equals(await user.read_trusted(JsonReader(), raw), value)


@pytest.mark.asyncio
async def test_read_errors_propagate() -> None:
    """Read errors of the inner type surface from the coroutine."""
    with pytest.raises(OutOfRangeError):
        await lift(SINT8).read(JsonReader(), 1000)


@pytest.mark.asyncio
async def test_subclass_awaits_in_read() -> None:
    """Subclasses may replace the raw value before decoding it."""
    fetching = _FetchingType({"u1": {"name": "bob", "age": 41}})
    assert await fetching.read(JsonReader(), "u1") == {"name": "bob", "age": 41}


# ###############
# Synchronous Operations
# ###############


class TestSynchronousOperations:
    def test_delegates_to_inner(self) -> None:
        number = lift(SINT8)
        assert number.name == "integer"
        assert number.test(3)
        assert number.test_error(300) is not None
        assert number.clone(3) == 3
        assert number.diff(1, 4) == 3
        assert number.patch(1, 3) == 4
        assert number.reverse_diff(3) == -3
        assert number.squash(3, -3) is None

    def test_repr(self) -> None:
        assert repr(lift(STRING)) == f"AsyncType({STRING!r})"
