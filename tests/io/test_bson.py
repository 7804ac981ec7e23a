# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the BSON document reader and writer."""

from datetime import datetime, timedelta, timezone

import pytest

from kryo.builtins import DATE, INTEGER, STRING
from kryo.core.errors import WrongTypeError
from kryo.io.bson import BsonReader, BsonWriter
from kryo.types.map import MapType


def test_dates_are_native_and_truncated() -> None:
    """Dates stay datetime objects, cut to millisecond precision in UTC."""
    value = datetime(2020, 5, 17, 12, 30, 15, 123456, tzinfo=timezone.utc)
    raw = DATE.write(BsonWriter(), value)
    assert isinstance(raw, datetime)
    assert raw == datetime(2020, 5, 17, 12, 30, 15, 123000, tzinfo=timezone.utc)


def test_dates_in_other_zones_are_converted() -> None:
    """Aware dates are normalised to UTC."""
    value = datetime(2020, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    raw = DATE.write(BsonWriter(), value)
    assert raw.tzinfo == timezone.utc
    assert raw.hour == 0


def test_naive_dates_are_read_as_utc() -> None:
    """BSON libraries may hand naive datetimes over; they denote UTC."""
    value = DATE.read(BsonReader(), datetime(2020, 1, 1))
    assert value == datetime(2020, 1, 1, tzinfo=timezone.utc)


def test_date_strings_are_rejected() -> None:
    """Unlike JSON, BSON dates must be native."""
    with pytest.raises(WrongTypeError):
        DATE.read(BsonReader(), "1970-01-01T00:00:00.000Z")


def test_map_keys_are_json_text() -> None:
    """Map keys are encoded as JSON text, even dates."""
    type_ = MapType(key_type=DATE, value_type=INTEGER)
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
    raw = type_.write(BsonWriter(), {epoch: 1})
    assert raw == {'"1970-01-01T00:00:00.000Z"': 1}
    assert type_.read(BsonReader(), raw) == {epoch: 1}


def test_string_map_round_trip() -> None:
    """String keys are quoted in field names."""
    type_ = MapType(key_type=STRING, value_type=STRING)
    raw = type_.write(BsonWriter(), {"a": "b"})
    assert raw == {'"a"': "b"}
    assert type_.read(BsonReader(trust_input=True), raw) == {"a": "b"}
