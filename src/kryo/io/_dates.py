# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Millisecond-precision UTC date helpers shared by the format bindings."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from kryo.core.errors import InvalidTimestampError, WrongTypeError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_millis(value: datetime) -> int:
    """Return the number of milliseconds between the epoch and *value*, rounded down."""
    return (to_utc(value) - EPOCH) // timedelta(milliseconds=1)


def from_millis(millis: int) -> datetime:
    """Return the aware UTC datetime *millis* milliseconds after the epoch."""
    try:
        return EPOCH + timedelta(milliseconds=millis)
    except OverflowError:
        raise InvalidTimestampError(millis) from None


def truncate_millis(value: datetime) -> datetime:
    """Drop the sub-millisecond part of *value* and convert it to UTC."""
    return from_millis(to_millis(value))


def format_iso(value: datetime) -> str:
    """Format *value* as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    utc = to_utc(value)
    return f"{utc.year:04d}-{utc:%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def parse_iso(text: str) -> datetime:
    """Parse an ISO-8601 string; a missing offset means UTC."""
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise WrongTypeError("ISO-8601 date string", text) from None
    return to_utc(parsed)
