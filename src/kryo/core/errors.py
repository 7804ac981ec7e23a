# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy shared by every kryo type.

Errors are ordinary exception instances. ``test_error`` returns them as values
(it never raises), while ``read``, ``write`` and the diff operations raise them.
Every error carries a ``kind`` tag and the structured context needed to render
a diagnostic, so callers never have to parse messages.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from typing import Any

# ###############
# Public Interface
# ###############


class KryoError(Exception):
    """Base class of all kryo failures."""

    kind: str = "Kryo"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class WrongTypeError(KryoError):
    """The input does not have the basic shape expected by the type."""

    kind = "WrongType"

    def __init__(self, expected: str, actual: Any) -> None:
        super().__init__(f"Expected {expected}, got {_describe(actual)}")
        self.expected = expected
        self.actual = actual


class OutOfRangeError(KryoError):
    """A number lies outside of the inclusive ``[minimum, maximum]`` range."""

    kind = "OutOfRange"

    def __init__(self, value: int, minimum: int, maximum: int) -> None:
        super().__init__(f"Expected a value in [{minimum}, {maximum}], got {value}")
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class PatternError(KryoError):
    """A string does not match the required pattern."""

    kind = "Pattern"

    def __init__(self, value: str, pattern: str) -> None:
        super().__init__(f"The string {value!r} does not match the pattern {pattern!r}")
        self.value = value
        self.pattern = pattern


class MinLengthError(KryoError):
    """A string is shorter than allowed."""

    kind = "MinLength"

    def __init__(self, value: Any, length: int, min_length: int) -> None:
        super().__init__(f"Expected length ({length}) to be greater than or equal to {min_length}")
        self.value = value
        self.length = length
        self.min_length = min_length


class MaxLengthError(KryoError):
    """A string or an array is longer than allowed."""

    kind = "MaxLength"

    def __init__(self, value: Any, length: int, max_length: int) -> None:
        super().__init__(f"Expected length ({length}) to be less than or equal to {max_length}")
        self.value = value
        self.length = length
        self.max_length = max_length


class LowerCaseError(KryoError):
    """A string contains upper-case characters."""

    kind = "LowerCase"

    def __init__(self, value: str) -> None:
        super().__init__(f"Expected a lower-case string, got {value!r}")
        self.value = value


class NotTrimmedError(KryoError):
    """A string has leading or trailing whitespace."""

    kind = "NotTrimmed"

    def __init__(self, value: str) -> None:
        super().__init__(f"Expected a trimmed string, got {value!r}")
        self.value = value


class InvalidTimestampError(KryoError):
    """A date cannot be converted to a millisecond timestamp."""

    kind = "InvalidTimestamp"

    def __init__(self, value: Any) -> None:
        super().__init__(f"Invalid timestamp: {value!r}")
        self.value = value


class UnknownVariantError(KryoError):
    """An enum name or value is not part of the declared set."""

    kind = "UnknownVariant"

    def __init__(self, enum_name: str, value: Any) -> None:
        super().__init__(f"Unknown variant of {enum_name}: {value!r}")
        self.enum_name = enum_name
        self.value = value


class LiteralMismatchError(KryoError):
    """A value differs from the only value accepted by a literal type."""

    kind = "LiteralMismatch"

    def __init__(self, expected: Any, actual: Any) -> None:
        super().__init__(f"Expected the literal {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class ForbiddenNullError(KryoError):
    """A non-optional record property received ``None``."""

    kind = "ForbiddenNull"

    def __init__(self, key: str) -> None:
        super().__init__(f"The property {key} cannot be null")
        self.key = key


class ExtraKeysError(KryoError):
    """A record received keys it does not declare."""

    kind = "ExtraKeys"

    def __init__(self, keys: Sequence[str]) -> None:
        super().__init__(f"Unexpected extra keys (unknown properties): {', '.join(map(str, keys))}")
        self.keys = list(keys)


class MissingKeysError(KryoError):
    """A record lacks required keys."""

    kind = "MissingKeys"

    def __init__(self, keys: Sequence[str]) -> None:
        super().__init__(f"Expected missing keys: {', '.join(map(str, keys))}")
        self.keys = list(keys)


class DuplicateWireNameError(KryoError):
    """Two record properties resolve to the same wire name."""

    kind = "DuplicateWireName"

    def __init__(self, wire_name: str, keys: Sequence[str]) -> None:
        super().__init__(f"The properties {', '.join(keys)} share the wire name {wire_name!r}")
        self.wire_name = wire_name
        self.keys = list(keys)


class PropertiesTestError(KryoError):
    """Aggregate of the errors of every failing record property."""

    kind = "PropertiesTestError"

    def __init__(self, errors: Mapping[str, Exception]) -> None:
        super().__init__(f"Failed test for the properties: {', '.join(errors)}")
        self.errors = dict(errors)


class ItemsTestError(KryoError):
    """Aggregate of the errors of every failing array item, keyed by index."""

    kind = "ItemsTestError"

    def __init__(self, errors: Mapping[int, Exception]) -> None:
        details = ", ".join(f"{index}: {error}" for index, error in errors.items())
        super().__init__(f"Failed test for the items: {{{details}}}")
        self.errors = dict(errors)


class InvalidMapKeyError(KryoError):
    """A map key fails the key type."""

    kind = "InvalidMapKey"

    def __init__(self, key: Any, cause: Exception) -> None:
        super().__init__(f"Invalid map entry: invalid key {key!r}: {cause}")
        self.key = key
        self.cause = cause


class InvalidMapValueError(KryoError):
    """A map value fails the value type."""

    kind = "InvalidMapValue"

    def __init__(self, key: Any, cause: Exception) -> None:
        super().__init__(f"Invalid map entry: invalid value for key {key!r}: {cause}")
        self.key = key
        self.cause = cause


class EntriesTestError(KryoError):
    """Aggregate of the errors of every failing map entry, keyed by map key."""

    kind = "EntriesTestError"

    def __init__(self, errors: Mapping[Hashable, KryoError]) -> None:
        super().__init__(f"Failed test for the entries: {', '.join(repr(key) for key in errors)}")
        self.errors = dict(errors)


class MaxSizeError(KryoError):
    """A map holds more entries than allowed."""

    kind = "MaxSize"

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(f"Expected map size ({size}) to be less than or equal to {max_size}")
        self.size = size
        self.max_size = max_size


class DuplicateMapKeyError(KryoError):
    """Two distinct map keys serialize to the same wire field name."""

    kind = "DuplicateMapKey"

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Several map keys serialize to the field name {field_name!r}")
        self.field_name = field_name


class NoMatchingVariantError(KryoError):
    """No variant of a union accepts the value."""

    kind = "NoMatchingVariant"

    def __init__(self, value: Any) -> None:
        super().__init__(f"No matching variant for {_describe(value)}")
        self.value = value


class MaxDepthError(KryoError):
    """The input nests deeper than the reader allows."""

    kind = "MaxDepth"

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"Maximum nesting depth ({max_depth}) exceeded")
        self.max_depth = max_depth


class IncompatibleDiffError(KryoError):
    """Two diffs cannot be squashed because the second does not apply to the result of the first.

    *first* and *second* identify what each diff expects (lengths, sections or
    variants); *key* locates the conflict inside the value, if relevant.
    """

    kind = "IncompatibleDiff"

    def __init__(self, type_name: str, first: Any, second: Any, key: Any = None) -> None:
        location = "" if key is None else f" at {key!r}"
        super().__init__(f"Cannot squash {type_name} diffs{location}: {first!r} then {second!r}")
        self.type_name = type_name
        self.first = first
        self.second = second
        self.key = key


class UnsupportedFormatError(KryoError):
    """The reader or writer does not provide a capability the type needs."""

    kind = "UnsupportedFormat"

    def __init__(self, format_name: str, capability: str) -> None:
        super().__init__(f"The format {format_name!r} does not support {capability}")
        self.format_name = format_name
        self.capability = capability


class NotImplementedOperationError(KryoError):
    """An operation is deliberately not implemented for a type."""

    kind = "NotImplemented"

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} is not implemented")
        self.operation = operation


# ################
# Implementation
# ################


def _describe(value: Any) -> str:
    """Return a short label for *value* used in error messages."""
    if value is None:
        return "None"
    text = repr(value)
    if len(text) > 40:
        text = text[:37] + "..."
    return f"{type(value).__name__} {text}"
