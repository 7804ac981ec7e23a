# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""String type with optional normalization, case, length and pattern constraints.

Constraints are checked in a fixed order so that the reported error is
deterministic: type, lower case, trimmed, minimum length, maximum length,
pattern. Lengths count code points.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Any

from kryo.core.contract import Type
from kryo.core.errors import (
    LowerCaseError,
    MaxLengthError,
    MinLengthError,
    NotTrimmedError,
    PatternError,
    WrongTypeError,
)
from kryo.io.interfaces import Reader, ReadVisitor, Writer

# ###############
# Public Interface
# ###############

StringDiff = tuple[str, str]


class StringType(Type[str, StringDiff]):
    """Describes text values.

    Args:
        unicode_normalization: Apply NFC normalization when reading.
        lower_case: Require (and, when reading, produce) lower-case text.
        trimmed: Require (and, when reading, produce) text without surrounding whitespace.
        min_length: Minimum number of code points.
        max_length: Maximum number of code points.
        pattern: Regular expression the text must contain a match of.
    """

    name = "string"

    def __init__(
        self,
        *,
        unicode_normalization: bool = False,
        lower_case: bool = False,
        trimmed: bool = False,
        min_length: int | None = None,
        max_length: int | None = None,
        pattern: str | re.Pattern[str] | None = None,
    ) -> None:
        self.unicode_normalization = unicode_normalization
        self.lower_case = lower_case
        self.trimmed = trimmed
        self.min_length = min_length
        self.max_length = max_length
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def test_error(self, val: Any) -> Exception | None:
        if not isinstance(val, str):
            return WrongTypeError("string", val)
        if self.lower_case and val != val.lower():
            return LowerCaseError(val)
        if self.trimmed and val != val.strip():
            return NotTrimmedError(val)
        length = len(val)
        if self.min_length is not None and length < self.min_length:
            return MinLengthError(val, length, self.min_length)
        if self.max_length is not None and length > self.max_length:
            return MaxLengthError(val, length, self.max_length)
        if self.pattern is not None and self.pattern.search(val) is None:
            return PatternError(val, self.pattern.pattern)
        return None

    def read_trusted(self, reader: Reader, raw: Any) -> str:
        return reader.read_string(raw, _IDENTITY)

    def _read_checked(self, reader: Reader, raw: Any) -> str:
        value = reader.read_string(raw, _IDENTITY)
        if self.unicode_normalization:
            value = unicodedata.normalize("NFC", value)
        if self.lower_case:
            value = value.lower()
        if self.trimmed:
            value = value.strip()
        error = self.test_error(value)
        if error is not None:
            raise error
        return value

    def write(self, writer: Writer, val: str) -> Any:
        return writer.write_string(val)

    def equals(self, val1: str, val2: str) -> bool:
        return val1 == val2

    def clone(self, val: str) -> str:
        return val

    def diff(self, old_val: str, new_val: str) -> StringDiff | None:
        return None if old_val == new_val else (old_val, new_val)

    def patch(self, old_val: str, diff: StringDiff | None) -> str:
        return old_val if diff is None else diff[1]

    def reverse_diff(self, diff: StringDiff | None) -> StringDiff | None:
        return None if diff is None else (diff[1], diff[0])

    def squash(self, diff1: StringDiff | None, diff2: StringDiff | None) -> StringDiff | None:
        if diff1 is None:
            return diff2
        if diff2 is None:
            return diff1
        return self.diff(diff1[0], diff2[1])

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        descriptor: dict[str, Any] = {"kind": self.name}
        if self.unicode_normalization:
            descriptor["unicode-normalization"] = True
        if self.lower_case:
            descriptor["lower-case"] = True
        if self.trimmed:
            descriptor["trimmed"] = True
        if self.min_length is not None:
            descriptor["min-length"] = self.min_length
        if self.max_length is not None:
            descriptor["max-length"] = self.max_length
        if self.pattern is not None:
            descriptor["pattern"] = self.pattern.pattern
        return descriptor


# ################
# Implementation
# ################

_IDENTITY: ReadVisitor[str] = ReadVisitor(from_string=lambda value: value)
