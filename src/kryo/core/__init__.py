# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type contract, case styles and error taxonomy shared by every kryo type."""

from kryo.core.case_style import CaseStyle, rename, split_words
from kryo.core.contract import Lazy, Type, describe_ref, resolve_lazy
from kryo.core.errors import (
    DuplicateMapKeyError,
    DuplicateWireNameError,
    EntriesTestError,
    ExtraKeysError,
    ForbiddenNullError,
    IncompatibleDiffError,
    InvalidMapKeyError,
    InvalidMapValueError,
    InvalidTimestampError,
    ItemsTestError,
    KryoError,
    LiteralMismatchError,
    LowerCaseError,
    MaxDepthError,
    MaxLengthError,
    MaxSizeError,
    MinLengthError,
    MissingKeysError,
    NoMatchingVariantError,
    NotImplementedOperationError,
    NotTrimmedError,
    OutOfRangeError,
    PatternError,
    PropertiesTestError,
    UnknownVariantError,
    UnsupportedFormatError,
    WrongTypeError,
)

__all__ = [
    # Contract
    "Lazy",
    "Type",
    "describe_ref",
    "resolve_lazy",
    # Case styles
    "CaseStyle",
    "rename",
    "split_words",
    # Errors
    "KryoError",
    "WrongTypeError",
    "OutOfRangeError",
    "PatternError",
    "MinLengthError",
    "MaxLengthError",
    "LowerCaseError",
    "NotTrimmedError",
    "InvalidTimestampError",
    "UnknownVariantError",
    "LiteralMismatchError",
    "ForbiddenNullError",
    "ExtraKeysError",
    "MissingKeysError",
    "DuplicateWireNameError",
    "PropertiesTestError",
    "ItemsTestError",
    "InvalidMapKeyError",
    "InvalidMapValueError",
    "EntriesTestError",
    "MaxSizeError",
    "DuplicateMapKeyError",
    "NoMatchingVariantError",
    "MaxDepthError",
    "IncompatibleDiffError",
    "UnsupportedFormatError",
    "NotImplementedOperationError",
]
