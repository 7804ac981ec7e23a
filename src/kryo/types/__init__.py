# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Concrete kryo types."""

from kryo.types.array import DEFAULT_MAX_LENGTH, ArrayOptions, ArrayType
from kryo.types.boolean import BooleanType
from kryo.types.date import DateType
from kryo.types.integer import MAX_SAFE_INTEGER, MIN_SAFE_INTEGER, IntegerType
from kryo.types.literal import LiteralType
from kryo.types.map import DEFAULT_MAX_SIZE, MapOptions, MapType
from kryo.types.record import DocumentType, PropertyDescriptor, RecordOptions, RecordType
from kryo.types.simple_enum import SimpleEnumType
from kryo.types.string import StringType
from kryo.types.union import TryUnionType, UnionOptions, UnionType

__all__ = [
    "BooleanType",
    "StringType",
    "IntegerType",
    "MAX_SAFE_INTEGER",
    "MIN_SAFE_INTEGER",
    "DateType",
    "SimpleEnumType",
    "LiteralType",
    "ArrayType",
    "ArrayOptions",
    "DEFAULT_MAX_LENGTH",
    "RecordType",
    "RecordOptions",
    "PropertyDescriptor",
    "DocumentType",
    "MapType",
    "MapOptions",
    "DEFAULT_MAX_SIZE",
    "UnionType",
    "UnionOptions",
    "TryUnionType",
]
