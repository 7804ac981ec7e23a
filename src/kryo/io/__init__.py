# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reader and writer capabilities and their JSON, BSON and query-string bindings."""

from kryo.io.bson import BsonReader, BsonWriter
from kryo.io.interfaces import DEFAULT_MAX_DEPTH, Reader, ReadVisitor, Writer
from kryo.io.json import JsonReader, JsonWriter, dumps, loads
from kryo.io.qs import QsReader, QsWriter

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Reader",
    "ReadVisitor",
    "Writer",
    "JsonReader",
    "JsonWriter",
    "dumps",
    "loads",
    "BsonReader",
    "BsonWriter",
    "QsReader",
    "QsWriter",
]
