# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared instances of the common types.

Types are immutable, so these instances can be used everywhere instead of
building equivalent types over and over.
"""

from kryo.types.boolean import BooleanType
from kryo.types.date import DateType
from kryo.types.integer import IntegerType
from kryo.types.string import StringType

BOOLEAN = BooleanType()
STRING = StringType()
DATE = DateType()
INTEGER = IntegerType()

SINT8 = IntegerType(minimum=-(2**7), maximum=2**7 - 1)
SINT16 = IntegerType(minimum=-(2**15), maximum=2**15 - 1)
SINT32 = IntegerType(minimum=-(2**31), maximum=2**31 - 1)
UINT8 = IntegerType(minimum=0, maximum=2**8 - 1)
UINT16 = IntegerType(minimum=0, maximum=2**16 - 1)
UINT32 = IntegerType(minimum=0, maximum=2**32 - 1)

BY_NAME = {
    "boolean": BOOLEAN,
    "string": STRING,
    "date": DATE,
    "integer": INTEGER,
    "sint8": SINT8,
    "sint16": SINT16,
    "sint32": SINT32,
    "uint8": UINT8,
    "uint16": UINT16,
    "uint32": UINT32,
}
"""Builtin types by the name used to reference them in schema files."""
