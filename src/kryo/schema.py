# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""YAML schema files describing named kryo types.

A schema file maps type names to descriptors::

    types:
      Point:
        kind: record
        no-extra-keys: true
        properties:
          x: {type: sint32}
          label: {type: {kind: string, max-length: 20}, optional: true}

Wherever a type is expected, a descriptor may instead reference a builtin type
(``boolean``, ``string``, ``date``, ``integer``, ``sint8`` ... ``uint32``) or
another type of the file by name. References to named types resolve lazily, so
types may reference themselves and each other in any order.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kryo.builtins import BY_NAME
from kryo.core.case_style import CaseStyle
from kryo.core.contract import Type
from kryo.core.errors import KryoError
from kryo.io.json import JsonReader
from kryo.reflect import collect_types
from kryo.types.array import DEFAULT_MAX_LENGTH, ArrayOptions, ArrayType
from kryo.types.boolean import BooleanType
from kryo.types.date import DateType
from kryo.types.integer import MAX_SAFE_INTEGER, MIN_SAFE_INTEGER, IntegerType
from kryo.types.literal import LiteralType
from kryo.types.map import DEFAULT_MAX_SIZE, MapOptions, MapType
from kryo.types.record import PropertyDescriptor, RecordOptions, RecordType
from kryo.types.simple_enum import SimpleEnumType
from kryo.types.string import StringType
from kryo.types.union import TryUnionType

# ###############
# Public Interface
# ###############


class SchemaConfigError(Exception):
    """Raised when a schema file cannot be loaded or describes invalid types."""


class BooleanDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["boolean"]


class DateDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["date"]


class StringDescriptor(BaseModel):
    """Options of a string type; see :class:`~kryo.types.string.StringType`."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["string"]
    unicode_normalization: bool = Field(alias="unicode-normalization", default=False)
    lower_case: bool = Field(alias="lower-case", default=False)
    trimmed: bool = False
    min_length: int | None = Field(alias="min-length", default=None)
    max_length: int | None = Field(alias="max-length", default=None)
    pattern: str | None = None


class IntegerDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["integer"]
    minimum: int = MIN_SAFE_INTEGER
    maximum: int = MAX_SAFE_INTEGER


class SimpleEnumDescriptor(BaseModel):
    """An enumeration generated from the listed member names."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["simple-enum"]
    values: list[str] = Field(min_length=1)
    rename: CaseStyle | None = None


class LiteralDescriptor(BaseModel):
    """A literal; *value* is given in the JSON encoding of *type*."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["literal"]
    type: "TypeRef"
    value: Any


class ArrayDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["array"]
    items: "TypeRef"
    max_length: int | None = Field(alias="max-length", default=DEFAULT_MAX_LENGTH)
    nullable_items: bool = Field(alias="nullable-items", default=False)


class PropertyModel(BaseModel):
    """A record property."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: "TypeRef"
    optional: bool = False
    rename: str | None = None
    change_case: CaseStyle | None = Field(alias="change-case", default=None)


class RecordDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["record"]
    properties: dict[str, PropertyModel]
    no_extra_keys: bool = Field(alias="no-extra-keys", default=False)
    rename: dict[str, str] | None = None
    change_case: CaseStyle | None = Field(alias="change-case", default=None)


class MapDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["map"]
    keys: "TypeRef"
    values: "TypeRef"
    max_size: int = Field(alias="max-size", default=DEFAULT_MAX_SIZE)


class TryUnionDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["try-union"]
    variants: list["TypeRef"] = Field(min_length=1)


Descriptor = Annotated[
    BooleanDescriptor
    | DateDescriptor
    | StringDescriptor
    | IntegerDescriptor
    | SimpleEnumDescriptor
    | LiteralDescriptor
    | ArrayDescriptor
    | RecordDescriptor
    | MapDescriptor
    | TryUnionDescriptor,
    Field(discriminator="kind"),
]

TypeRef = str | Descriptor
"""A builtin type name, the name of a type declared in the schema, or an inline descriptor."""


class Schema(BaseModel):
    """Top-level model of a schema file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    types: dict[str, Descriptor] = Field(default_factory=dict)


def load_schema(path: Path) -> dict[str, Type[Any, Any]]:
    """Load a schema file and build its types.

    An empty file is treated as a schema without types.

    Args:
        path: Path to the YAML schema file.

    Returns:
        The declared types by name, in declaration order.

    Raises:
        SchemaConfigError: If the file cannot be read, contains invalid YAML,
            does not conform to the schema model or references unknown types.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SchemaConfigError(f"Schema file not found: {path}") from None
    except OSError as exc:
        raise SchemaConfigError(f"Cannot read schema file: {exc}") from exc

    types = parse_schema(text, source_label=str(path))
    logger.info("Loaded %d types from %s", len(types), path)
    return types


def parse_schema(text: str, source_label: str = "<string>") -> dict[str, Type[Any, Any]]:
    """Parse schema YAML text and build its types.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        SchemaConfigError: If the YAML or the descriptors are invalid.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SchemaConfigError(f"{source_label}: schema must be a YAML mapping")

    try:
        schema = Schema.model_validate(data)
    except ValidationError as exc:
        raise SchemaConfigError(f"Invalid schema {source_label}: {exc}") from exc

    return build_types(schema, source_label=source_label)


def build_types(schema: Schema, source_label: str = "<string>") -> dict[str, Type[Any, Any]]:
    """Build the types declared by *schema*.

    Every reference is resolved before returning, so an invalid schema fails
    here rather than on first use of one of its types.

    Raises:
        SchemaConfigError: If a name is reused or unknown, or a descriptor is invalid.
    """
    for name in schema.types:
        if name in BY_NAME:
            raise SchemaConfigError(f"{source_label}: type name '{name}' is reserved for a builtin type")

    builder = _Builder(schema.types, source_label)
    types = {name: builder.named(name) for name in schema.types}
    for name, type_ in types.items():
        logger.debug("Resolving references of type '%s'", name)
        try:
            collect_types(type_)
        except (KryoError, ValueError) as exc:
            raise SchemaConfigError(f"{source_label}: invalid type '{name}': {exc}") from exc
    return types


def describe(type_: Type[Any, Any], names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
    """Return the descriptor of *type_*, in the format of schema files.

    Builtin types and the types found in *names* are referenced by name.

    Raises:
        NotImplementedOperationError: For map and try-union types.
    """
    return type_.describe(_with_builtins(names))


def describe_schema(types: dict[str, Type[Any, Any]]) -> dict[str, Any]:
    """Return the content of a schema file declaring *types*."""
    names = _with_builtins({type_: name for name, type_ in types.items()})
    return {"types": {name: type_.describe(names) for name, type_ in types.items()}}


def dump_schema(types: dict[str, Type[Any, Any]], path: Path) -> None:
    """Write a schema file declaring *types*.

    Raises:
        SchemaConfigError: If the file cannot be written.
    """
    data = describe_schema(types)
    try:
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False), encoding="utf-8")
    except OSError as exc:
        raise SchemaConfigError(f"Cannot write schema file '{path}': {exc}") from exc


# ################
# Implementation
# ################

logger = logging.getLogger(__name__)

for _model in (
    LiteralDescriptor,
    ArrayDescriptor,
    PropertyModel,
    RecordDescriptor,
    MapDescriptor,
    TryUnionDescriptor,
    Schema,
):
    _model.model_rebuild()


def _with_builtins(names: dict[Type[Any, Any], str] | None) -> dict[Type[Any, Any], str]:
    result: dict[Type[Any, Any], str] = {type_: name for name, type_ in BY_NAME.items()}
    if names:
        result.update(names)
    return result


class _Builder:
    """Builds types from descriptors, memoizing named types."""

    def __init__(self, descriptors: dict[str, Any], source_label: str) -> None:
        self.descriptors = descriptors
        self.source_label = source_label
        self.built: dict[str, Type[Any, Any]] = {}

    def named(self, name: str) -> Type[Any, Any]:
        if name not in self.built:
            logger.debug("Building type '%s'", name)
            # Composites are registered before their children are resolved.
            self.built[name] = self.build(self.descriptors[name], name)
        return self.built[name]

    def ref(self, ref: Any) -> Type[Any, Any]:
        if isinstance(ref, str):
            if ref in BY_NAME:
                return BY_NAME[ref]
            if ref in self.descriptors:
                return self.named(ref)
            raise SchemaConfigError(f"{self.source_label}: unknown type '{ref}'")
        return self.build(ref, None)

    def build(self, descriptor: Any, name: str | None) -> Type[Any, Any]:  # noqa: PLR0911
        if isinstance(descriptor, BooleanDescriptor):
            return BooleanType()
        if isinstance(descriptor, DateDescriptor):
            return DateType()
        if isinstance(descriptor, StringDescriptor):
            return StringType(
                unicode_normalization=descriptor.unicode_normalization,
                lower_case=descriptor.lower_case,
                trimmed=descriptor.trimmed,
                min_length=descriptor.min_length,
                max_length=descriptor.max_length,
                pattern=descriptor.pattern,
            )
        if isinstance(descriptor, IntegerDescriptor):
            return self._integer(descriptor)
        if isinstance(descriptor, SimpleEnumDescriptor):
            return self._simple_enum(descriptor, name)
        if isinstance(descriptor, LiteralDescriptor):
            return self._literal(descriptor)
        if isinstance(descriptor, ArrayDescriptor):
            return ArrayType(
                lambda: ArrayOptions(
                    item_type=self.ref(descriptor.items),
                    max_length=descriptor.max_length,
                    nullable_items=descriptor.nullable_items,
                )
            )
        if isinstance(descriptor, RecordDescriptor):
            return RecordType(lambda: self._record_options(descriptor))
        if isinstance(descriptor, MapDescriptor):
            return MapType(
                lambda: MapOptions(
                    key_type=self.ref(descriptor.keys),
                    value_type=self.ref(descriptor.values),
                    max_size=descriptor.max_size,
                )
            )
        return TryUnionType(lambda: [self.ref(variant) for variant in descriptor.variants])

    def _simple_enum(self, descriptor: SimpleEnumDescriptor, name: str | None) -> SimpleEnumType[Any]:
        try:
            enum = Enum(name or "AnonymousEnum", [(value, value) for value in descriptor.values])  # type: ignore[misc]
            return SimpleEnumType(enum, rename=descriptor.rename)
        except (TypeError, ValueError, KryoError) as exc:
            message = f"{self.source_label}: invalid simple-enum values {descriptor.values}: {exc}"
            raise SchemaConfigError(message) from exc

    def _integer(self, descriptor: IntegerDescriptor) -> IntegerType:
        try:
            return IntegerType(minimum=descriptor.minimum, maximum=descriptor.maximum)
        except ValueError as exc:
            raise SchemaConfigError(f"{self.source_label}: {exc}") from exc

    def _literal(self, descriptor: LiteralDescriptor) -> LiteralType[Any]:
        type_ = self.ref(descriptor.type)
        try:
            value = type_.read(JsonReader(), descriptor.value)
            return LiteralType(type_, value)
        except KryoError as exc:
            raise SchemaConfigError(f"{self.source_label}: invalid literal {descriptor.value!r}: {exc}") from exc

    def _record_options(self, descriptor: RecordDescriptor) -> RecordOptions:
        properties = {
            key: PropertyDescriptor(
                type=self.ref(prop.type),
                optional=prop.optional,
                rename=prop.rename,
                change_case=prop.change_case,
            )
            for key, prop in descriptor.properties.items()
        }
        return RecordOptions(
            properties=properties,
            no_extra_keys=descriptor.no_extra_keys,
            rename=descriptor.rename,
            change_case=descriptor.change_case,
        )
