# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Record type: a dict with a fixed set of declared properties.

In memory a record is a ``dict`` keyed by property name. On the wire each
property appears under its *wire name*, resolved in this order: the property
``rename``, the record-level ``rename`` map, the property ``change_case``, the
record-level ``change_case``, and finally the property name itself.

A property holding ``None`` is absent. Optional properties may be absent;
required ones may not, and an explicit ``None`` for them is a
:class:`~kryo.core.errors.ForbiddenNullError`.

A record diff is a dict with up to three sections, each keyed by property
name: ``"set"`` (new values of properties that became present), ``"unset"``
(old values of properties that became absent) and ``"update"`` (child diffs of
properties present on both sides).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Any

from kryo.core.case_style import CaseStyle, rename
from kryo.core.contract import Lazy, Type, describe_ref, resolve_lazy
from kryo.core.errors import (
    DuplicateWireNameError,
    ExtraKeysError,
    ForbiddenNullError,
    IncompatibleDiffError,
    KryoError,
    MaxDepthError,
    MissingKeysError,
    PropertiesTestError,
    WrongTypeError,
)
from kryo.io.interfaces import DEFAULT_MAX_DEPTH, Reader, ReadVisitor, Writer

# ###############
# Public Interface
# ###############

RecordDiff = dict[str, dict[str, Any]]


@dataclass(frozen=True)
class PropertyDescriptor:
    """Declaration of one record property.

    Attributes:
        type: Type of the property value.
        optional: Whether the property may be absent (or ``None``).
        rename: Explicit wire name.
        change_case: Case style applied to the property name to obtain the wire name.
    """

    type: Type[Any, Any]
    optional: bool = False
    rename: str | None = None
    change_case: CaseStyle | None = None


@dataclass(frozen=True)
class RecordOptions:
    """Configuration of a :class:`RecordType`.

    Attributes:
        properties: Declared properties, in declaration order.
        no_extra_keys: Make undeclared keys a validation error.
        rename: Wire names for properties without their own ``rename``.
        change_case: Case style for properties without an explicit wire name or case style.
    """

    properties: Mapping[str, PropertyDescriptor]
    no_extra_keys: bool = False
    rename: Mapping[str, str] | None = None
    change_case: CaseStyle | None = None
    wire_names: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        if self.rename is not None:
            object.__setattr__(self, "rename", MappingProxyType(dict(self.rename)))
        object.__setattr__(self, "wire_names", MappingProxyType(_resolve_wire_names(self)))


class RecordType(Type[dict[str, Any], RecordDiff]):
    """Describes dicts with declared properties.

    Either pass the options as keywords or pass a :class:`RecordOptions` (or a
    callable returning one, resolved on first use) as the only argument. The
    callable form lets a record reference itself, directly or through other
    types::

        node = RecordType(lambda: RecordOptions(properties={
            "children": PropertyDescriptor(ArrayType(item_type=node), optional=True),
        }))
    """

    name = "record"

    def __init__(
        self,
        options: Lazy[RecordOptions] | None = None,
        *,
        properties: Mapping[str, PropertyDescriptor] | None = None,
        no_extra_keys: bool = False,
        rename: Mapping[str, str] | None = None,
        change_case: CaseStyle | None = None,
    ) -> None:
        if options is None:
            if properties is None:
                raise TypeError("RecordType requires properties")
            options = RecordOptions(
                properties=properties,
                no_extra_keys=no_extra_keys,
                rename=rename,
                change_case=change_case,
            )
        self._options = options
        self._visitor: ReadVisitor[dict[str, Any]] = ReadVisitor(from_record=self._from_record_checked)
        self._trusted_visitor: ReadVisitor[dict[str, Any]] = ReadVisitor(from_record=self._from_record_trusted)
        if not callable(options):
            _ = self.options

    @cached_property
    def options(self) -> RecordOptions:
        return resolve_lazy(self._options, self.name)

    @property
    def properties(self) -> Mapping[str, PropertyDescriptor]:
        return self.options.properties

    def wire_name(self, key: str) -> str:
        """Return the name under which the property *key* appears on the wire."""
        return self.options.wire_names[key]

    def test_error(self, val: Any) -> Exception | None:
        return self.test_error_at(val, 0)

    def test_error_at(self, val: Any, depth: int) -> Exception | None:
        if not isinstance(val, dict):
            return WrongTypeError("record", val)
        properties = self.properties
        if self.options.no_extra_keys:
            extra = [key for key in val if key not in properties]
            if extra:
                return ExtraKeysError(extra)
        for key, prop in properties.items():
            if key in val and val[key] is None and not prop.optional:
                return ForbiddenNullError(key)
        missing = [key for key, prop in properties.items() if not prop.optional and key not in val]
        if missing:
            return MissingKeysError(missing)
        if depth >= DEFAULT_MAX_DEPTH:
            return MaxDepthError(DEFAULT_MAX_DEPTH)
        errors: dict[str, Exception] = {}
        for key, prop in properties.items():
            value = val.get(key)
            if value is None:
                continue
            error = prop.type.test_error_at(value, depth + 1)
            if isinstance(error, MaxDepthError):
                return error
            if error is not None:
                errors[key] = error
        if errors:
            return PropertiesTestError(errors)
        return None

    def read_trusted(self, reader: Reader, raw: Any) -> dict[str, Any]:
        return reader.read_record(raw, self._trusted_visitor)

    def _read_checked(self, reader: Reader, raw: Any) -> dict[str, Any]:
        return reader.read_record(raw, self._visitor)

    def write(self, writer: Writer, val: dict[str, Any]) -> Any:
        wire_to_key = {self.wire_name(key): key for key in self.properties if val.get(key) is not None}

        def write_property(wire: str, field_writer: Writer) -> Any:
            key = wire_to_key[wire]
            return self.properties[key].type.write(field_writer, val[key])

        return writer.write_record(list(wire_to_key), write_property)

    def equals(self, val1: dict[str, Any], val2: dict[str, Any], *, lenient: bool = False) -> bool:
        """Compare two records property by property.

        Records exposing different sets of present properties are not
        comparable: :class:`ExtraKeysError` (keys only present in *val1*) or
        :class:`MissingKeysError` (keys only present in *val2*) is raised,
        unless *lenient* is set, in which case they are simply unequal.
        """
        keys1 = [key for key in self.properties if val1.get(key) is not None]
        keys2 = [key for key in self.properties if val2.get(key) is not None]
        if keys1 != keys2:
            if lenient:
                return False
            extra = [key for key in keys1 if key not in keys2]
            if extra:
                raise ExtraKeysError(extra)
            raise MissingKeysError([key for key in keys2 if key not in keys1])
        return all(self.properties[key].type.equals(val1[key], val2[key]) for key in keys1)

    def clone(self, val: dict[str, Any]) -> dict[str, Any]:
        result = dict(val)
        for key, prop in self.properties.items():
            value = val.get(key)
            if value is not None:
                result[key] = prop.type.clone(value)
        return result

    def diff(self, old_val: dict[str, Any], new_val: dict[str, Any]) -> RecordDiff | None:
        set_: dict[str, Any] = {}
        unset: dict[str, Any] = {}
        update: dict[str, Any] = {}
        for key, prop in self.properties.items():
            old, new = old_val.get(key), new_val.get(key)
            if old is None and new is None:
                continue
            if old is None:
                set_[key] = prop.type.clone(new)
            elif new is None:
                unset[key] = prop.type.clone(old)
            else:
                child_diff = prop.type.diff(old, new)
                if child_diff is not None:
                    update[key] = child_diff
        return _make_diff(set_, unset, update)

    def patch(self, old_val: dict[str, Any], diff: RecordDiff | None) -> dict[str, Any]:
        result = self.clone(old_val)
        if diff is None:
            return result
        for key, value in diff.get("set", {}).items():
            result[key] = self.properties[key].type.clone(value)
        for key in diff.get("unset", {}):
            result.pop(key, None)
        for key, child_diff in diff.get("update", {}).items():
            result[key] = self.properties[key].type.patch(old_val[key], child_diff)
        return result

    def reverse_diff(self, diff: RecordDiff | None) -> RecordDiff | None:
        if diff is None:
            return None
        update = {
            key: self.properties[key].type.reverse_diff(child_diff)
            for key, child_diff in diff.get("update", {}).items()
        }
        return _make_diff(dict(diff.get("unset", {})), dict(diff.get("set", {})), update)

    def squash(self, diff1: RecordDiff | None, diff2: RecordDiff | None) -> RecordDiff | None:
        if diff1 is None:
            return diff2
        if diff2 is None:
            return diff1
        set_: dict[str, Any] = {}
        unset: dict[str, Any] = {}
        update: dict[str, Any] = {}
        for key, prop in self.properties.items():
            first = _section_of(diff1, key)
            second = _section_of(diff2, key)
            if first is None and second is None:
                continue
            if second is None:
                _put(first, diff1, key, set_, unset, update)
                continue
            if first is None:
                _put(second, diff2, key, set_, unset, update)
                continue
            item_type = prop.type
            transition = (first, second)
            if transition == ("set", "update"):
                set_[key] = item_type.patch(diff1["set"][key], diff2["update"][key])
            elif transition == ("set", "unset"):
                pass
            elif transition == ("update", "update"):
                child_diff = item_type.squash(diff1["update"][key], diff2["update"][key])
                if child_diff is not None:
                    update[key] = child_diff
            elif transition == ("update", "unset"):
                unset[key] = item_type.patch(diff2["unset"][key], item_type.reverse_diff(diff1["update"][key]))
            elif transition == ("unset", "set"):
                child_diff = item_type.diff(diff1["unset"][key], diff2["set"][key])
                if child_diff is not None:
                    update[key] = child_diff
            else:
                raise IncompatibleDiffError(self.name, first, second, key)
        return _make_diff(set_, unset, update)

    def to_update_query(self, new_val: dict[str, Any], diff: RecordDiff | None, writer: Writer) -> dict[str, Any]:
        """Convert *diff* into a document-store partial update.

        Returns ``{"$set": {wire_name: encoded}, "$unset": {wire_name: True}}``;
        every set or updated property is encoded from *new_val* with its own type.
        """
        query: dict[str, dict[str, Any]] = {"$set": {}, "$unset": {}}
        if diff is None:
            return query
        for key in diff.get("unset", {}):
            query["$unset"][self.wire_name(key)] = True
        for section in ("set", "update"):
            for key in diff.get(section, {}):
                query["$set"][self.wire_name(key)] = self.properties[key].type.write(writer, new_val[key])
        return query

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        for key, prop in self.properties.items():
            entry: dict[str, Any] = {"type": describe_ref(prop.type, names)}
            if prop.optional:
                entry["optional"] = True
            if prop.rename is not None:
                entry["rename"] = prop.rename
            if prop.change_case is not None:
                entry["change-case"] = prop.change_case.value
            properties[key] = entry
        descriptor: dict[str, Any] = {"kind": self.name, "properties": properties}
        if self.options.no_extra_keys:
            descriptor["no-extra-keys"] = True
        if self.options.rename:
            descriptor["rename"] = dict(self.options.rename)
        if self.options.change_case is not None:
            descriptor["change-case"] = self.options.change_case.value
        return descriptor

    def __repr__(self) -> str:
        if "options" not in self.__dict__:
            return "RecordType(<lazy>)"
        return f"RecordType(properties={list(self.properties)})"

    def _from_record_checked(self, fields: dict[str, Any], reader: Reader) -> dict[str, Any]:
        result: dict[str, Any] = {}
        errors: dict[str, Exception] = {}
        missing: list[str] = []
        for key, prop in self.properties.items():
            wire = self.wire_name(key)
            raw = fields.get(wire)
            if raw is None:
                if prop.optional:
                    continue
                if wire in fields:
                    errors[key] = ForbiddenNullError(key)
                else:
                    missing.append(key)
                continue
            try:
                result[key] = prop.type.read(reader, raw)
            except MaxDepthError:
                raise
            except KryoError as exc:
                errors[key] = exc
        if missing:
            raise MissingKeysError(missing)
        if errors:
            raise PropertiesTestError(errors)
        return result

    def _from_record_trusted(self, fields: dict[str, Any], reader: Reader) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, prop in self.properties.items():
            raw = fields.get(self.wire_name(key))
            if raw is not None:
                result[key] = prop.type.read_trusted(reader, raw)
        return result


DocumentType = RecordType
"""Historical name of :class:`RecordType`."""


# ################
# Implementation
# ################

_SECTIONS = ("set", "unset", "update")


def _resolve_wire_names(options: RecordOptions) -> dict[str, str]:
    """Compute the wire name of every property and reject collisions."""
    wire_names: dict[str, str] = {}
    owners: dict[str, str] = {}
    for key, prop in options.properties.items():
        if prop.rename is not None:
            wire = prop.rename
        elif options.rename is not None and key in options.rename:
            wire = options.rename[key]
        elif prop.change_case is not None:
            wire = rename(key, prop.change_case)
        elif options.change_case is not None:
            wire = rename(key, options.change_case)
        else:
            wire = key
        if wire in owners:
            raise DuplicateWireNameError(wire, [owners[wire], key])
        owners[wire] = key
        wire_names[key] = wire
    return wire_names


def _section_of(diff: RecordDiff, key: str) -> str | None:
    for section in _SECTIONS:
        if key in diff.get(section, {}):
            return section
    return None


def _put(
    section: str,
    diff: RecordDiff,
    key: str,
    set_: dict[str, Any],
    unset: dict[str, Any],
    update: dict[str, Any],
) -> None:
    target = {"set": set_, "unset": unset, "update": update}[section]
    target[key] = diff[section][key]


def _make_diff(set_: dict[str, Any], unset: dict[str, Any], update: dict[str, Any]) -> RecordDiff | None:
    diff: RecordDiff = {}
    if set_:
        diff["set"] = set_
    if unset:
        diff["unset"] = unset
    if update:
        diff["update"] = update
    return diff or None
