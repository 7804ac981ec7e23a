# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Traversal of the child types of composite types.

Children are reported with the key under which their parent holds them:
the property name for records, ``None`` for the item type of arrays,
``"key"`` and ``"value"`` for maps and the variant index for unions. Each
composite is descended into once, so recursive schemas terminate.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from kryo.core.contract import Type
from kryo.types.array import ArrayType
from kryo.types.map import MapType
from kryo.types.record import RecordType
from kryo.types.union import UnionType

# ###############
# Public Interface
# ###############

ChildKey = str | int | None
Visitor = Callable[[Type[Any, Any], ChildKey, Type[Any, Any]], None]


def children(type_: Type[Any, Any]) -> Iterator[tuple[ChildKey, Type[Any, Any]]]:
    """Yield ``(key, child)`` for the direct children of *type_*.

    Leaf types have no children. Lazy options are resolved.
    """
    if isinstance(type_, RecordType):
        for key, prop in type_.properties.items():
            yield key, prop.type
    elif isinstance(type_, ArrayType):
        yield None, type_.item_type
    elif isinstance(type_, MapType):
        yield "key", type_.key_type
        yield "value", type_.value_type
    elif isinstance(type_, UnionType):
        yield from enumerate(type_.variants)


def walk(type_: Type[Any, Any], visitor: Visitor) -> None:
    """Call ``visitor(child, key, parent)`` for every child type reachable from *type_*.

    Children are visited depth-first in declaration order. A child seen again
    is reported again but not descended into a second time.
    """
    _walk(type_, visitor, {id(type_)})


def collect_types(type_: Type[Any, Any]) -> list[Type[Any, Any]]:
    """Return every distinct type reachable from *type_*, *type_* first."""
    found: dict[int, Type[Any, Any]] = {id(type_): type_}

    def record(child: Type[Any, Any], key: ChildKey, parent: Type[Any, Any]) -> None:
        found.setdefault(id(child), child)

    walk(type_, record)
    return list(found.values())


# ################
# Implementation
# ################


def _walk(parent: Type[Any, Any], visitor: Visitor, visited: set[int]) -> None:
    for key, child in children(parent):
        visitor(child, key, parent)
        if id(child) not in visited:
            visited.add(id(child))
            _walk(child, visitor, visited)
