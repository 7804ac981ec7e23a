# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""The contract implemented by every kryo type.

A type is immutable configuration plus pure functions over the values it
describes. It never holds instance data: the same type object is shared by
every caller for the lifetime of the program.

Composite types accept their options either directly or as a zero-argument
callable (:data:`Lazy`). A callable is evaluated on first use, exactly once,
which lets mutually recursive schemas reference each other before all of them
exist.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from kryo.io.interfaces import Reader, Writer

# ###############
# Public Interface
# ###############

T = TypeVar("T")
D = TypeVar("D")
O = TypeVar("O")  # noqa: E741

Lazy = O | Callable[[], O]
"""Options given either directly or as a producer evaluated once on first use."""


class Type(ABC, Generic[T, D]):
    """Describes the values of one logical shape ``T`` whose diffs are ``D``.

    ``test_error`` never raises. All the other operations raise a
    :class:`~kryo.core.errors.KryoError` on invalid input or when the type does
    not implement them.
    """

    name: str = "any"

    @abstractmethod
    def test_error(self, val: Any) -> Exception | None:
        """Return the first violation found in *val*, or ``None`` if it is valid."""

    def test(self, val: Any) -> bool:
        """Return True if *val* is a valid value of this type."""
        return self.test_error(val) is None

    def test_error_at(self, val: Any, depth: int) -> Exception | None:
        """Validate *val* found *depth* structures below the value being tested.

        Composite types override this to bound the nesting of in-memory values,
        mirroring the depth limit of readers. Leaf types ignore *depth*.
        """
        return self.test_error(val)

    def read(self, reader: Reader, raw: Any) -> T:
        """Decode and validate *raw*.

        Readers built with ``trust_input=True`` take the :meth:`read_trusted`
        fast path.
        """
        if reader.trust_input:
            return self.read_trusted(reader, raw)
        return self._read_checked(reader, raw)

    @abstractmethod
    def read_trusted(self, reader: Reader, raw: Any) -> T:
        """Decode *raw* produced by :meth:`write`, skipping every constraint check."""

    @abstractmethod
    def write(self, writer: Writer, val: T) -> Any:
        """Encode a valid *val* with *writer*."""

    @abstractmethod
    def equals(self, val1: T, val2: T) -> bool: ...

    @abstractmethod
    def clone(self, val: T) -> T: ...

    @abstractmethod
    def diff(self, old_val: T, new_val: T) -> D | None:
        """Return the change from *old_val* to *new_val*, ``None`` if they are equal."""

    @abstractmethod
    def patch(self, old_val: T, diff: D | None) -> T:
        """Apply *diff* to *old_val* and return the new value. *old_val* is not mutated."""

    @abstractmethod
    def reverse_diff(self, diff: D | None) -> D | None:
        """Return the diff undoing *diff*."""

    @abstractmethod
    def squash(self, diff1: D | None, diff2: D | None) -> D | None:
        """Compose two consecutive diffs into one."""

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        """Return a serializable descriptor of this type.

        Child types found in *names* are referenced by name instead of being
        described inline, which is required for recursive schemas.
        """
        return {"kind": self.name}

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    @abstractmethod
    def _read_checked(self, reader: Reader, raw: Any) -> T:
        """Decode *raw* and enforce every constraint of the type."""


def describe_ref(type_: Type[Any, Any], names: dict[Type[Any, Any], str] | None) -> Any:
    """Return the name of *type_* in *names*, or its inline descriptor."""
    if names is not None and type_ in names:
        return names[type_]
    return type_.describe(names)


def resolve_lazy(options: Lazy[O], owner: str) -> O:
    """Evaluate lazy *options* for the type named *owner*."""
    if callable(options):
        logger.debug("Resolving lazy options of %s", owner)
        return options()
    return options


# ################
# Implementation
# ################

logger = logging.getLogger(__name__)
