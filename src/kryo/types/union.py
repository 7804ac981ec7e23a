# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Union types: a value belongs to one of several variant types.

A :class:`UnionType` delegates every operation to the variant selected by its
matchers. :class:`TryUnionType` derives both matchers from the variants
themselves by trying them in declaration order, so the first variant that
accepts a value wins even if a later one would fit it more precisely. Declare
the most specific variants first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from kryo.core.contract import Lazy, Type, describe_ref, resolve_lazy
from kryo.core.errors import (
    IncompatibleDiffError,
    KryoError,
    MaxDepthError,
    NoMatchingVariantError,
    NotImplementedOperationError,
)
from kryo.io.interfaces import Reader, Writer

# ###############
# Public Interface
# ###############

Matcher = Callable[[Any], Type[Any, Any] | None]
ReadMatcher = Callable[[Reader, Any], Type[Any, Any] | None]
UnionDiff = dict[str, Any]


@dataclass(frozen=True)
class UnionOptions:
    """Configuration of a :class:`UnionType`.

    Attributes:
        variants: Candidate types, in declaration order.
        matcher: Returns the variant of an in-memory value, or ``None``.
        read_matcher: Returns the variant to decode a raw value with, or ``None``.
    """

    variants: Sequence[Type[Any, Any]]
    matcher: Matcher
    read_matcher: ReadMatcher

    def __post_init__(self) -> None:
        object.__setattr__(self, "variants", tuple(self.variants))


class UnionType(Type[Any, UnionDiff]):
    """Describes values matching one of several variants.

    A diff between two values of the same variant is
    ``{"variant": index, "diff": variant_diff}``; a diff crossing variants
    replaces the value: ``{"old": old_value, "new": new_value}``.
    """

    name = "union"

    def __init__(
        self,
        options: Lazy[UnionOptions] | None = None,
        *,
        variants: Sequence[Type[Any, Any]] | None = None,
        matcher: Matcher | None = None,
        read_matcher: ReadMatcher | None = None,
    ) -> None:
        if options is None:
            if variants is None or matcher is None or read_matcher is None:
                raise TypeError("UnionType requires variants, a matcher and a read matcher")
            options = UnionOptions(variants=variants, matcher=matcher, read_matcher=read_matcher)
        self._options = options
        if not callable(options):
            _ = self.options

    @cached_property
    def options(self) -> UnionOptions:
        return resolve_lazy(self._options, self.name)

    @property
    def variants(self) -> tuple[Type[Any, Any], ...]:
        return tuple(self.options.variants)

    def match(self, val: Any) -> Type[Any, Any]:
        """Return the variant of *val*.

        Raises:
            NoMatchingVariantError: If no variant matches.
        """
        variant = self.options.matcher(val)
        if variant is None:
            raise NoMatchingVariantError(val)
        return variant

    def test_error(self, val: Any) -> Exception | None:
        return self.test_error_at(val, 0)

    def test_error_at(self, val: Any, depth: int) -> Exception | None:
        variant = self.options.matcher(val)
        if variant is None:
            return NoMatchingVariantError(val)
        return variant.test_error_at(val, depth)

    def read_trusted(self, reader: Reader, raw: Any) -> Any:
        return self._match_raw(reader, raw).read_trusted(reader, raw)

    def _read_checked(self, reader: Reader, raw: Any) -> Any:
        return self._match_raw(reader, raw).read(reader, raw)

    def write(self, writer: Writer, val: Any) -> Any:
        return self.match(val).write(writer, val)

    def equals(self, val1: Any, val2: Any) -> bool:
        variant = self.match(val1)
        if self.match(val2) is not variant:
            return False
        return variant.equals(val1, val2)

    def clone(self, val: Any) -> Any:
        return self.match(val).clone(val)

    def diff(self, old_val: Any, new_val: Any) -> UnionDiff | None:
        old_variant = self.match(old_val)
        new_variant = self.match(new_val)
        if old_variant is not new_variant:
            return {"old": old_variant.clone(old_val), "new": new_variant.clone(new_val)}
        variant_diff = old_variant.diff(old_val, new_val)
        if variant_diff is None:
            return None
        return {"variant": self._index_of(old_variant, old_val), "diff": variant_diff}

    def patch(self, old_val: Any, diff: UnionDiff | None) -> Any:
        if diff is None:
            return self.clone(old_val)
        if "variant" in diff:
            return self.variants[diff["variant"]].patch(old_val, diff["diff"])
        return self.clone(diff["new"])

    def reverse_diff(self, diff: UnionDiff | None) -> UnionDiff | None:
        if diff is None:
            return None
        if "variant" in diff:
            variant = self.variants[diff["variant"]]
            return {"variant": diff["variant"], "diff": variant.reverse_diff(diff["diff"])}
        return {"old": diff["new"], "new": diff["old"]}

    def squash(self, diff1: UnionDiff | None, diff2: UnionDiff | None) -> UnionDiff | None:
        if diff1 is None:
            return diff2
        if diff2 is None:
            return diff1
        if "variant" in diff1 and "variant" in diff2:
            if diff1["variant"] != diff2["variant"]:
                raise IncompatibleDiffError(self.name, diff1["variant"], diff2["variant"])
            variant = self.variants[diff1["variant"]]
            variant_diff = variant.squash(diff1["diff"], diff2["diff"])
            if variant_diff is None:
                return None
            return {"variant": diff1["variant"], "diff": variant_diff}
        if "variant" in diff1:
            old_val = self.patch(diff2["old"], self.reverse_diff(diff1))
            return self.diff(old_val, diff2["new"])
        if "variant" in diff2:
            return self.diff(diff1["old"], self.patch(diff1["new"], diff2))
        return self.diff(diff1["old"], diff2["new"])

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        return {"kind": self.name, "variants": [describe_ref(variant, names) for variant in self.variants]}

    def __repr__(self) -> str:
        if "options" not in self.__dict__:
            return f"{type(self).__name__}(<lazy>)"
        return f"{type(self).__name__}(variants={list(self.variants)!r})"

    def _match_raw(self, reader: Reader, raw: Any) -> Type[Any, Any]:
        variant = self.options.read_matcher(reader, raw)
        if variant is None:
            raise NoMatchingVariantError(raw)
        return variant

    def _index_of(self, variant: Type[Any, Any], val: Any) -> int:
        for index, candidate in enumerate(self.variants):
            if candidate is variant:
                return index
        # The matcher returned a type that is not declared as a variant.
        raise NoMatchingVariantError(val)


class TryUnionType(UnionType):
    """Union whose matchers try each variant in declaration order.

    In memory, the first variant whose ``test`` passes matches. When decoding,
    each variant attempts a full read and the first successful decode is
    returned as is.

    TryUnion types support neither the diff operations nor ``describe``.
    """

    name = "try-union"

    def __init__(self, variants: Lazy[Sequence[Type[Any, Any]]]) -> None:
        self._variants = variants
        super().__init__(self._build_options if callable(variants) else self._build_options())

    def test_error_at(self, val: Any, depth: int) -> Exception | None:
        for variant in self.variants:
            error = variant.test_error_at(val, depth)
            if error is None or isinstance(error, MaxDepthError):
                return error
        return NoMatchingVariantError(val)

    def read_trusted(self, reader: Reader, raw: Any) -> Any:
        for variant in self.variants:
            try:
                value = variant.read_trusted(reader, raw)
            except MaxDepthError:
                raise
            except KryoError as exc:
                logger.debug("Variant %r rejected trusted input: %s", variant, exc)
                continue
            if variant.test(value):
                return value
        raise NoMatchingVariantError(raw)

    def _read_checked(self, reader: Reader, raw: Any) -> Any:
        for variant in self.variants:
            try:
                return variant.read(reader, raw)
            except MaxDepthError:
                raise
            except KryoError as exc:
                logger.debug("Variant %r rejected input: %s", variant, exc)
        raise NoMatchingVariantError(raw)

    def diff(self, old_val: Any, new_val: Any) -> UnionDiff | None:
        raise NotImplementedOperationError("try-union.diff")

    def patch(self, old_val: Any, diff: UnionDiff | None) -> Any:
        raise NotImplementedOperationError("try-union.patch")

    def reverse_diff(self, diff: UnionDiff | None) -> UnionDiff | None:
        raise NotImplementedOperationError("try-union.reverse_diff")

    def squash(self, diff1: UnionDiff | None, diff2: UnionDiff | None) -> UnionDiff | None:
        raise NotImplementedOperationError("try-union.squash")

    def describe(self, names: dict[Type[Any, Any], str] | None = None) -> dict[str, Any]:
        raise NotImplementedOperationError("try-union.describe")

    def _build_options(self) -> UnionOptions:
        variants = tuple(resolve_lazy(self._variants, self.name))

        def matcher(val: Any) -> Type[Any, Any] | None:
            for variant in variants:
                if variant.test(val):
                    return variant
            return None

        def read_matcher(reader: Reader, raw: Any) -> Type[Any, Any] | None:
            for variant in variants:
                try:
                    variant.read(reader, raw)
                except MaxDepthError:
                    raise
                except KryoError:
                    continue
                return variant
            return None

        return UnionOptions(variants=variants, matcher=matcher, read_matcher=read_matcher)


# ################
# Implementation
# ################

logger = logging.getLogger(__name__)
