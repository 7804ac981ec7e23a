# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Identifier case conversions used to derive wire names."""

from __future__ import annotations

import re
from enum import Enum

# ###############
# Public Interface
# ###############


class CaseStyle(Enum):
    """Naming conventions applied to property keys and enum members."""

    CAMEL_CASE = "camel-case"
    PASCAL_CASE = "pascal-case"
    SNAKE_CASE = "snake-case"
    SCREAMING_SNAKE_CASE = "screaming-snake-case"
    KEBAB_CASE = "kebab-case"


def split_words(identifier: str) -> list[str]:
    """Split an identifier written in any supported style into lower-case words.

    ``"BlockStatement"``, ``"blockStatement"``, ``"block_statement"`` and
    ``"BLOCK_STATEMENT"`` all yield ``["block", "statement"]``. Acronyms are kept
    together (``"parseHTTPRequest"`` yields ``["parse", "http", "request"]``).
    """
    words: list[str] = []
    for chunk in _SEPARATORS.split(identifier):
        words.extend(match.lower() for match in _WORD.findall(chunk))
    return words


def rename(identifier: str, style: CaseStyle) -> str:
    """Rewrite *identifier* in the given case *style*."""
    words = split_words(identifier)
    if style is CaseStyle.CAMEL_CASE:
        return "".join(words[:1] + [word.capitalize() for word in words[1:]])
    if style is CaseStyle.PASCAL_CASE:
        return "".join(word.capitalize() for word in words)
    if style is CaseStyle.SNAKE_CASE:
        return "_".join(words)
    if style is CaseStyle.SCREAMING_SNAKE_CASE:
        return "_".join(words).upper()
    return "-".join(words)


# ################
# Implementation
# ################

_SEPARATORS = re.compile(r"[\s_\-]+")
_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")
