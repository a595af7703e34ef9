"""Preprocessor constant extraction for the define index."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from artifacts.models.artifacts.defines import DefineEntry

if TYPE_CHECKING:
    from collections.abc import Sequence

OTHER_PREFIX = "OTHER"

# Function-like macros never match: "(" directly after the name is not
# whitespace.
_DEFINE = re.compile(r"^#define\s+([A-Za-z_][A-Za-z0-9_]*)\s+(.+?)(?:\s*//.*)?$")


def define_prefix(name: str, prefixes: Sequence[str]) -> str:
    """Category of a define: its first known prefix without the trailing _."""
    for prefix in prefixes:
        if name.startswith(prefix):
            return prefix.removesuffix("_")
    return OTHER_PREFIX


def parse_defines(text: str, prefixes: Sequence[str]) -> dict[str, DefineEntry]:
    """Parse object-like ``#define NAME VALUE`` lines.

    Names starting with an underscore are treated as private and skipped.
    Later definitions of the same name replace earlier ones.
    """
    defines: dict[str, DefineEntry] = {}

    for index, line in enumerate(text.split("\n")):
        trimmed = line.strip()
        if not trimmed.startswith("#define"):
            continue

        match = _DEFINE.match(trimmed)
        if not match:
            continue

        name = match.group(1)
        value = match.group(2).strip()
        comment_idx = value.find("//")
        if comment_idx != -1:
            value = value[:comment_idx].strip()

        if name.startswith("_"):
            continue

        defines[name] = DefineEntry(
            line=index + 1,
            value=value,
            prefix=define_prefix(name, prefixes),
        )

    return defines


def count_by_prefix(defines: dict[str, DefineEntry]) -> list[tuple[str, int]]:
    """Prefix counts, largest first, ties in first-seen order."""
    counts: dict[str, int] = {}
    for entry in defines.values():
        counts[entry.prefix] = counts.get(entry.prefix, 0) + 1
    return sorted(counts.items(), key=lambda item: -item[1])


__all__ = ["OTHER_PREFIX", "count_by_prefix", "define_prefix", "parse_defines"]
