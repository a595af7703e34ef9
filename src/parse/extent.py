"""Brace-depth extent recovery.

Braces are counted per character with no awareness of string literals or
comments, so a ``{`` inside a literal shifts the result. Callers rely on
this matching the extents already published, so it is left as is.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

FALLBACK_WINDOW = 50

_CASE_BOUNDARY = re.compile(r"^\s*(?:case\s+|default\s*:|break\s*;)")
_BLOCK_CLOSE = re.compile(r"^\s*}\s*$")


def find_block_end(lines: Sequence[str], start_index: int) -> int:
    """Return the 1-based line closing the block opened at or after start_index.

    Without a balancing close brace the end is capped at FALLBACK_WINDOW
    lines past the start (or the end of the file).
    """
    depth = 0
    opened = False

    for i in range(start_index, len(lines)):
        for char in lines[i]:
            if char == "{":
                depth += 1
                opened = True
            elif char == "}":
                depth -= 1
                if opened and depth == 0:
                    return i + 1

    return min(start_index + FALLBACK_WINDOW, len(lines))


def find_case_end(lines: Sequence[str], case_index: int) -> int:
    """Return the 1-based last line of the switch branch at case_index.

    The branch runs up to and including the next ``case``, ``default:`` or
    ``break;`` line, or stops just before a line holding only ``}``.
    """
    for j in range(case_index + 1, len(lines)):
        line = lines[j]
        if _CASE_BOUNDARY.match(line):
            return j + 1
        if _BLOCK_CLOSE.match(line):
            return j
    return case_index + 1


def count_braces(line: str) -> int:
    """Net brace depth change contributed by ``line``."""
    return line.count("{") - line.count("}")


__all__ = ["FALLBACK_WINDOW", "count_braces", "find_block_end", "find_case_end"]
