"""Extraction of script functions implemented as dispatcher switch cases."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from artifacts.models.artifacts.symbols import SourceLocation, SymbolRecord
from parse.extent import count_braces, find_case_end

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

_CASE_LABEL = re.compile(r"^\s*case\s+([A-Z_][A-Z0-9_]*)\s*:")


def _routine_pattern(routine: str) -> re.Pattern[str]:
    return re.compile(
        rf"^\s*(?:static\s+)?void\s+{re.escape(routine)}\s*"
        r"\(\s*(?:fallout::)?Program\s*\*\s*\w+\s*\)"
    )


def extract_dispatch_cases(
    lines: Sequence[str],
    relative_path: str,
    dispatch_keys: Collection[str],
    *,
    routine: str = "opMetarule",
) -> list[SymbolRecord]:
    """Locate case branches inside the dispatch routine.

    Only keys in ``dispatch_keys`` produce records, named by their key.
    """
    routine_start = _routine_pattern(routine)
    records: list[SymbolRecord] = []

    in_routine = False
    depth = 0

    for index, line in enumerate(lines):
        if routine_start.match(line):
            in_routine = True
            depth = 0

        if not in_routine:
            continue

        depth += count_braces(line)

        case_match = _CASE_LABEL.match(line)
        if case_match:
            key = case_match.group(1)
            if key in dispatch_keys:
                records.append(
                    SymbolRecord(
                        name=key,
                        location=SourceLocation(
                            file=relative_path,
                            start_line=index + 1,
                            end_line=find_case_end(lines, index),
                        ),
                        kind="dispatch-case",
                        index_kind="metarule",
                    )
                )

        if depth == 0 and "}" in line:
            in_routine = False

    return records


__all__ = ["extract_dispatch_cases"]
