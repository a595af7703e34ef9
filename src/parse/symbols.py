"""Definition, annotation and registration extraction for one source file."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from artifacts.models.artifacts.symbols import (
    RegistrationRecord,
    SourceLocation,
    SymbolRecord,
)
from parse.extent import find_block_end
from parse.rules import (
    AUXILIARY_RULES,
    OPCODE_RULES,
    find_annotation,
    is_declaration,
    iter_registrations,
    match_line,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from parse.rules import RecognitionRule


@dataclass
class FileScan:
    """Everything recognised in a single source file."""

    path: str
    definitions: dict[str, SymbolRecord] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    registrations: list[RegistrationRecord] = field(default_factory=list)


def read_source_lines(file_path: Path) -> list[str]:
    """Read a source file as lines split on ``\\n`` only.

    A final newline does not start another line.
    """
    text = file_path.read_text(encoding="utf-8", errors="replace")
    return text.removesuffix("\n").split("\n")


def scan_lines(
    lines: Sequence[str],
    relative_path: str,
    *,
    opcode_rules: Sequence[RecognitionRule] = OPCODE_RULES,
    auxiliary_rules: Sequence[RecognitionRule] = AUXILIARY_RULES,
) -> FileScan:
    """Apply the recognition rules to every line of a file.

    Opcode handler rules win over auxiliary rules on the same line. An
    auxiliary procedure is only recorded when no definition with that name
    was already captured in this file. Prototypes are not definitions and
    are skipped.
    """
    scan = FileScan(path=relative_path)

    for registration in iter_registrations("\n".join(lines)):
        scan.registrations.append(
            RegistrationRecord(
                opcode=registration.opcode,
                handler=registration.handler,
                annotation=registration.script_name,
                location=SourceLocation(
                    file=relative_path,
                    start_line=registration.start_line,
                    end_line=registration.end_line,
                ),
            )
        )

    for index, line in enumerate(lines):
        match = match_line(line, opcode_rules)
        if match is not None:
            if is_declaration(lines, index, match.end):
                continue
            scan.definitions[match.name] = _definition(
                lines, index, relative_path, match.name, match.rule
            )
            annotation = find_annotation(lines, index)
            if annotation is not None:
                scan.annotations[match.name] = annotation
            continue

        match = match_line(line, auxiliary_rules)
        if (
            match is not None
            and match.name not in scan.definitions
            and not is_declaration(lines, index, match.end)
        ):
            scan.definitions[match.name] = _definition(
                lines, index, relative_path, match.name, match.rule
            )

    return scan


def _definition(
    lines: Sequence[str],
    index: int,
    relative_path: str,
    name: str,
    rule: RecognitionRule,
) -> SymbolRecord:
    return SymbolRecord(
        name=name,
        location=SourceLocation(
            file=relative_path,
            start_line=index + 1,
            end_line=find_block_end(lines, index),
        ),
        kind="definition-site",
        convention=rule.convention,
        index_kind=rule.index_kind,
    )


__all__ = ["FileScan", "read_source_lines", "scan_lines"]
