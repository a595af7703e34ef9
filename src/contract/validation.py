"""Consistency validation for the function index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from artifacts.models.artifacts.index import FunctionIndex

if TYPE_CHECKING:
    from pathlib import Path

RULE = "=" * 60


@dataclass(frozen=True)
class ValidationMessage:
    path: Path
    message: str


@dataclass(frozen=True)
class DuplicateConflict:
    """Several published names pointing at one source range."""

    file: str
    start_line: int
    end_line: int
    names: tuple[str, ...]
    cpp_name: str | None = None

    def describe(self) -> str:
        header = f"  {self.file}:{self.start_line}-{self.end_line}"
        if self.cpp_name:
            header += f" ({self.cpp_name})"
        lines = [f"{header}:"]
        lines.extend(f"    - {name}" for name in self.names)
        return "\n".join(lines)


class DuplicateConflictError(Exception):
    """Raised when an index must not be persisted because of conflicts."""

    def __init__(self, conflicts: list[DuplicateConflict]) -> None:
        self.conflicts = conflicts
        super().__init__(
            f"{len(conflicts)} locations with duplicate script names"
        )


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    conflicts: list[DuplicateConflict] = field(default_factory=list)
    index: FunctionIndex | None = None

    @property
    def ok(self) -> bool:
        return not self.errors and not self.conflicts


def detect_duplicates(index: FunctionIndex) -> list[DuplicateConflict]:
    """Group alias entries by location and report shared locations.

    Only entries carrying ``cppName`` take part; native-name entries are the
    targets the aliases point at and naturally share their location.
    """
    by_location: dict[tuple[str, int, int], list[str]] = {}
    for name, entry in index.functions.items():
        if not entry.cpp_name:
            continue
        by_location.setdefault(entry.location_key(), []).append(name)

    conflicts: list[DuplicateConflict] = []
    for (file, start_line, end_line), names in sorted(by_location.items()):
        if len(names) < 2:
            continue
        names = sorted(names)
        conflicts.append(
            DuplicateConflict(
                file=file,
                start_line=start_line,
                end_line=end_line,
                names=tuple(names),
                cpp_name=index.functions[names[0]].cpp_name,
            )
        )
    return conflicts


def ensure_no_duplicates(index: FunctionIndex) -> None:
    """Raise DuplicateConflictError if any location has several names."""
    conflicts = detect_duplicates(index)
    if conflicts:
        raise DuplicateConflictError(conflicts)


def format_duplicates(conflicts: list[DuplicateConflict]) -> str:
    out = [
        "",
        RULE,
        "DUPLICATE ENTRIES DETECTED",
        RULE,
        "",
        "Multiple script function names pointing to the same native implementation:",
        "",
    ]
    for conflict in conflicts:
        out.append(conflict.describe())
        out.append("")
    out.append(RULE)
    out.append(f"Total: {len(conflicts)} locations with duplicate script names")
    out.append(RULE)
    return "\n".join(out) + "\n"


def validate_function_index(path: Path) -> ValidationResult:
    """Load an existing function index and check it for duplicate names."""
    result = ValidationResult()

    if not path.exists():
        result.errors.append(
            ValidationMessage(path=path, message="Index file does not exist.")
        )
        return result

    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.errors.append(
            ValidationMessage(path=path, message=f"Failed to parse: {exc}.")
        )
        return result

    try:
        index = FunctionIndex.model_validate(raw)
    except ValidationError as exc:
        result.errors.append(
            ValidationMessage(
                path=path,
                message=f"Schema validation failed: {exc}.",
            )
        )
        return result

    result.index = index
    result.conflicts = detect_duplicates(index)
    return result


__all__ = [
    "DuplicateConflict",
    "DuplicateConflictError",
    "ValidationMessage",
    "ValidationResult",
    "detect_duplicates",
    "ensure_no_duplicates",
    "format_duplicates",
    "validate_function_index",
]
