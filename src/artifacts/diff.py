"""Structured comparison of a persisted index with a regenerated one."""

from __future__ import annotations

from typing import TYPE_CHECKING

from artifacts.models.artifacts.diff import DiffResult, ModifiedEntry

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from pydantic import BaseModel

    from artifacts.models.artifacts.defines import DefineIndex
    from artifacts.models.artifacts.index import FunctionIndex

FUNCTION_DIFF_FIELDS = ("file", "start_line", "end_line")
DEFINE_DIFF_FIELDS = ("line", "value")

ADDED_LIMIT = 20
REMOVED_LIMIT = 20
MODIFIED_LIMIT = 10

RULE = "=" * 60


def _compare(
    old_entries: Mapping[str, BaseModel],
    new_entries: Mapping[str, BaseModel],
    fields: Sequence[str],
) -> tuple[list[str], list[str], list[ModifiedEntry]]:
    added: list[str] = []
    modified: list[ModifiedEntry] = []

    for name, new_info in new_entries.items():
        old_info = old_entries.get(name)
        if old_info is None:
            added.append(name)
            continue
        before = {f: getattr(old_info, f) for f in fields}
        after = {f: getattr(new_info, f) for f in fields}
        if before != after:
            modified.append(ModifiedEntry(name=name, before=before, after=after))

    removed = [name for name in old_entries if name not in new_entries]
    return added, removed, modified


def diff_function_indexes(
    old: FunctionIndex | None, new: FunctionIndex
) -> DiffResult:
    """Diff two function indexes on keys, location fields and revision."""
    old_entries = old.functions if old is not None else {}
    old_revision = old.meta.short_commit if old is not None else None
    added, removed, modified = _compare(
        old_entries, new.functions, FUNCTION_DIFF_FIELDS
    )
    return DiffResult(
        added=added,
        removed=removed,
        modified=modified,
        revision_changed=old_revision != new.meta.short_commit,
        old_revision=old_revision,
        new_revision=new.meta.short_commit,
    )


def diff_define_indexes(old: DefineIndex | None, new: DefineIndex) -> DiffResult:
    """Diff two define indexes on keys, line, value and revision."""
    old_entries = old.defines if old is not None else {}
    old_revision = old.meta.short_commit if old is not None else None
    added, removed, modified = _compare(old_entries, new.defines, DEFINE_DIFF_FIELDS)
    return DiffResult(
        added=added,
        removed=removed,
        modified=modified,
        revision_changed=old_revision != new.meta.short_commit,
        old_revision=old_revision,
        new_revision=new.meta.short_commit,
    )


def _describe_modified(entry: ModifiedEntry) -> list[str]:
    before, after = entry.before, entry.after
    lines: list[str] = []
    for field, old_value in before.items():
        if field in ("start_line", "end_line"):
            continue
        if old_value != after.get(field):
            lines.append(f"      {field}: {old_value} -> {after.get(field)}")
    if "start_line" in before and (
        before["start_line"] != after["start_line"]
        or before["end_line"] != after["end_line"]
    ):
        lines.append(
            f"      lines: L{before['start_line']}-{before['end_line']} -> "
            f"L{after['start_line']}-{after['end_line']}"
        )
    return lines


def format_diff(diff: DiffResult) -> str:
    """Human-readable change report, truncated per section."""
    out = ["", RULE, "CHANGES DETECTED", RULE]

    if diff.revision_changed:
        out.append("")
        out.append(f"Commit: {diff.old_revision or 'none'} -> {diff.new_revision}")

    for label, marker, names, limit in (
        ("ADDED", "+", diff.added, ADDED_LIMIT),
        ("REMOVED", "-", diff.removed, REMOVED_LIMIT),
    ):
        if not names:
            continue
        out.extend(["", f"{marker} {label} ({len(names)}):"])
        out.extend(f"  {marker} {name}" for name in names[:limit])
        if len(names) > limit:
            out.append(f"  ... and {len(names) - limit} more")

    if diff.modified:
        out.extend(["", f"~ MODIFIED ({len(diff.modified)}):"])
        for entry in diff.modified[:MODIFIED_LIMIT]:
            out.append(f"  ~ {entry.name}:")
            out.extend(_describe_modified(entry))
        if len(diff.modified) > MODIFIED_LIMIT:
            out.append(f"  ... and {len(diff.modified) - MODIFIED_LIMIT} more")

    out.extend(["", RULE])
    return "\n".join(out) + "\n"


__all__ = [
    "diff_define_indexes",
    "diff_function_indexes",
    "format_diff",
]
