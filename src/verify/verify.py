"""Determinism verification for the persisted function index."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from artifacts.diff import diff_function_indexes
from artifacts.write import dump_index, load_function_index

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from artifacts.models.artifacts.diff import DiffResult
    from artifacts.models.artifacts.index import FunctionIndex


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    byte_identical: bool
    diff: DiffResult


def verify_function_index(
    *,
    index_path: Path,
    regenerate: Callable[[str | None], FunctionIndex],
) -> DeterminismResult:
    """Verify that the persisted index matches a fresh regeneration.

    ``regenerate`` receives the persisted ``generatedAt`` so that an
    unchanged snapshot at the same revision serializes byte for byte like
    the file on disk.

    Raises:
        FileNotFoundError: If index_path does not exist.
    """
    if not index_path.is_file():
        msg = f"Index file does not exist: {index_path}"
        raise FileNotFoundError(msg)

    persisted = load_function_index(index_path)
    generated_at = persisted.meta.generated_at if persisted is not None else None
    regenerated = regenerate(generated_at)

    diff = diff_function_indexes(persisted, regenerated)
    byte_identical = index_path.read_bytes() == dump_index(regenerated)

    return DeterminismResult(
        ok=byte_identical and not diff.has_changes,
        byte_identical=byte_identical,
        diff=diff,
    )


__all__ = ["DeterminismResult", "verify_function_index"]
