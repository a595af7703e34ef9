"""File scanning utilities for native source trees."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from pathlib import Path


def _should_include_file(
    path: Path,
    root: Path,
    extensions: Sequence[str],
    gitignore_matches: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.name.endswith(tuple(extensions)):
        return False

    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, root):
        return False

    try:
        rel_path = path.relative_to(root)
    except ValueError:
        return False

    if any(part.startswith(".") for part in rel_path.parts[:-1]):
        return False

    rel_path_str = rel_path.as_posix()

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    if include_patterns and not any(
        fnmatch(rel_path_str, pat) for pat in include_patterns
    ):
        return False

    has_excluded_match = exclude_patterns and any(
        fnmatch(rel_path_str, pat) for pat in exclude_patterns
    )
    return not has_excluded_match


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _build_gitignore_matcher(root: Path) -> Callable[[str], bool] | None:
    gitignore_path = root / ".gitignore"
    if gitignore_path.is_file() and not gitignore_path.is_symlink():
        return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
    return None


def find_source_files(
    root: Path,
    *,
    source_dir: str = "",
    extensions: Sequence[str] = (".c", ".cc", ".cpp", ".h", ".hpp"),
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    respect_gitignore: bool = False,
) -> Iterator[Path]:
    """Find native source files under ``root / source_dir``.

    Args:
        root: Snapshot root; relative paths and patterns are taken from here
        source_dir: Subdirectory of root to walk (empty = whole root)
        extensions: File name suffixes to accept
        include_patterns: Optional list of fnmatch patterns; if provided,
            files must match at least one pattern to be included
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded
        respect_gitignore: Skip files matched by ``root/.gitignore``

    Yields:
        Path objects for each source file found, sorted lexicographically
        by relative path for deterministic ordering. Hidden directories
        are skipped.
    """
    search_dir = root / source_dir if source_dir else root
    if not search_dir.is_dir():
        return

    gitignore_matches = _build_gitignore_matcher(root) if respect_gitignore else None

    matched_files = [
        path
        for path in search_dir.rglob("*")
        if _should_include_file(
            path,
            root,
            extensions,
            gitignore_matches,
            include_patterns,
            exclude_patterns,
        )
    ]

    matched_files.sort(key=lambda p: p.relative_to(root).as_posix())

    yield from matched_files


__all__ = ["_should_include_file", "find_source_files"]
