"""Index artifact contract definitions.

This module defines the stable boundary between index generation and the
documentation components that read the artifacts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from artifacts.models.artifacts.defines import DefineIndex
    from artifacts.models.artifacts.index import FunctionIndex

# Artifact filename constants (stable contract identifiers).
FUNCTION_INDEX_JSON = "function-index.json"
DEFINE_INDEX_JSON = "define-index.json"

SOURCE_HOST = "github.com"


@dataclass(frozen=True)
class ResolvedLocation:
    """Where a published name lives in the analysed repository."""

    repo: str
    file: str
    start_line: int
    end_line: int
    commit: str

    def permalink(self, host: str = SOURCE_HOST) -> str:
        return permalink(
            self.repo,
            self.commit,
            self.file,
            self.start_line,
            self.end_line,
            host=host,
        )


def permalink(
    repo: str,
    commit: str,
    file: str,
    start_line: int | None = None,
    end_line: int | None = None,
    *,
    host: str = SOURCE_HOST,
) -> str:
    """Build a commit-pinned source URL.

    Format: ``https://{host}/{repo}/blob/{commit}/{file}#L{start}-L{end}``,
    shortened to ``#L{start}`` for single-line ranges.
    """
    url = f"https://{host}/{repo}/blob/{commit or 'main'}/{file}"
    if start_line is None:
        return url
    if end_line is None or end_line == start_line:
        return f"{url}#L{start_line}"
    return f"{url}#L{start_line}-L{end_line}"


def resolve(index: FunctionIndex, name: str) -> ResolvedLocation | None:
    """Look up a script or native name in the function index."""
    entry = index.functions.get(name)
    if entry is None:
        return None
    return ResolvedLocation(
        repo=index.meta.repo,
        file=entry.file,
        start_line=entry.start_line,
        end_line=entry.end_line,
        commit=entry.commit,
    )


def resolve_define(index: DefineIndex, name: str) -> ResolvedLocation | None:
    """Look up a define; defines occupy a single line of the indexed file."""
    entry = index.defines.get(name)
    if entry is None:
        return None
    return ResolvedLocation(
        repo=index.meta.repo,
        file=index.meta.file,
        start_line=entry.line,
        end_line=entry.line,
        commit=index.meta.short_commit or "main",
    )


__all__ = [
    "DEFINE_INDEX_JSON",
    "FUNCTION_INDEX_JSON",
    "ResolvedLocation",
    "permalink",
    "resolve",
    "resolve_define",
]
