"""Function index generator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.models.artifacts.index import (
    FunctionEntry,
    FunctionIndex,
    FunctionIndexMeta,
)
from parse.dispatch import extract_dispatch_cases
from parse.symbols import FileScan, read_source_lines, scan_lines
from resolve.aliases import (
    collect_annotations,
    resolve_aliases,
    resolve_dispatch_aliases,
)
from scan.files import find_source_files
from utils import relative_posix

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from artifacts.models.artifacts.symbols import (
        AliasRecord,
        EntryKind,
        SymbolRecord,
    )
    from rules.config import IndexConfig
    from snapshot.acquire import Revision

logger = logging.getLogger(__name__)


def assemble_function_index(
    definitions: Mapping[str, SymbolRecord],
    aliases: Iterable[AliasRecord],
    dispatch_cases: Iterable[AliasRecord],
    *,
    repo: str,
    revision: Revision,
    generated_at: str | None,
    dispatch_routine: str = "opMetarule",
) -> FunctionIndex:
    """Merge native definitions, their aliases and dispatch cases.

    Native definitions are keyed by their own name. Aliases are keyed by the
    script name and point back with ``cppName``. Dispatch cases come last.
    """
    commit = revision.short_commit
    functions: dict[str, FunctionEntry] = {}

    for name, symbol in definitions.items():
        functions[name] = _entry(symbol.location.key(), symbol.index_kind, commit)

    for alias in aliases:
        if alias.underlying_name is None:
            continue
        symbol = definitions[alias.underlying_name]
        functions[alias.canonical_name] = _entry(
            alias.location.key(),
            symbol.index_kind,
            commit,
            cpp_name=alias.underlying_name,
        )

    for case in dispatch_cases:
        functions[case.canonical_name] = _entry(
            case.location.key(),
            "metarule",
            commit,
            cpp_name=dispatch_routine,
            metarule=case.dispatch_key,
        )

    return FunctionIndex(
        meta=FunctionIndexMeta(
            repo=repo,
            commit=revision.commit,
            short_commit=revision.short_commit,
            generated_at=generated_at,
            function_count=len(definitions),
        ),
        functions=functions,
    )


def _entry(
    location: tuple[str, int, int],
    kind: EntryKind,
    commit: str,
    *,
    cpp_name: str | None = None,
    metarule: str | None = None,
) -> FunctionEntry:
    file, start_line, end_line = location
    return FunctionEntry(
        file=file,
        start_line=start_line,
        end_line=end_line,
        kind=kind,
        commit=commit,
        cpp_name=cpp_name,
        metarule=metarule,
    )


class FunctionIndexGenerator:
    """Generates the function index from a snapshot checkout."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "functions"

    def generate(
        self,
        root: Path,
        *,
        config: IndexConfig,
        revision: Revision,
        generated_at: str | None = None,
    ) -> tuple[FunctionIndex, dict[str, int]]:
        """Scan ``root`` and build the function index.

        Returns:
            The assembled index and a dictionary of scan counts.
        """
        scans: list[FileScan] = []
        definitions: dict[str, SymbolRecord] = {}
        dispatch_sites: list[SymbolRecord] = []
        dispatch_table = config.dispatch_table()

        for file_path in find_source_files(
            root,
            source_dir=config.source_dir,
            extensions=config.extensions,
            include_patterns=config.include,
            exclude_patterns=config.exclude,
            respect_gitignore=config.respect_gitignore,
        ):
            relative_path = relative_posix(file_path, root)
            try:
                lines = read_source_lines(file_path)
            except OSError as exc:
                logger.warning("Skipping unreadable file %s: %s", relative_path, exc)
                continue

            scan = scan_lines(lines, relative_path)
            scans.append(scan)
            definitions.update(scan.definitions)

            if file_path.name == config.dispatch_file:
                dispatch_sites.extend(
                    extract_dispatch_cases(
                        lines,
                        relative_path,
                        dispatch_table,
                        routine=config.dispatch_routine,
                    )
                )

        annotations = collect_annotations(scans)
        dispatch_cases = resolve_dispatch_aliases(dispatch_sites, dispatch_table)
        aliases = resolve_aliases(
            definitions.values(), config.override_table(), annotations
        )

        index = assemble_function_index(
            definitions,
            aliases,
            dispatch_cases,
            repo=config.repo_slug,
            revision=revision,
            generated_at=generated_at,
            dispatch_routine=config.dispatch_routine,
        )

        stats = {
            "files": len(scans),
            "functions": len(definitions),
            "registrations": sum(len(s.registrations) for s in scans),
            "annotations": len(annotations),
            "aliases": len(aliases),
            "metarules": len(dispatch_cases),
        }
        logger.info(
            "Scanned %(files)d files: %(functions)d functions, "
            "%(registrations)d opcode registrations, %(annotations)d script name "
            "annotations, %(metarules)d metarule functions",
            stats,
        )
        return index, stats


__all__ = ["FunctionIndexGenerator", "assemble_function_index"]
