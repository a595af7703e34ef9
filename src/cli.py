"""Command-line interface for ssl-index."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.diff import diff_define_indexes, diff_function_indexes, format_diff
from artifacts.generators import DefineIndexGenerator, FunctionIndexGenerator
from artifacts.write import load_define_index, load_function_index, write_index
from contract.artifacts import resolve, resolve_define
from contract.validation import (
    DuplicateConflictError,
    ensure_no_duplicates,
    format_duplicates,
    validate_function_index,
)
from gate.update import (
    AutoConfirmer,
    GateState,
    InteractiveConfirmer,
    run_update_gate,
)
from parse.defines import count_by_prefix
from rules.config import ConfigError, load_config
from snapshot.acquire import SnapshotError, ensure_snapshot, read_revision
from snapshot.remote import FetchError
from utils import utc_timestamp
from verify.verify import verify_function_index

if TYPE_CHECKING:
    from pydantic import BaseModel

    from artifacts.models.artifacts.diff import DiffResult
    from artifacts.models.artifacts.index import FunctionIndex
    from rules.config import IndexConfig


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ssl-index")
    parser.add_argument(
        "--root",
        default=".",
        help="Project root holding ssl-index.toml and the artifacts (default: .)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    functions_parser = subparsers.add_parser(
        "functions", help="Generate the function index from the engine sources"
    )
    _add_repo_path(functions_parser)
    _add_output(functions_parser)
    _add_gate_flags(functions_parser)
    functions_parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the existing checkout as-is without cloning or fetching",
    )
    functions_parser.add_argument(
        "--validate",
        action="store_true",
        help="Check the existing function index for duplicates and exit",
    )

    defines_parser = subparsers.add_parser(
        "defines", help="Generate the define index from the remote header"
    )
    _add_output(defines_parser)
    _add_gate_flags(defines_parser)

    verify_parser = subparsers.add_parser(
        "verify", help="Check that the function index matches the checkout"
    )
    _add_repo_path(verify_parser)
    _add_output(verify_parser)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Print the source permalink of an indexed name"
    )
    resolve_parser.add_argument("name", help="Script, native or define name")
    resolve_parser.add_argument(
        "--define",
        action="store_true",
        help="Look the name up in the define index",
    )
    _add_output(resolve_parser)

    return parser


def _add_repo_path(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo-path",
        default=None,
        help="Path to the engine checkout (default: config repo_path)",
    )


def _add_output(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        default=None,
        help="Index artifact path (default: config output path)",
    )


def _add_gate_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Auto-confirm changes without prompting",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without writing",
    )


def _resolve_path(root: Path, value: str) -> Path:
    return (root / Path(value).expanduser()).resolve()


def _publish(
    diff: DiffResult,
    index: BaseModel,
    output: Path,
    *,
    dry_run: bool,
    auto_confirm: bool,
    label: str,
    summary: str,
) -> int:
    if not diff.has_changes:
        sys.stdout.write("\nNo changes detected. Index is up to date.\n")
        return 0

    sys.stdout.write(format_diff(diff))
    sys.stdout.write(summary)

    confirmer = AutoConfirmer() if auto_confirm else InteractiveConfirmer()
    try:
        outcome = run_update_gate(
            diff,
            lambda: write_index(output, index),
            confirmer=confirmer,
            dry_run=dry_run,
            auto_confirm=auto_confirm,
            question=f"\nWrite changes to {output.name}? (y/N) ",
        )
    except OSError as exc:
        sys.stderr.write(f"error: failed to write {output}: {exc}\n")
        return 1

    if outcome.state is GateState.PREVIEW_ONLY:
        sys.stdout.write("\nDry run complete. No files written.\n")
    elif outcome.persisted:
        sys.stdout.write(f"\nWrote {label} to: {output}\n")
    else:
        sys.stdout.write("\nAborted. No changes written.\n")
    return 0


def _handle_validate(output: Path) -> int:
    sys.stdout.write(f"Validating existing {output.name}...\n\n")
    result = validate_function_index(output)
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.path}: {error.message}\n")
        return 1

    assert result.index is not None
    sys.stdout.write(f"Loaded {len(result.index.functions)} function entries\n")
    sys.stdout.write(f"Commit: {result.index.meta.short_commit or 'unknown'}\n")

    if result.conflicts:
        sys.stdout.write(format_duplicates(result.conflicts))
        sys.stderr.write("ERROR: Duplicate script function entries detected!\n")
        sys.stderr.write(
            "Each native implementation should have only one script function "
            "name in the index.\n"
        )
        return 1

    sys.stdout.write("No duplicates found. Index is valid.\n")
    return 0


def _handle_functions(root: Path, config: IndexConfig, args: argparse.Namespace) -> int:
    output = _resolve_path(root, args.output or config.function_index)
    if args.validate:
        return _handle_validate(output)

    repo_path = _resolve_path(root, args.repo_path or config.repo_path)
    sys.stdout.write(f"Repository path: {repo_path}\n")
    if args.dry_run:
        sys.stdout.write("DRY RUN - no files will be written\n")

    if args.offline:
        if not repo_path.is_dir():
            sys.stderr.write(f"error: checkout does not exist: {repo_path}\n")
            return 1
    else:
        try:
            ensure_snapshot(repo_path, repo_url=config.repo_url, branch=config.branch)
        except SnapshotError as exc:
            sys.stderr.write(f"error: {exc}\n")
            return 1

    revision = read_revision(repo_path, fallback=config.branch)
    sys.stdout.write(f"Commit: {revision.commit} ({revision.short_commit})\n")

    index, stats = FunctionIndexGenerator().generate(
        repo_path,
        config=config,
        revision=revision,
        generated_at=utc_timestamp(),
    )
    sys.stdout.write(
        f"Found {stats['files']} source files\n"
        f"Found {stats['functions']} functions\n"
        f"Found {stats['registrations']} opcode registrations\n"
        f"Found {stats['annotations']} script name mappings from comments\n"
        f"Found {stats['metarules']} metarule functions\n"
    )

    try:
        ensure_no_duplicates(index)
    except DuplicateConflictError as exc:
        sys.stdout.write(format_duplicates(exc.conflicts))
        sys.stderr.write("ERROR: Duplicate script function entries detected!\n")
        for conflict in exc.conflicts:
            sys.stderr.write(
                f"{conflict.file}:{conflict.start_line}-{conflict.end_line}: "
                f"{', '.join(conflict.names)}\n"
            )
        sys.stderr.write("Please review and consolidate the duplicates listed above.\n")
        return 1

    diff = diff_function_indexes(load_function_index(output), index)
    entries = index.functions.values()
    opcodes = sum(1 for entry in entries if entry.kind == "opcode")
    summary = (
        "\nSummary:\n"
        f"  Total entries: {len(index.functions)}\n"
        f"  - Opcode functions: {opcodes}\n"
        f"  - Other functions: {len(index.functions) - opcodes}\n"
    )
    return _publish(
        diff,
        index,
        output,
        dry_run=args.dry_run,
        auto_confirm=args.yes,
        label="function index",
        summary=summary,
    )


def _handle_defines(root: Path, config: IndexConfig, args: argparse.Namespace) -> int:
    defines_config = config.defines
    output = _resolve_path(root, args.output or defines_config.output)

    sys.stdout.write(f"Repository: {defines_config.repo}\n")
    sys.stdout.write(f"File: {defines_config.file}\n")
    if args.dry_run:
        sys.stdout.write("DRY RUN - no files will be written\n")

    try:
        index, commit_info = DefineIndexGenerator().generate(
            config=defines_config,
            generated_at=utc_timestamp(),
        )
    except FetchError as exc:
        sys.stderr.write(f"Failed to fetch file: {exc}\n")
        return 1

    revision = commit_info.revision
    sys.stdout.write(f"Latest commit: {revision.commit} ({revision.short_commit})\n")
    if commit_info.date:
        sys.stdout.write(f"Commit date: {commit_info.date}\n")
    sys.stdout.write(f"Found {len(index.defines)} defines\n\nDefines by prefix:\n")
    for prefix, count in count_by_prefix(index.defines):
        sys.stdout.write(f"  {prefix}: {count}\n")

    diff = diff_define_indexes(load_define_index(output), index)
    return _publish(
        diff,
        index,
        output,
        dry_run=args.dry_run,
        auto_confirm=args.yes,
        label="define index",
        summary=f"\nSummary:\n  Total defines: {len(index.defines)}\n",
    )


def _handle_verify(root: Path, config: IndexConfig, args: argparse.Namespace) -> int:
    output = _resolve_path(root, args.output or config.function_index)
    repo_path = _resolve_path(root, args.repo_path or config.repo_path)
    if not repo_path.is_dir():
        sys.stderr.write(f"repo-path: {repo_path}\n")
        sys.stderr.write("error: checkout does not exist\n")
        return 2

    revision = read_revision(repo_path, fallback=config.branch)
    generator = FunctionIndexGenerator()

    def _regenerate(generated_at: str | None) -> FunctionIndex:
        index, _ = generator.generate(
            repo_path, config=config, revision=revision, generated_at=generated_at
        )
        return index

    try:
        result = verify_function_index(index_path=output, regenerate=_regenerate)
    except FileNotFoundError as exc:
        sys.stderr.write(f"index: {output}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2

    if not result.ok:
        if result.diff.has_changes:
            sys.stdout.write(format_diff(result.diff))
        else:
            sys.stdout.write("Entries match but the serialized bytes differ.\n")
        sys.stderr.write(f"{output}: index is out of date\n")
        return 1

    sys.stdout.write(f"{output}: up to date\n")
    return 0


def _handle_resolve(root: Path, config: IndexConfig, args: argparse.Namespace) -> int:
    if args.define:
        output = _resolve_path(root, args.output or config.defines.output)
        define_index = load_define_index(output)
        location = (
            resolve_define(define_index, args.name) if define_index else None
        )
    else:
        output = _resolve_path(root, args.output or config.function_index)
        function_index = load_function_index(output)
        location = resolve(function_index, args.name) if function_index else None

    if location is None:
        sys.stderr.write(f"{args.name}: not indexed in {output}\n")
        return 1

    sys.stdout.write(f"{location.permalink()}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    root = Path(args.root).expanduser().resolve()
    try:
        config = load_config(root)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    if args.command == "functions":
        return _handle_functions(root, config, args)

    if args.command == "defines":
        return _handle_defines(root, config, args)

    if args.command == "verify":
        return _handle_verify(root, config, args)

    if args.command == "resolve":
        return _handle_resolve(root, config, args)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
