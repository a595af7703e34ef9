"""Clone-or-update of the analysed repository checkout."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    GitRunner = Callable[
        [Sequence[str], Path | None], subprocess.CompletedProcess[str]
    ]

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when no usable checkout can be produced."""


@dataclass(frozen=True)
class Revision:
    commit: str
    short_commit: str


def run_git(
    args: Sequence[str], cwd: Path | None = None
) -> subprocess.CompletedProcess[str]:
    """Run a git command, capturing text output, without raising on failure."""
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )


def _git_ok(
    runner: GitRunner,
    args: Sequence[str],
    cwd: Path | None,
) -> tuple[bool, str]:
    try:
        result = runner(args, cwd)
    except OSError as exc:
        return False, str(exc)
    if result.returncode != 0:
        return False, (result.stderr or "").strip()
    return True, (result.stdout or "").strip()


def ensure_snapshot(
    target: Path,
    *,
    repo_url: str,
    branch: str = "main",
    runner: GitRunner = run_git,
) -> bool:
    """Make sure a checkout of ``repo_url`` exists at ``target``.

    An existing checkout is fast-forwarded to ``branch``; if that fails the
    stale checkout is used as-is. A missing checkout is shallow-cloned.

    Returns:
        True when the checkout is known to be current, False when the update
        failed and the existing state is used.

    Raises:
        SnapshotError: If the clone fails.
    """
    if (target / ".git").exists():
        logger.info("Repository exists at %s, fetching latest", target)
        for args in (
            ("fetch", "origin"),
            ("checkout", branch),
            ("pull", "origin", branch),
        ):
            ok, detail = _git_ok(runner, args, target)
            if not ok:
                logger.warning(
                    "Failed to update repository (git %s: %s), using existing state",
                    " ".join(args),
                    detail,
                )
                return False
        return True

    logger.info("Cloning %s into %s", repo_url, target)
    target.parent.mkdir(parents=True, exist_ok=True)
    ok, detail = _git_ok(
        runner, ("clone", "--depth", "1", repo_url, str(target)), None
    )
    if not ok:
        msg = f"Failed to clone {repo_url} into {target}: {detail}"
        raise SnapshotError(msg)
    return True


def read_revision(
    repo_path: Path,
    *,
    fallback: str = "main",
    runner: GitRunner = run_git,
) -> Revision:
    """Return the checkout's HEAD commit, or ``fallback`` when unknown."""
    ok, commit = _git_ok(runner, ("rev-parse", "HEAD"), repo_path)
    if not ok or not commit:
        logger.warning("Failed to get commit hash: %s", commit or "empty output")
        commit = fallback

    ok, short_commit = _git_ok(runner, ("rev-parse", "--short", "HEAD"), repo_path)
    if not ok or not short_commit:
        short_commit = fallback

    return Revision(commit=commit, short_commit=short_commit)


__all__ = ["Revision", "SnapshotError", "ensure_snapshot", "read_revision", "run_git"]
