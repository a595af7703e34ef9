"""Shared utilities for index generation."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path


def relative_posix(file_path: Path, root: Path) -> str:
    """Path of ``file_path`` relative to ``root`` with forward slashes.

    Examples:
        >>> relative_posix(Path("/repo/src/a.cc"), Path("/repo"))
        'src/a.cc'
    """
    return file_path.relative_to(root).as_posix().replace("\\", "/")


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = now if now is not None else datetime.now(timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
