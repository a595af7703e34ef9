"""Acquisition of the analysed sources."""

from snapshot.acquire import (
    Revision,
    SnapshotError,
    ensure_snapshot,
    read_revision,
)
from snapshot.remote import FetchError, fetch_file, latest_commit_or_branch

__all__ = [
    "FetchError",
    "Revision",
    "SnapshotError",
    "ensure_snapshot",
    "fetch_file",
    "latest_commit_or_branch",
    "read_revision",
]
