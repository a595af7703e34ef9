"""Single-file retrieval from a GitHub-hosted repository."""

from __future__ import annotations

import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import TYPE_CHECKING

import orjson

from snapshot.acquire import Revision

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    HttpGet = Callable[[str, Mapping[str, str]], tuple[int, str]]

logger = logging.getLogger(__name__)

USER_AGENT = "ssl-index"
SHORT_SHA_LENGTH = 7


class FetchError(Exception):
    """Raised when a remote resource cannot be retrieved."""


@dataclass(frozen=True)
class CommitInfo:
    revision: Revision
    date: str | None = None


def http_get(
    url: str, headers: Mapping[str, str], timeout_seconds: int = 30
) -> tuple[int, str]:
    """GET ``url`` and return ``(status, body)``. Redirects are followed."""
    req = urllib.request.Request(url, headers=dict(headers), method="GET")
    try:
        with urllib.request.urlopen(  # nosec - URL from config
            req, timeout=timeout_seconds
        ) as resp:
            return int(resp.status), resp.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as exc:
        return int(exc.code), ""
    except (urllib.error.URLError, OSError) as exc:
        msg = f"Request to {url} failed: {exc}"
        raise FetchError(msg) from exc


def latest_commit(
    repo: str,
    file_path: str,
    *,
    api_url: str = "https://api.github.com",
    get: HttpGet = http_get,
) -> CommitInfo:
    """Look up the newest commit touching ``file_path``.

    Raises:
        FetchError: If the API cannot be reached or returns no commit.
    """
    query = urllib.parse.urlencode({"path": file_path, "per_page": 1})
    url = f"{api_url.rstrip('/')}/repos/{repo}/commits?{query}"
    status, body = get(
        url,
        {"User-Agent": USER_AGENT, "Accept": "application/vnd.github.v3+json"},
    )
    if status != 200:
        msg = f"HTTP {status}: Failed to get commits"
        raise FetchError(msg)

    try:
        commits = orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        msg = f"Failed to parse commits: {exc}"
        raise FetchError(msg) from exc

    if not isinstance(commits, list) or not commits:
        msg = "No commits found for file"
        raise FetchError(msg)

    head = commits[0]
    try:
        sha = str(head["sha"])
        date = head.get("commit", {}).get("committer", {}).get("date")
    except (KeyError, TypeError, AttributeError) as exc:
        msg = f"Failed to parse commits: {exc}"
        raise FetchError(msg) from exc

    return CommitInfo(
        revision=Revision(commit=sha, short_commit=sha[:SHORT_SHA_LENGTH]),
        date=date,
    )


def latest_commit_or_branch(
    repo: str,
    file_path: str,
    *,
    branch: str = "main",
    api_url: str = "https://api.github.com",
    get: HttpGet = http_get,
) -> CommitInfo:
    """Like ``latest_commit`` but falls back to ``branch`` on failure."""
    try:
        return latest_commit(repo, file_path, api_url=api_url, get=get)
    except FetchError as exc:
        logger.warning("Failed to get latest commit: %s; using %r", exc, branch)
        return CommitInfo(revision=Revision(commit=branch, short_commit=branch))


def fetch_file(
    repo: str,
    file_path: str,
    ref: str,
    *,
    raw_url: str = "https://raw.githubusercontent.com",
    get: HttpGet = http_get,
) -> str:
    """Fetch the raw contents of ``file_path`` at ``ref``.

    Raises:
        FetchError: On any non-200 response or network failure.
    """
    url = f"{raw_url.rstrip('/')}/{repo}/{ref}/{file_path}"
    logger.info("Fetching: %s", url)
    status, body = get(url, {"User-Agent": USER_AGENT})
    if status != 200:
        msg = f"HTTP {status}: Failed to fetch {url}"
        raise FetchError(msg)
    return body


__all__ = [
    "CommitInfo",
    "FetchError",
    "fetch_file",
    "http_get",
    "latest_commit",
    "latest_commit_or_branch",
]
