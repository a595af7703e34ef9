"""Define index generator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.models.artifacts.defines import DefineIndex, DefineIndexMeta
from parse.defines import parse_defines
from snapshot.remote import fetch_file, http_get, latest_commit_or_branch

if TYPE_CHECKING:
    from rules.config import DefinesConfig
    from snapshot.remote import CommitInfo, HttpGet

logger = logging.getLogger(__name__)


class DefineIndexGenerator:
    """Generates the define index from a single remote header file."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "defines"

    def generate(
        self,
        *,
        config: DefinesConfig,
        generated_at: str | None = None,
        get: HttpGet = http_get,
    ) -> tuple[DefineIndex, CommitInfo]:
        """Fetch the header at its latest commit and index its defines.

        A failed commit lookup falls back to ``config.branch``; a failed file
        fetch raises ``FetchError``.
        """
        commit_info = latest_commit_or_branch(
            config.repo,
            config.file,
            branch=config.branch,
            api_url=config.api_url,
            get=get,
        )
        revision = commit_info.revision
        content = fetch_file(
            config.repo,
            config.file,
            revision.commit,
            raw_url=config.raw_url,
            get=get,
        )

        defines = parse_defines(content, config.prefixes)
        logger.info("Found %d defines in %s", len(defines), config.file)

        index = DefineIndex(
            meta=DefineIndexMeta(
                repo=config.repo,
                file=config.file,
                commit=revision.commit,
                short_commit=revision.short_commit,
                generated_at=generated_at,
                define_count=len(defines),
            ),
            defines=defines,
        )
        return index, commit_info


__all__ = ["DefineIndexGenerator"]
