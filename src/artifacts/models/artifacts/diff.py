"""Models describing the difference between two index artifacts."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ModifiedEntry(BaseModel):
    name: str
    before: dict[str, Any]
    after: dict[str, Any]


class DiffResult(BaseModel):
    """Changes between a persisted index and a freshly generated one."""

    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    modified: list[ModifiedEntry] = Field(default_factory=list)
    revision_changed: bool = False
    old_revision: str | None = None
    new_revision: str | None = None

    @property
    def has_changes(self) -> bool:
        return bool(
            self.added or self.removed or self.modified or self.revision_changed
        )


__all__ = ["DiffResult", "ModifiedEntry"]
