"""Define index artifact models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DefineEntry(BaseModel):
    line: int = Field(ge=1)
    value: str
    prefix: str


class DefineIndexMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    repo: str
    file: str
    commit: str
    short_commit: str = Field(alias="shortCommit")
    generated_at: str | None = Field(default=None, alias="generatedAt")
    define_count: int = Field(default=0, alias="defineCount")


class DefineIndex(BaseModel):
    """Schema for define-index.json."""

    model_config = ConfigDict(populate_by_name=True)

    meta: DefineIndexMeta = Field(alias="_meta")
    defines: dict[str, DefineEntry] = Field(default_factory=dict)


__all__ = ["DefineEntry", "DefineIndex", "DefineIndexMeta"]
