"""Function index artifact models.

Field aliases match the JSON consumed by the documentation components, so
models are dumped with ``by_alias=True`` and ``exclude_none=True``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from artifacts.models.artifacts.symbols import EntryKind


class FunctionEntry(BaseModel):
    """One lookup key of the function index."""

    model_config = ConfigDict(populate_by_name=True)

    file: str
    start_line: int = Field(alias="startLine")
    end_line: int = Field(alias="endLine")
    kind: EntryKind
    commit: str
    cpp_name: str | None = Field(default=None, alias="cppName")
    metarule: str | None = None

    def location_key(self) -> tuple[str, int, int]:
        return (self.file, self.start_line, self.end_line)


class FunctionIndexMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    repo: str
    commit: str
    short_commit: str = Field(alias="shortCommit")
    generated_at: str | None = Field(default=None, alias="generatedAt")
    function_count: int = Field(default=0, alias="functionCount")


class FunctionIndex(BaseModel):
    """Schema for function-index.json."""

    model_config = ConfigDict(populate_by_name=True)

    meta: FunctionIndexMeta = Field(alias="_meta")
    functions: dict[str, FunctionEntry] = Field(default_factory=dict)


__all__ = ["FunctionEntry", "FunctionIndex", "FunctionIndexMeta"]
