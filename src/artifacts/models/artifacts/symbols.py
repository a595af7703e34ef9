"""Symbol models for native source definitions.

This module contains models for raw symbols found in the analysed source tree
and for the script-facing aliases resolved from them.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

SiteKind = Literal["definition-site", "registration-site", "dispatch-case"]

EntryKind = Literal["opcode", "function", "metarule"]

Convention = Literal[
    "camel_case",
    "snake_case",
    "underscore_prefixed",
    "metarule",
    "script",
    "builtin",
]

AliasOrigin = Literal[
    "override",
    "comment-derived",
    "registration-derived",
    "transform-derived",
    "fixed-table",
]


class SourceLocation(BaseModel):
    """A 1-based, inclusive line range within a snapshot file."""

    file: str = Field(description="POSIX path relative to the snapshot root")
    start_line: int = Field(ge=1)
    end_line: int = Field(ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> SourceLocation:
        if self.start_line > self.end_line:
            msg = f"start_line {self.start_line} is after end_line {self.end_line}"
            raise ValueError(msg)
        return self

    def key(self) -> tuple[str, int, int]:
        return (self.file, self.start_line, self.end_line)


class SymbolRecord(BaseModel):
    """A native definition site or a case branch of the dispatch routine."""

    name: str
    location: SourceLocation
    kind: SiteKind = "definition-site"
    convention: Convention | None = None
    index_kind: EntryKind = "opcode"


class RegistrationRecord(BaseModel):
    """An opcode registration call binding an opcode constant to a handler."""

    opcode: str
    handler: str
    annotation: str | None = Field(
        default=None, description="Script name from the trailing comment"
    )
    location: SourceLocation
    kind: SiteKind = "registration-site"


class AliasRecord(BaseModel):
    """The published script name for a native symbol or dispatch case."""

    canonical_name: str
    underlying_name: str | None = None
    dispatch_key: str | None = None
    origin: AliasOrigin
    location: SourceLocation

    @model_validator(mode="after")
    def _check_target(self) -> AliasRecord:
        if (self.underlying_name is None) == (self.dispatch_key is None):
            msg = "alias needs exactly one of underlying_name or dispatch_key"
            raise ValueError(msg)
        return self


__all__ = [
    "AliasOrigin",
    "AliasRecord",
    "Convention",
    "EntryKind",
    "RegistrationRecord",
    "SiteKind",
    "SourceLocation",
    "SymbolRecord",
]
