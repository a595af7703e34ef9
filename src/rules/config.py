from __future__ import annotations

import tomllib
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rules.tables import DEFINE_PREFIXES, DISPATCH_NAMES, NAME_OVERRIDES

CONFIG_FILENAME = "ssl-index.toml"

DEFAULT_EXTENSIONS = (".c", ".cc", ".cpp", ".h", ".hpp")


class DefinesConfig(BaseModel):
    """Where the define index comes from and where it is written."""

    model_config = ConfigDict(extra="forbid")

    repo: str = Field(
        default="BGforgeNet/Fallout2_Restoration_Project",
        description="GitHub repository in owner/name form",
    )
    file: str = Field(
        default="scripts_src/headers/define.h",
        description="Header file within the repository",
    )
    branch: str = Field(
        default="main",
        description="Header repository ref used when no commit is found",
    )
    output: str = Field(
        default="src/data/define-index.json",
        description="Define index artifact path",
    )
    api_url: str = Field(
        default="https://api.github.com",
        description="GitHub API base URL used for commit lookup",
    )
    raw_url: str = Field(
        default="https://raw.githubusercontent.com",
        description="Base URL serving raw file contents",
    )
    prefixes: list[str] = Field(
        default_factory=lambda: list(DEFINE_PREFIXES),
        description="Known define prefixes (first match wins)",
    )


class IndexConfig(BaseModel):
    """Configuration for function and define index generation."""

    model_config = ConfigDict(extra="forbid")

    repo_url: str = Field(
        default="https://github.com/fallout2-ce/fallout2-ce.git",
        description="Clone URL of the analysed repository",
    )
    repo_slug: str = Field(
        default="fallout2-ce/fallout2-ce",
        description="owner/name used in permalinks and artifact metadata",
    )
    branch: str = Field(
        default="main",
        description="Branch to track; also the fallback revision placeholder",
    )
    repo_path: str = Field(
        default=".fallout2-ce",
        description="Local checkout path of the analysed repository",
    )
    source_dir: str = Field(
        default="src",
        description="Directory inside the checkout that holds the sources",
    )
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Source and header file extensions to scan",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all sources)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    respect_gitignore: bool = Field(
        default=False,
        description="Skip files matched by the checkout's root .gitignore",
    )
    function_index: str = Field(
        default="src/data/function-index.json",
        description="Function index artifact path",
    )
    dispatch_file: str = Field(
        default="interpreter_extra.cc",
        description="Basename of the file holding the metarule dispatcher",
    )
    dispatch_routine: str = Field(
        default="opMetarule",
        description="Name of the dispatcher function",
    )
    overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Extra native name -> script name corrections",
    )
    dispatch_names: dict[str, str] = Field(
        default_factory=dict,
        description="Extra dispatch key -> script name entries",
    )
    defines: DefinesConfig = Field(default_factory=DefinesConfig)

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        for ext in v:
            if not ext.startswith("."):
                msg = f"Extension '{ext}' must start with '.'"
                raise ValueError(msg)
        return v

    @field_validator("overrides", "dispatch_names", mode="before")
    @classmethod
    def validate_tables(cls, v: Any) -> Any:
        if v is None:
            return {}
        if not isinstance(v, dict):
            msg = "name tables must be a mapping of str -> str"
            raise ValueError(msg)
        for key, value in v.items():
            if not isinstance(key, str) or not isinstance(value, str):
                msg = "name tables must be a mapping of str -> str"
                raise ValueError(msg)
            if not value:
                msg = f"Empty script name for '{key}'"
                raise ValueError(msg)
        return v

    def override_table(self) -> MappingProxyType[str, str]:
        """Built-in overrides with configured entries layered on top."""
        return MappingProxyType({**NAME_OVERRIDES, **self.overrides})

    def dispatch_table(self) -> MappingProxyType[str, str]:
        """Built-in dispatch names with configured entries layered on top."""
        return MappingProxyType({**DISPATCH_NAMES, **self.dispatch_names})


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> IndexConfig:
    """Load configuration from ssl-index.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return IndexConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return IndexConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
