"""Configuration and name tables for index generation."""

from rules.config import (
    ConfigError,
    DefinesConfig,
    IndexConfig,
    load_config,
)
from rules.tables import DEFINE_PREFIXES, DISPATCH_NAMES, NAME_OVERRIDES

__all__ = [
    "ConfigError",
    "DEFINE_PREFIXES",
    "DISPATCH_NAMES",
    "DefinesConfig",
    "IndexConfig",
    "NAME_OVERRIDES",
    "load_config",
]
