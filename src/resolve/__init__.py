"""Alias resolution for native symbols."""

from resolve.aliases import (
    collect_annotations,
    derive_script_name,
    resolve_alias,
    resolve_aliases,
    resolve_dispatch_aliases,
)

__all__ = [
    "collect_annotations",
    "derive_script_name",
    "resolve_alias",
    "resolve_aliases",
    "resolve_dispatch_aliases",
]
