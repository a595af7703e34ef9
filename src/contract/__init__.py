"""Stable artifact contract surface.

This module exposes what documentation tooling may rely on: artifact names,
consumer-side resolution and consistency validation.
"""

from contract.artifacts import (
    DEFINE_INDEX_JSON,
    FUNCTION_INDEX_JSON,
    ResolvedLocation,
    permalink,
    resolve,
    resolve_define,
)


def __getattr__(name: str) -> object:
    if name in {
        "DuplicateConflict",
        "DuplicateConflictError",
        "ValidationResult",
        "detect_duplicates",
        "validate_function_index",
    }:
        from contract import validation

        return getattr(validation, name)

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "DEFINE_INDEX_JSON",
    "FUNCTION_INDEX_JSON",
    "DuplicateConflict",
    "DuplicateConflictError",
    "ResolvedLocation",
    "ValidationResult",
    "detect_duplicates",
    "permalink",
    "resolve",
    "resolve_define",
    "validate_function_index",
]
