"""Index artifact generation entry points."""

from __future__ import annotations

from artifacts.diff import diff_define_indexes, diff_function_indexes, format_diff
from artifacts.write import (
    dump_index,
    load_define_index,
    load_function_index,
    write_index,
)


def __getattr__(name: str) -> object:
    # Generators import parse/resolve, which import artifacts.models; load
    # them lazily to avoid package import cycles.
    if name in ("DefineIndexGenerator", "FunctionIndexGenerator"):
        from artifacts import generators

        return getattr(generators, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "DefineIndexGenerator",
    "FunctionIndexGenerator",
    "diff_define_indexes",
    "diff_function_indexes",
    "dump_index",
    "format_diff",
    "load_define_index",
    "load_function_index",
    "write_index",
]
