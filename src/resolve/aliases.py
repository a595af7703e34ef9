"""Script-name resolution for native opcode handlers.

Precedence, highest first:

1. the override table,
2. a script name annotated in the source (adjacent comment or registration
   comment, whichever was seen first),
3. a name derived from the native identifier.

The result is only published when it differs from the lowercased native name.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from artifacts.models.artifacts.symbols import AliasRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from artifacts.models.artifacts.symbols import AliasOrigin, SymbolRecord
    from parse.symbols import FileScan

ALIAS_PREFIXES = ("op", "_op", "mf_")

# Stripped as-is; anything else starting with "op" is camel case.
_SNAKE_PREFIXES = ("_op_", "op_", "mf_")

_CASE_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def is_aliasable(native_name: str) -> bool:
    return native_name.startswith(ALIAS_PREFIXES)


def derive_script_name(native_name: str) -> str:
    """Derive a script name from a native handler name.

    >>> derive_script_name("opObjCanSeeObj")
    'obj_can_see_obj'
    >>> derive_script_name("op_sqrt")
    'sqrt'
    >>> derive_script_name("_op_gsay_start")
    'gsay_start'
    >>> derive_script_name("mf_get_ini_section")
    'get_ini_section'
    """
    for prefix in _SNAKE_PREFIXES:
        if native_name.startswith(prefix):
            return native_name[len(prefix) :]

    name = native_name.removeprefix("op")
    return _CASE_BOUNDARY.sub(r"\1_\2", name).lower()


def collect_annotations(
    scans: Iterable[FileScan],
) -> dict[str, tuple[str, AliasOrigin]]:
    """Gather source-annotated script names keyed by native name.

    Within a file, adjacent comments are taken before registration comments.
    The first annotation seen for a native name is kept.
    """
    annotations: dict[str, tuple[str, AliasOrigin]] = {}
    for scan in scans:
        for native_name, script_name in scan.annotations.items():
            annotations.setdefault(native_name, (script_name, "comment-derived"))
        for registration in scan.registrations:
            if registration.annotation is not None:
                annotations.setdefault(
                    registration.handler,
                    (registration.annotation, "registration-derived"),
                )
    return annotations


def resolve_alias(
    symbol: SymbolRecord,
    overrides: Mapping[str, str],
    annotations: Mapping[str, tuple[str, AliasOrigin]],
) -> AliasRecord | None:
    """Resolve the single published alias of ``symbol``, if it has one."""
    native_name = symbol.name
    if not is_aliasable(native_name):
        return None

    origin: AliasOrigin
    if native_name in overrides:
        canonical, origin = overrides[native_name], "override"
    elif native_name in annotations:
        canonical, origin = annotations[native_name]
    else:
        canonical, origin = derive_script_name(native_name), "transform-derived"

    if not canonical or canonical == native_name.lower():
        return None

    return AliasRecord(
        canonical_name=canonical,
        underlying_name=native_name,
        origin=origin,
        location=symbol.location,
    )


def resolve_aliases(
    symbols: Iterable[SymbolRecord],
    overrides: Mapping[str, str],
    annotations: Mapping[str, tuple[str, AliasOrigin]],
) -> list[AliasRecord]:
    aliases: list[AliasRecord] = []
    for symbol in symbols:
        alias = resolve_alias(symbol, overrides, annotations)
        if alias is not None:
            aliases.append(alias)
    return aliases


def resolve_dispatch_aliases(
    cases: Iterable[SymbolRecord], dispatch_names: Mapping[str, str]
) -> list[AliasRecord]:
    """Name each dispatch case from the fixed table, keyed by its case label."""
    return [
        AliasRecord(
            canonical_name=dispatch_names[case.name],
            dispatch_key=case.name,
            origin="fixed-table",
            location=case.location,
        )
        for case in cases
        if case.name in dispatch_names
    ]


__all__ = [
    "ALIAS_PREFIXES",
    "collect_annotations",
    "derive_script_name",
    "is_aliasable",
    "resolve_alias",
    "resolve_aliases",
    "resolve_dispatch_aliases",
]
