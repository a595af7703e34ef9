from __future__ import annotations

import pytest

from artifacts.models.artifacts.symbols import SourceLocation, SymbolRecord
from parse.symbols import scan_lines
from resolve.aliases import (
    collect_annotations,
    derive_script_name,
    resolve_alias,
    resolve_aliases,
)
from rules.tables import NAME_OVERRIDES


def _symbol(name: str, start: int = 10, end: int = 20) -> SymbolRecord:
    return SymbolRecord(
        name=name,
        location=SourceLocation(file="src/a.cc", start_line=start, end_line=end),
        kind="definition-site",
        convention="camel_case",
        index_kind="opcode",
    )


@pytest.mark.parametrize(
    ("native", "expected"),
    [
        ("opObjCanSeeObj", "obj_can_see_obj"),
        ("opGetSelf", "get_self"),
        ("op_sqrt", "sqrt"),
        ("_op_gsay_start", "gsay_start"),
        ("mf_get_ini_section", "get_ini_section"),
        ("opGetHS", "get_hs"),
    ],
)
def test_derive_script_name(native: str, expected: str) -> None:
    assert derive_script_name(native) == expected


def test_adjacent_comment_becomes_alias() -> None:
    lines = ["// self_obj", "static void opGetSelf(Program* program)", "{", "}"]
    scan = scan_lines(lines, "src/a.cc")

    aliases = resolve_aliases(
        scan.definitions.values(), NAME_OVERRIDES, collect_annotations([scan])
    )

    assert len(aliases) == 1
    alias = aliases[0]
    assert alias.canonical_name == "self_obj"
    assert alias.underlying_name == "opGetSelf"
    assert alias.origin == "comment-derived"
    assert alias.location == scan.definitions["opGetSelf"].location


def test_transform_fallback_strips_prefix() -> None:
    alias = resolve_alias(_symbol("op_sqrt"), NAME_OVERRIDES, {})

    assert alias is not None
    assert alias.canonical_name == "sqrt"
    assert alias.origin == "transform-derived"


def test_override_beats_annotation() -> None:
    annotations = {"op_sfall_func7": ("sfall_func6", "comment-derived")}

    alias = resolve_alias(_symbol("op_sfall_func7"), NAME_OVERRIDES, annotations)

    assert alias is not None
    assert alias.canonical_name == "sfall_func7"
    assert alias.origin == "override"


def test_annotation_beats_transform() -> None:
    annotations = {"op_read_byte": ("peek_byte", "registration-derived")}

    alias = resolve_alias(_symbol("op_read_byte"), {}, annotations)

    assert alias is not None
    assert alias.canonical_name == "peek_byte"
    assert alias.origin == "registration-derived"


def test_no_alias_when_name_only_differs_by_case() -> None:
    overrides = {"opSqrt": "opsqrt"}

    assert resolve_alias(_symbol("opSqrt"), overrides, {}) is None


def test_only_handler_prefixes_get_aliases() -> None:
    assert resolve_alias(_symbol("scriptGetVersion"), {}, {}) is None


def test_first_annotation_wins() -> None:
    first = scan_lines(
        ["// tile_num", "static void opTileNum(Program* p)", "{", "}"], "src/a.cc"
    )
    second = scan_lines(
        ["    interpreterRegisterOpcode(0x80A0, opTileNum); // op_tile_number"],
        "src/b.cc",
    )

    annotations = collect_annotations([first, second])

    assert annotations == {"opTileNum": ("tile_num", "comment-derived")}


def test_comment_annotation_preferred_within_a_file() -> None:
    scan = scan_lines(
        [
            "// obj_name",
            "static void opGetName(Program* p)",
            "{",
            "}",
            "    interpreterRegisterOpcode(0x80A0, opGetName); // op_name_of",
        ],
        "src/a.cc",
    )

    assert collect_annotations([scan])["opGetName"] == ("obj_name", "comment-derived")
