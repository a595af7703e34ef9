from __future__ import annotations

from pathlib import Path

import pytest

from parse.extent import FALLBACK_WINDOW, find_block_end, find_case_end
from parse.rules import (
    AUXILIARY_RULES,
    OPCODE_RULES,
    RegistrationMatch,
    find_annotation,
    is_declaration,
    iter_registrations,
    match_line,
)
from parse.symbols import read_source_lines, scan_lines


@pytest.mark.parametrize(
    ("line", "name", "convention"),
    [
        ("static void opGetSelf(Program* program)", "opGetSelf", "camel_case"),
        ("void op_get_year(Program* program)", "op_get_year", "snake_case"),
        (
            "static void _op_gsay_start(Program* program)",
            "_op_gsay_start",
            "underscore_prefixed",
        ),
        (
            "static void mf_get_ini_section(Program* program, int args)",
            "mf_get_ini_section",
            "metarule",
        ),
        ("void opFoo(fallout::Program *p)", "opFoo", "camel_case"),
    ],
)
def test_opcode_rules_recognise_each_convention(
    line: str, name: str, convention: str
) -> None:
    match = match_line(line, OPCODE_RULES)

    assert match is not None
    assert match.name == name
    assert match.rule.convention == convention
    assert match.rule.index_kind == "opcode"


@pytest.mark.parametrize(
    "line",
    [
        "    static void opIndented(Program* program)",
        "static void opTwoArgs(Program* program, int value)",
        "static int opReturnsInt(Program* program)",
        "static void operatorHelper(Program* program)",
        "static void mf_missing_count(Program* program)",
        "// static void opCommented(Program* program)",
    ],
)
def test_opcode_rules_reject_other_shapes(line: str) -> None:
    assert match_line(line, OPCODE_RULES) is None


def test_auxiliary_rules_mark_functions() -> None:
    match = match_line("int scriptGetVersion(Program* program)", AUXILIARY_RULES)

    assert match is not None
    assert match.name == "scriptGetVersion"
    assert match.rule.index_kind == "function"
    assert match_line("static bool builtinIsReady()", AUXILIARY_RULES) is not None


def test_registration_captures_trailing_script_name() -> None:
    text = "    interpreterRegisterOpcode(0x8165, op_read_byte); // op_peek_byte"

    (registration,) = iter_registrations(text)

    assert registration == RegistrationMatch(
        opcode="0x8165",
        handler="op_read_byte",
        script_name="peek_byte",
        start_line=1,
        end_line=1,
    )


def test_registration_without_comment_has_no_annotation() -> None:
    text = "    interpreterRegisterOpcode(OPCODE_SQRT, op_sqrt);"

    (registration,) = iter_registrations(text)

    assert registration.handler == "op_sqrt"
    assert registration.script_name is None


def test_registration_split_across_lines_keeps_script_name() -> None:
    text = "\n".join(
        [
            "void init()",
            "{",
            "    interpreterRegisterOpcode(0x8165,",
            "        op_read_byte); // op_peek_byte",
            "}",
        ]
    )

    (registration,) = iter_registrations(text)

    assert registration.handler == "op_read_byte"
    assert registration.script_name == "peek_byte"
    assert (registration.start_line, registration.end_line) == (3, 4)


def test_prototypes_are_declarations() -> None:
    lines = [
        "int scriptAdd(int* sid, int type);",
        "void opGetSelf(Program* program);",
        "static void opWide(Program* program)",
        "{",
        "}",
        "int scriptRemove(int sid,",
        "    int type);",
    ]

    def declared(index: int) -> bool:
        match = match_line(lines[index], OPCODE_RULES + AUXILIARY_RULES)
        assert match is not None
        return is_declaration(lines, index, match.end)

    assert declared(0)
    assert declared(1)
    assert not declared(2)
    assert declared(5)


def test_annotation_skips_address_hints() -> None:
    lines = ["// self_obj", "// 0x453FC0", "static void opGetSelf(Program* p)"]

    assert find_annotation(lines, 2) == "self_obj"


def test_annotation_requires_a_bare_name() -> None:
    lines = ["// returns the roll", "static void opSuccess(Program* p)"]

    assert find_annotation(lines, 1) is None


def test_annotation_stops_at_code() -> None:
    lines = ["// self_obj", "}", "", "static void opGetSelf(Program* p)"]

    assert find_annotation(lines, 3) is None


def test_annotation_lookback_is_bounded() -> None:
    lines = ["// self_obj", "//", "//", "//", "static void opGetSelf(Program* p)"]

    assert find_annotation(lines, 4) is None


def test_block_end_balances_nested_braces() -> None:
    lines = [
        "static void opObjCanSeeObj(Program* program)",
        "{",
        "    if (program != nullptr) {",
        "        push(program, 1);",
        "    }",
        "}",
        "",
    ]

    assert find_block_end(lines, 0) == 6


def test_block_end_falls_back_to_window() -> None:
    lines = ["static void opBroken(Program* program)", "{"] + ["x();"] * 80

    assert find_block_end(lines, 0) == FALLBACK_WINDOW


def test_block_end_fallback_is_capped_at_file_end() -> None:
    lines = ["static void opBroken(Program* program)", "{", "x();"]

    assert find_block_end(lines, 0) == len(lines)


def test_block_end_counts_braces_inside_literals() -> None:
    lines = [
        "static void opDebug(Program* program)",
        "{",
        '    log("{");',
        "}",
        "}",
    ]

    assert find_block_end(lines, 0) == 5


def test_case_end_includes_break_line() -> None:
    lines = [
        "    case METARULE_PARTY_COUNT:",
        "        result = partyMemberCount();",
        "        break;",
        "    case METARULE_AREA_KNOWN:",
    ]

    assert find_case_end(lines, 0) == 3


def test_case_end_stops_before_closing_brace() -> None:
    lines = ["    case METARULE_LAST:", "        result = 1;", "    }"]

    assert find_case_end(lines, 0) == 2


def test_scan_lines_records_extents_annotations_and_registrations() -> None:
    lines = [
        "// self_obj",
        "static void opGetSelf(Program* program)",
        "{",
        "}",
        "void init()",
        "{",
        "    interpreterRegisterOpcode(0x80A1, opGetSelf);",
        "}",
    ]

    scan = scan_lines(lines, "src/a.cc")

    symbol = scan.definitions["opGetSelf"]
    assert symbol.location.key() == ("src/a.cc", 2, 4)
    assert symbol.kind == "definition-site"
    assert scan.annotations == {"opGetSelf": "self_obj"}
    assert [r.handler for r in scan.registrations] == ["opGetSelf"]
    assert scan.registrations[0].location.start_line == 7


def test_scan_lines_skips_prototypes() -> None:
    lines = [
        "#pragma once",
        "",
        "int scriptAdd(int* sid, int type);",
        "void opGetSelf(Program* program);",
        "",
        "#endif",
    ]

    assert scan_lines(lines, "src/scripts.h").definitions == {}


def test_scan_lines_records_registration_sites() -> None:
    lines = [
        "void init()",
        "{",
        "    interpreterRegisterOpcode(0x8165,",
        "        op_read_byte); // op_peek_byte",
        "}",
    ]

    (registration,) = scan_lines(lines, "src/a.cc").registrations

    assert registration.kind == "registration-site"
    assert registration.annotation == "peek_byte"
    assert registration.location.key() == ("src/a.cc", 3, 4)


def test_read_source_lines_ignores_final_newline(tmp_path: Path) -> None:
    path = tmp_path / "a.cc"
    path.write_text(
        "static void opBroken(Program* program)\n{\nx();\n", encoding="utf-8"
    )

    lines = read_source_lines(path)

    assert lines == ["static void opBroken(Program* program)", "{", "x();"]
    assert find_block_end(lines, 0) == 3
