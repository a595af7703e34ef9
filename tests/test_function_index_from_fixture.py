from __future__ import annotations

import shutil
from pathlib import Path

import orjson

from artifacts.generators import FunctionIndexGenerator
from artifacts.write import dump_index
from contract.validation import detect_duplicates
from parse.dispatch import extract_dispatch_cases
from parse.symbols import read_source_lines
from resolve.aliases import resolve_dispatch_aliases
from rules.config import IndexConfig
from rules.tables import DISPATCH_NAMES
from snapshot.acquire import Revision

_FIXTURE = Path(__file__).parent / "fixtures" / "mini_engine"
_REVISION = Revision(commit="0123456789abcdef", short_commit="0123456")


def _copy_engine_fixture(root: Path) -> None:
    shutil.copytree(_FIXTURE, root)


def _generate(root: Path, config: IndexConfig | None = None):
    return FunctionIndexGenerator().generate(
        root,
        config=config or IndexConfig(),
        revision=_REVISION,
        generated_at="2024-01-01T00:00:00.000Z",
    )


def test_dispatch_case_extent_ends_at_break() -> None:
    path = _FIXTURE / "src" / "interpreter_extra.cc"
    lines = read_source_lines(path)

    sites = extract_dispatch_cases(lines, "src/interpreter_extra.cc", DISPATCH_NAMES)

    assert [site.name for site in sites] == [
        "METARULE_SIGNAL_END_GAME",
        "METARULE_PARTY_COUNT",
    ]
    assert {site.kind for site in sites} == {"dispatch-case"}

    by_name = {
        case.canonical_name: case
        for case in resolve_dispatch_aliases(sites, DISPATCH_NAMES)
    }
    assert sorted(by_name) == ["party_member_count", "signal_end_game"]
    party = by_name["party_member_count"]
    assert party.dispatch_key == "METARULE_PARTY_COUNT"
    assert party.origin == "fixed-table"
    assert party.location.key() == ("src/interpreter_extra.cc", 33, 35)


def test_dispatch_cases_outside_routine_are_ignored() -> None:
    lines = [
        "static void opOther(Program* program)",
        "{",
        "    switch (x) {",
        "    case METARULE_PARTY_COUNT:",
        "        break;",
        "    }",
        "}",
    ]

    assert extract_dispatch_cases(lines, "src/a.cc", DISPATCH_NAMES) == []


def test_function_index_entries_from_fixture(tmp_path: Path) -> None:
    root = tmp_path / "engine"
    _copy_engine_fixture(root)

    index, stats = _generate(root)
    functions = index.functions

    assert stats["files"] == 2
    assert stats["registrations"] == 7
    assert index.meta.function_count == 8
    assert index.meta.commit == _REVISION.commit
    assert index.meta.short_commit == "0123456"
    assert index.meta.repo == "fallout2-ce/fallout2-ce"

    native = functions["opGetSelf"]
    assert (native.file, native.start_line, native.end_line) == (
        "src/interpreter_extra.cc",
        7,
        10,
    )
    assert native.cpp_name is None
    assert native.kind == "opcode"
    assert native.commit == "0123456"

    self_obj = functions["self_obj"]
    assert self_obj.cpp_name == "opGetSelf"
    assert self_obj.location_key() == native.location_key()

    assert functions["sqrt"].cpp_name == "op_sqrt"
    assert functions["obj_can_see_obj"].end_line == 17
    assert functions["is_success"].cpp_name == "opSuccess"
    assert functions["peek_byte"].cpp_name == "op_read_byte"
    assert functions["get_year"].location_key() == ("src/sfall_opcodes.cc", 5, 8)
    assert functions["scriptGetVersion"].kind == "function"

    party = functions["party_member_count"]
    assert party.kind == "metarule"
    assert party.cpp_name == "opMetarule"
    assert party.metarule == "METARULE_PARTY_COUNT"
    assert (party.start_line, party.end_line) == (33, 35)

    assert "get_self" not in functions
    assert "success" not in functions
    assert "read_byte" not in functions
    assert len(functions) == 17


def test_fixture_index_has_no_duplicates(tmp_path: Path) -> None:
    root = tmp_path / "engine"
    _copy_engine_fixture(root)

    index, _ = _generate(root)

    assert detect_duplicates(index) == []


def test_function_index_serialization_is_stable(tmp_path: Path) -> None:
    root = tmp_path / "engine"
    _copy_engine_fixture(root)

    first, _ = _generate(root)
    second, _ = _generate(root)

    assert dump_index(first) == dump_index(second)

    payload = orjson.loads(dump_index(first))
    assert list(payload) == ["_meta", "functions"]
    assert payload["_meta"]["generatedAt"] == "2024-01-01T00:00:00.000Z"
    assert payload["functions"]["self_obj"] == {
        "commit": "0123456",
        "cppName": "opGetSelf",
        "endLine": 10,
        "file": "src/interpreter_extra.cc",
        "kind": "opcode",
        "startLine": 7,
    }
    assert "cppName" not in payload["functions"]["opGetSelf"]


def test_configured_tables_extend_builtins(tmp_path: Path) -> None:
    root = tmp_path / "engine"
    _copy_engine_fixture(root)
    config = IndexConfig(
        overrides={"op_sqrt": "square_root"},
        dispatch_names={"METARULE_UNKNOWN_KEY": "unknown_key"},
    )

    index, _ = _generate(root, config)

    assert index.functions["square_root"].cpp_name == "op_sqrt"
    assert "sqrt" not in index.functions
    assert index.functions["unknown_key"].location_key() == (
        "src/interpreter_extra.cc",
        36,
        38,
    )


def test_missing_source_dir_yields_empty_index(tmp_path: Path) -> None:
    index, stats = _generate(tmp_path)

    assert index.functions == {}
    assert stats["files"] == 0


def test_header_prototype_does_not_replace_definition(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    (src / "scripts.cc").write_text(
        "#include \"scripts.h\"\n"
        "\n"
        "int scriptAdd(int* sid, int type)\n"
        "{\n"
        "    return 0;\n"
        "}\n",
        encoding="utf-8",
    )
    (src / "scripts.h").write_text(
        "#ifndef SCRIPTS_H\n"
        "\n"
        "int scriptAdd(int* sid, int type);\n"
        "void opGetSelf(Program* program);\n"
        "\n"
        "#endif\n",
        encoding="utf-8",
    )

    index, stats = _generate(tmp_path)

    assert stats["functions"] == 1
    assert index.functions["scriptAdd"].location_key() == ("src/scripts.cc", 3, 6)
    assert "opGetSelf" not in index.functions
