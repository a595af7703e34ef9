"""Line recognition rules for native symbol definitions.

Rules are plain data tried in a fixed order. ``match_line`` returns the first
rule that matches, so the order of each tuple is the precedence.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from artifacts.models.artifacts.symbols import Convention, EntryKind

_PROGRAM_ARG = r"\(\s*(?:fallout::)?Program\s*\*\s*\w+\s*\)"
_PROGRAM_ARG_COUNT = (
    r"\(\s*(?:fallout::)?Program\s*\*\s*\w+\s*,\s*int\s+\w+\s*\)"
)


@dataclass(frozen=True)
class RecognitionRule:
    """A single line shape that introduces a native definition."""

    convention: Convention
    pattern: re.Pattern[str]
    index_kind: EntryKind


@dataclass(frozen=True)
class RuleMatch:
    rule: RecognitionRule
    name: str
    end: int


def _handler(name_pattern: str, args: str = _PROGRAM_ARG) -> re.Pattern[str]:
    return re.compile(rf"^(?:static\s+)?void\s+({name_pattern})\s*{args}")


def _procedure(name_pattern: str) -> re.Pattern[str]:
    return re.compile(rf"^(?:static\s+)?(?:int|void|bool)\s+({name_pattern})\s*\(")


OPCODE_RULES: tuple[RecognitionRule, ...] = (
    RecognitionRule("camel_case", _handler(r"op[A-Z][a-zA-Z0-9_]*"), "opcode"),
    RecognitionRule("snake_case", _handler(r"op_[a-z][a-z0-9_]*"), "opcode"),
    RecognitionRule(
        "underscore_prefixed", _handler(r"_op_[a-z][a-z0-9_]*"), "opcode"
    ),
    RecognitionRule(
        "metarule", _handler(r"mf_[a-z][a-z0-9_]*", _PROGRAM_ARG_COUNT), "opcode"
    ),
)

AUXILIARY_RULES: tuple[RecognitionRule, ...] = (
    RecognitionRule("script", _procedure(r"script[A-Z][a-zA-Z0-9_]*"), "function"),
    RecognitionRule("builtin", _procedure(r"builtin[A-Z][a-zA-Z0-9_]*"), "function"),
)

# interpreterRegisterOpcode(OPCODE_NAME, opFunctionName); // op_script_name
REGISTRATION_PATTERN = re.compile(
    r"interpreterRegisterOpcode\s*\(\s*(\w+)\s*,\s*(_?op[A-Z_][a-zA-Z0-9_]*)\s*\)"
    r"(?:[^/\n]*//\s*(op_\w+))?"
)

# A comment holding nothing but a script name, e.g. "// self_obj".
# Address hints such as "// 0x455600" do not match.
ANNOTATION_PATTERN = re.compile(r"^//\s*([a-z][a-z0-9_]*)\s*$")

ANNOTATION_LOOKBACK = 3


def match_line(
    line: str, rules: Sequence[RecognitionRule]
) -> RuleMatch | None:
    """Return the first rule matching ``line``, or None."""
    for rule in rules:
        match = rule.pattern.match(line)
        if match:
            return RuleMatch(rule=rule, name=match.group(1), end=match.end())
    return None


@dataclass(frozen=True)
class RegistrationMatch:
    opcode: str
    handler: str
    script_name: str | None
    start_line: int
    end_line: int


def iter_registrations(text: str) -> Iterator[RegistrationMatch]:
    """Yield each registration call in ``text``, which may span lines."""
    for match in REGISTRATION_PATTERN.finditer(text):
        annotation = match.group(3)
        if annotation is not None:
            annotation = annotation.removeprefix("op_")
        start_line = text.count("\n", 0, match.start()) + 1
        yield RegistrationMatch(
            opcode=match.group(1),
            handler=match.group(2),
            script_name=annotation,
            start_line=start_line,
            end_line=start_line + match.group(0).count("\n"),
        )


def is_declaration(lines: Sequence[str], index: int, column: int) -> bool:
    """Whether the signature at ``lines[index][column:]`` ends in ``;``.

    A prototype reaches ``;`` before any ``{``; a definition opens its body
    first.
    """
    for i in range(index, len(lines)):
        segment = lines[i][column:] if i == index else lines[i]
        for char in segment:
            if char == "{":
                return False
            if char == ";":
                return True
    return False


def find_annotation(lines: Sequence[str], index: int) -> str | None:
    """Find a script-name comment directly above the line at ``index``.

    Other comment lines (address hints) and blank lines are skipped; any
    other line ends the search.
    """
    for look_back in range(1, ANNOTATION_LOOKBACK + 1):
        if index - look_back < 0:
            break
        prev_line = lines[index - look_back].strip()
        match = ANNOTATION_PATTERN.match(prev_line)
        if match:
            return match.group(1)
        if not prev_line.startswith("//") and prev_line != "":
            break
    return None


__all__ = [
    "ANNOTATION_LOOKBACK",
    "AUXILIARY_RULES",
    "OPCODE_RULES",
    "RecognitionRule",
    "RegistrationMatch",
    "RuleMatch",
    "find_annotation",
    "is_declaration",
    "iter_registrations",
    "match_line",
]
