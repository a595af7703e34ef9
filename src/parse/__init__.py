"""Line-level parsing of native sources."""

from parse.defines import count_by_prefix, define_prefix, parse_defines
from parse.dispatch import extract_dispatch_cases
from parse.extent import find_block_end, find_case_end
from parse.rules import (
    AUXILIARY_RULES,
    OPCODE_RULES,
    RecognitionRule,
    find_annotation,
    match_line,
)
from parse.symbols import FileScan, scan_lines

__all__ = [
    "AUXILIARY_RULES",
    "FileScan",
    "OPCODE_RULES",
    "RecognitionRule",
    "count_by_prefix",
    "define_prefix",
    "extract_dispatch_cases",
    "find_annotation",
    "find_block_end",
    "find_case_end",
    "match_line",
    "parse_defines",
    "scan_lines",
]
