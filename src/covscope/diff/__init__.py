"""Unified diff parsing: which destination lines did a change add?

Usage:
    from covscope.diff import parse_unified_diff

    for diff_file in parse_unified_diff(text):
        print(diff_file.path, diff_file.selected_lines)
"""

from covscope.diff.models import DiffFile
from covscope.diff.parser import (
    FROM_FILE_PREFIX,
    GIT_HEADER_PREFIX,
    GIT_SOURCE_PREFIX,
    GIT_TARGET_PREFIX,
    HUNK_HEADER_RE,
    NULL_DEVICE,
    TO_FILE_PREFIX,
    HunkRange,
    UnifiedDiffParser,
    parse_unified_diff,
    parse_unified_diff_file,
)

__all__ = [
    "DiffFile",
    "FROM_FILE_PREFIX",
    "GIT_HEADER_PREFIX",
    "GIT_SOURCE_PREFIX",
    "GIT_TARGET_PREFIX",
    "HUNK_HEADER_RE",
    "NULL_DEVICE",
    "TO_FILE_PREFIX",
    "HunkRange",
    "UnifiedDiffParser",
    "parse_unified_diff",
    "parse_unified_diff_file",
]
