"""Scope a coverage tree to the lines a diff changed.

Coverage paths are usually absolute (what the instrumented program saw),
while diff paths are repository-relative, so a coverage path matches a diff
path when it ends with it on a path-component boundary.
"""

from collections.abc import Iterable

from covscope.core.logging import get_logger
from covscope.coverage.models import CoverageData, FileCoverage
from covscope.diff.models import DiffFile

log = get_logger(__name__)


def _normalize(path: str) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def path_matches(coverage_path: str, diff_path: str) -> bool:
    """Check whether a coverage file path designates the diff's file."""
    coverage_path = _normalize(coverage_path)
    diff_path = _normalize(diff_path)
    if not diff_path:
        return False
    return coverage_path == diff_path or coverage_path.endswith("/" + diff_path)


def find_diff_file(coverage_path: str, diff_files: Iterable[DiffFile]) -> DiffFile | None:
    """First diff file whose path matches the coverage path."""
    for diff_file in diff_files:
        if path_matches(coverage_path, diff_file.path):
            return diff_file
    return None


def apply_diff_selection(coverage: CoverageData, diff_files: Iterable[DiffFile]) -> int:
    """Attach diff-selected lines to matching coverage files.

    Returns:
        Number of coverage files that matched a diff file.
    """
    diff_files = list(diff_files)
    matched = 0
    for file_coverage in coverage.iter_files():
        diff_file = find_diff_file(file_coverage.path, diff_files)
        if diff_file is None:
            continue
        file_coverage.add_selected_lines(diff_file.selected_lines)
        matched += 1
    log.debug("diff_selection_applied", matched=matched, diff_files=len(diff_files))
    return matched


def scope_to_selection(coverage: CoverageData) -> CoverageData:
    """New tree holding only selected lines that were also recorded.

    Files without a selection and modules left without files are dropped.
    """
    scoped = CoverageData(name=coverage.name, exit_code=coverage.exit_code)
    for module in coverage.modules:
        kept: list[FileCoverage] = []
        for file_coverage in module.files:
            if file_coverage.selected_lines is None:
                continue
            selected = file_coverage.selected_lines
            kept.append(
                FileCoverage(
                    path=file_coverage.path,
                    lines={
                        n: executed for n, executed in file_coverage.lines.items() if n in selected
                    },
                    selected_lines=set(selected),
                )
            )
        if kept:
            scoped.add_module(module.name).files.extend(kept)
    return scoped
