"""Coverage tree, diff scoping, and Cobertura export.

Usage:
    from covscope.coverage import CoverageData, export_cobertura

    coverage = CoverageData(name="app.exe")
    file_coverage = coverage.add_module("app.exe").add_file("/src/main.cpp")
    file_coverage.add_line(10, True)
    export_cobertura(coverage, Path("out/coverage.xml"))
"""

from covscope.coverage.cobertura import CoberturaExporter, export_cobertura
from covscope.coverage.models import (
    CoverageData,
    CoverageSummary,
    FileCoverage,
    LineCoverage,
    ModuleCoverage,
)
from covscope.coverage.selection import (
    apply_diff_selection,
    find_diff_file,
    path_matches,
    scope_to_selection,
)

__all__ = [
    # Models
    "CoverageData",
    "CoverageSummary",
    "FileCoverage",
    "LineCoverage",
    "ModuleCoverage",
    # Selection
    "apply_diff_selection",
    "find_diff_file",
    "path_matches",
    "scope_to_selection",
    # Export
    "CoberturaExporter",
    "export_cobertura",
]
