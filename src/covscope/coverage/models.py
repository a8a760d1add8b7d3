"""Coverage tree: CoverageData -> ModuleCoverage -> FileCoverage -> lines.

Filled by whatever executed the program (one module per binary, one file per
source file, one executed flag per line), optionally annotated with the
lines a diff selected, then handed read-only to an exporter.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from covscope.core.errors import CoverageError


def _rate(hit: int, found: int) -> float:
    # An empty scope has nothing covered.
    return hit / found if found > 0 else 0.0


@dataclass(frozen=True, slots=True)
class LineCoverage:
    """A line number and whether it was executed."""

    number: int
    executed: bool

    @property
    def hits(self) -> int:
        return 1 if self.executed else 0


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Aggregate line statistics for one scope."""

    lines_found: int
    lines_hit: int
    line_rate: float


@dataclass(slots=True)
class FileCoverage:
    """Coverage data for a single source file.

    Lines are stored as a dict mapping 1-based line number to executed flag.
    `selected_lines` holds the diff-selected lines of interest, kept apart
    from `lines`; None means no diff selection was attached.
    """

    path: str
    lines: dict[int, bool] = field(default_factory=dict)
    selected_lines: set[int] | None = None

    def add_line(self, number: int, executed: bool) -> None:
        """Insert or overwrite the executed flag of a line."""
        if number <= 0:
            raise CoverageError.invalid_line(self.path, number)
        self.lines[number] = executed

    def add_selected_lines(self, numbers: Iterable[int]) -> None:
        selected = set(numbers)
        for number in selected:
            if number <= 0:
                raise CoverageError.invalid_line(self.path, number)
        if self.selected_lines is None:
            self.selected_lines = set()
        self.selected_lines.update(selected)

    def is_line_executed(self, number: int) -> bool:
        return self.lines.get(number, False)

    def iter_lines(self) -> list[LineCoverage]:
        """Recorded lines in ascending number order."""
        return [LineCoverage(n, self.lines[n]) for n in sorted(self.lines)]

    @property
    def line_numbers(self) -> list[int]:
        return sorted(self.lines)

    @property
    def executed_lines(self) -> list[int]:
        return sorted(n for n, executed in self.lines.items() if executed)

    @property
    def lines_found(self) -> int:
        """Total number of recorded lines."""
        return len(self.lines)

    @property
    def lines_hit(self) -> int:
        """Number of executed lines."""
        return sum(1 for executed in self.lines.values() if executed)

    @property
    def line_rate(self) -> float:
        """Fraction of lines executed (0.0 to 1.0)."""
        return _rate(self.lines_hit, self.lines_found)


@dataclass(slots=True)
class ModuleCoverage:
    """One instrumented unit (e.g. a binary) and its files, in insertion order."""

    name: str
    files: list[FileCoverage] = field(default_factory=list)

    def add_file(self, path: str) -> FileCoverage:
        file_coverage = FileCoverage(path=path)
        self.files.append(file_coverage)
        return file_coverage

    @property
    def lines_found(self) -> int:
        return sum(f.lines_found for f in self.files)

    @property
    def lines_hit(self) -> int:
        return sum(f.lines_hit for f in self.files)

    @property
    def line_rate(self) -> float:
        return _rate(self.lines_hit, self.lines_found)


@dataclass(slots=True)
class CoverageData:
    """Root of a coverage run.

    `name` is the program the run covered and `exit_code` its process exit
    code. Module names are not deduplicated.
    """

    name: str = ""
    exit_code: int = 0
    modules: list[ModuleCoverage] = field(default_factory=list)

    def add_module(self, name: str) -> ModuleCoverage:
        module = ModuleCoverage(name=name)
        self.modules.append(module)
        return module

    def iter_files(self) -> list[FileCoverage]:
        return [f for m in self.modules for f in m.files]

    @property
    def lines_found(self) -> int:
        return sum(m.lines_found for m in self.modules)

    @property
    def lines_hit(self) -> int:
        return sum(m.lines_hit for m in self.modules)

    @property
    def line_rate(self) -> float:
        return _rate(self.lines_hit, self.lines_found)

    @property
    def summary(self) -> CoverageSummary:
        lines_found = self.lines_found
        lines_hit = self.lines_hit
        return CoverageSummary(
            lines_found=lines_found,
            lines_hit=lines_hit,
            line_rate=_rate(lines_hit, lines_found),
        )
