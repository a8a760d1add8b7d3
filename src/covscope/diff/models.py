"""Diff-side data model.

A DiffFile is what the unified diff parser produces for each `+++ ` section:
the destination path and the ascending destination-side line numbers that
were added or modified.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace


@dataclass(slots=True)
class DiffFile:
    """Destination path plus the lines the diff added or changed in it."""

    path: str
    selected_lines: list[int] = field(default_factory=list)

    def add_selected_lines(self, lines: Iterable[int]) -> None:
        self.selected_lines.extend(lines)

    def is_line_selected(self, line: int) -> bool:
        return line in self.selected_lines

    def with_path(self, path: str) -> DiffFile:
        """Copy of this file registered under another path."""
        return replace(self, path=path, selected_lines=list(self.selected_lines))
