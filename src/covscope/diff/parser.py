"""Unified diff parser.

Extracts, for every file of a unified diff, the destination line numbers of
added lines. Grammar handled, line by line:

    diff --git a/x b/x          remembered for git convention detection
    --- <from-file>             must be followed by
    +++ <to-file>[\t<stamp>]    registers a new file
    @@ -a[,b] +c[,d] @@         hunk for the last registered file, then
                                content lines until the destination
                                counter reaches c + d:
        ' ' context             counter + 1
        '-' removed             counter unchanged
        '\\' no newline marker  ignored
        '+' added               current counter is selected, then + 1

Once every line is consumed, files touching the null device on either side
are dropped, and when the whole diff follows the `git diff` convention the
`b/` destination prefix is stripped from every path.

Any grammar violation raises DiffParseError with the number of lines read so
far and the raw text of the last one.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from covscope.config.models import DiffConfig
from covscope.core.errors import DiffInputError, DiffParseError, ErrorCode, InternalError
from covscope.core.logging import get_logger, run_scope
from covscope.diff.models import DiffFile

log = get_logger(__name__)

GIT_HEADER_PREFIX = "diff --git"
FROM_FILE_PREFIX = "--- "
TO_FILE_PREFIX = "+++ "
HUNK_PREFIX = "@@"
GIT_SOURCE_PREFIX = "a/"
GIT_TARGET_PREFIX = "b/"
NULL_DEVICE = "/dev/null"

# Groups 1 and 3 (start lines) are mandatory. Groups 2 and 4 (line counts)
# are optional and default to 1 when omitted, e.g. "@@ -3 +3 @@". Only ASCII
# digits count.
_RANGE = r"(\d+)(?:,(\d+))?"
HUNK_HEADER_RE = re.compile(rf"^@@\s*-{_RANGE}\s*\+{_RANGE}\s*@@", re.ASCII)


@dataclass(frozen=True, slots=True)
class HunkRange:
    """Numbers from a `@@ -a,b +c,d @@` header."""

    start_from: int
    count_from: int
    start_to: int
    count_to: int

    @property
    def end_to(self) -> int:
        """Destination line just past the hunk."""
        return self.start_to + self.count_to


class _LineReader:
    """Per-parse scanning state: line counter and last line read."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self.line_number = 0
        self.last_line = ""

    def read(self) -> str | None:
        """Next line without its terminator, or None at end of input."""
        line = next(self._lines, None)
        if line is None:
            return None
        line = line.removesuffix("\n").removesuffix("\r")
        self.line_number += 1
        self.last_line = line
        return line

    def error(self, kind: ErrorCode) -> DiffParseError:
        return DiffParseError.at_line(kind, self.line_number, self.last_line)


def _split_lines(text: str) -> list[str]:
    # str.splitlines() also breaks on form feeds and other separators that
    # may legitimately appear inside diffed content.
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class UnifiedDiffParser:
    """Parses unified diff text into DiffFile records.

    The parser itself is stateless; all scanning state lives in a reader
    created per `parse()` call, so one instance can be shared.
    """

    def __init__(self, config: DiffConfig | None = None) -> None:
        self._config = config or DiffConfig()

    def parse(self, diff: str | Iterable[str]) -> list[DiffFile]:
        """Parse a unified diff.

        Args:
            diff: Whole diff text, or an iterable of lines (e.g. an open file).

        Returns:
            Files in encounter order, each with ascending selected lines.

        Raises:
            DiffParseError: On the first grammar violation.
        """
        with run_scope():
            return self._parse(diff)

    def _parse(self, diff: str | Iterable[str]) -> list[DiffFile]:
        reader = _LineReader(_split_lines(diff) if isinstance(diff, str) else diff)
        files: list[DiffFile] = []
        from_file_lines: list[str] = []
        found_git_header = False

        while (line := reader.read()) is not None:
            if line.startswith(GIT_HEADER_PREFIX):
                found_git_header = True
            elif line.startswith(FROM_FILE_PREFIX):
                next_line = reader.read()
                if next_line is None:
                    raise reader.error(ErrorCode.DIFF_UNEXPECTED_EOF)
                if not next_line.startswith(TO_FILE_PREFIX):
                    raise reader.error(ErrorCode.DIFF_EXPECTED_TO_FILE)
                from_file_lines.append(line)
                files.append(DiffFile(path=self._extract_target_file(next_line)))
            elif line.startswith(HUNK_PREFIX):
                if not files:
                    raise reader.error(ErrorCode.DIFF_HUNK_BEFORE_FILE)
                files[-1].add_selected_lines(self._extract_updated_lines(reader, line))

        files, from_file_lines = self._remove_null_device(files, from_file_lines)
        if self._config.strip_git_prefixes and self._is_git_diff(
            files, from_file_lines, found_git_header
        ):
            log.info("git_diff_detected", files=len(files))
            files = [self._strip_git_target(f) for f in files]
        return files

    def _extract_target_file(self, line: str) -> str:
        # diff tools may append "\t<timestamp>" after the file name
        return line[len(TO_FILE_PREFIX) :].split("\t", 1)[0]

    def _extract_hunk_range(self, reader: _LineReader, header: str) -> HunkRange:
        match = HUNK_HEADER_RE.match(header)
        if match is None:
            raise reader.error(ErrorCode.DIFF_INVALID_HUNK_HEADER)
        start_from, count_from, start_to, count_to = match.groups()
        return HunkRange(
            start_from=int(start_from),
            count_from=int(count_from) if count_from is not None else 1,
            start_to=int(start_to),
            count_to=int(count_to) if count_to is not None else 1,
        )

    def _extract_updated_lines(self, reader: _LineReader, header: str) -> list[int]:
        hunk = self._extract_hunk_range(reader, header)
        current = hunk.start_to
        updated: list[int] = []

        while current < hunk.end_to:
            content = reader.read()
            if content is None:
                raise reader.error(ErrorCode.DIFF_HUNK_LINE_COUNT)
            if content.startswith(("-", "\\")):
                continue
            if content.startswith("+"):
                updated.append(current)
            current += 1
        return updated

    def _remove_null_device(
        self, files: list[DiffFile], from_file_lines: list[str]
    ) -> tuple[list[DiffFile], list[str]]:
        null_from = FROM_FILE_PREFIX + self._config.null_device
        kept_files: list[DiffFile] = []
        kept_lines: list[str] = []
        for diff_file, from_line in zip(files, from_file_lines, strict=True):
            if diff_file.path == self._config.null_device or from_line.startswith(null_from):
                log.debug("null_device_file_removed", path=diff_file.path, from_line=from_line)
                continue
            kept_files.append(diff_file)
            kept_lines.append(from_line)
        return kept_files, kept_lines

    def _is_git_diff(
        self, files: list[DiffFile], from_file_lines: list[str], found_git_header: bool
    ) -> bool:
        if not found_git_header:
            return False
        git_source = FROM_FILE_PREFIX + GIT_SOURCE_PREFIX
        return all(f.path.startswith(GIT_TARGET_PREFIX) for f in files) and all(
            line.startswith(git_source) for line in from_file_lines
        )

    def _strip_git_target(self, diff_file: DiffFile) -> DiffFile:
        if not diff_file.path.startswith(GIT_TARGET_PREFIX):
            raise InternalError.unexpected(
                f"File should have the prefix: {GIT_TARGET_PREFIX}", path=diff_file.path
            )
        return diff_file.with_path(diff_file.path.removeprefix(GIT_TARGET_PREFIX))


def parse_unified_diff(
    diff: str | Iterable[str], config: DiffConfig | None = None
) -> list[DiffFile]:
    """Parse unified diff text. See UnifiedDiffParser.parse."""
    return UnifiedDiffParser(config).parse(diff)


def parse_unified_diff_file(
    path: Path, encoding: str | None = None, config: DiffConfig | None = None
) -> list[DiffFile]:
    """Parse a unified diff stored on disk.

    Args:
        path: Diff file.
        encoding: Text encoding of the file, defaults to `config.encoding` (utf-8).
        config: Parser configuration.

    Raises:
        DiffInputError: If the file cannot be read or decoded.
        DiffParseError: On the first grammar violation.
    """
    config = config or DiffConfig()
    encoding = encoding or config.encoding
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DiffInputError.unreadable(path, e.strerror or str(e)) from e
    try:
        text = data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise DiffInputError.undecodable(path, encoding, str(e)) from e

    with run_scope():
        files = UnifiedDiffParser(config).parse(text)
        log.debug("diff_file_parsed", path=str(path), files=len(files))
    return files
