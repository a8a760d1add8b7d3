"""covscope error types with typed error codes.

Error code ranges:
- 1xxx: Diff parsing
- 2xxx: Config
- 3xxx: Export
- 4xxx: Coverage tree
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Diff (1xxx)
    DIFF_EXPECTED_TO_FILE = 1001
    DIFF_UNEXPECTED_EOF = 1002
    DIFF_HUNK_BEFORE_FILE = 1003
    DIFF_INVALID_HUNK_HEADER = 1004
    DIFF_HUNK_LINE_COUNT = 1005
    DIFF_INPUT_UNREADABLE = 1006
    DIFF_INPUT_UNDECODABLE = 1007

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Export (3xxx)
    EXPORT_INVALID_OUTPUT_FILE = 3001

    # Coverage (4xxx)
    COVERAGE_INVALID_LINE = 4001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


_DIFF_DESCRIPTIONS = {
    ErrorCode.DIFF_EXPECTED_TO_FILE: "Expected a line starting with '+++ ' after '--- '.",
    ErrorCode.DIFF_UNEXPECTED_EOF: "Unexpected end of input.",
    ErrorCode.DIFF_HUNK_BEFORE_FILE: "Hunk found before any filename ('+++ ' line).",
    ErrorCode.DIFF_INVALID_HUNK_HEADER: "Invalid hunk header, expected @@ -a[,b] +c[,d] @@.",
    ErrorCode.DIFF_HUNK_LINE_COUNT: "Hunk has fewer lines than its header declares.",
}


@dataclass(frozen=True, slots=True)
class CovScopeError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'DIFF_INVALID_HUNK_HEADER')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class DiffParseError(CovScopeError):
    """Unified diff grammar violation.

    Carries the 1-based number of lines consumed when the error was detected
    and the raw text of the last line read, so callers can point at the
    offending position without re-scanning the diff.
    """

    @classmethod
    def at_line(cls, kind: ErrorCode, line_number: int, raw_line: str) -> "DiffParseError":
        return cls(
            code=kind,
            message=f"Error line {line_number}: {raw_line}\n{_DIFF_DESCRIPTIONS[kind]}",
            details={"line_number": line_number, "raw_line": raw_line},
        )

    @property
    def kind(self) -> ErrorCode:
        return self.code

    @property
    def line_number(self) -> int:
        return int(self.details["line_number"])

    @property
    def raw_line(self) -> str:
        return str(self.details["raw_line"])


class DiffInputError(CovScopeError):
    """A diff file that cannot be read or decoded."""

    @classmethod
    def unreadable(cls, path: str | Path, reason: str) -> "DiffInputError":
        return cls(
            code=ErrorCode.DIFF_INPUT_UNREADABLE,
            message=f"Cannot read diff {path}: {reason}",
            details={"path": str(path), "reason": reason},
        )

    @classmethod
    def undecodable(cls, path: str | Path, encoding: str, reason: str) -> "DiffInputError":
        return cls(
            code=ErrorCode.DIFF_INPUT_UNDECODABLE,
            message=f"Diff {path} is not valid {encoding}: {reason}",
            details={"path": str(path), "encoding": encoding, "reason": reason},
        )


class ConfigError(CovScopeError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ExportError(CovScopeError):
    """Report export errors."""

    @classmethod
    def invalid_output_file(cls, path: str | Path, reason: str) -> "ExportError":
        return cls(
            code=ErrorCode.EXPORT_INVALID_OUTPUT_FILE,
            message=f"Invalid output file {path}: {reason}",
            details={"path": str(path), "reason": reason},
        )

    @property
    def path(self) -> str:
        return str(self.details["path"])


class CoverageError(CovScopeError):
    """Coverage tree mutation errors."""

    @classmethod
    def invalid_line(cls, path: str, line: int) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_INVALID_LINE,
            message=f"Line numbers must be positive, got {line} for {path}",
            details={"path": path, "line": line},
        )


class InternalError(CovScopeError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
