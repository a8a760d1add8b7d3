"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COVSCOPE__SECTION__KEY)
3. Project YAML (.covscope/config.yaml)
4. Global YAML (~/.config/covscope/config.yaml)
5. Built-in defaults (this file)

Examples:
    COVSCOPE__LOGGING__LEVEL=DEBUG
    COVSCOPE__DIFF__STRIP_GIT_PREFIXES=false
    COVSCOPE__EXPORT__INDENT=
"""

import codecs
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _check_encoding(v: str) -> str:
    try:
        codecs.lookup(v)
    except LookupError as e:
        raise ValueError(f"Unknown encoding: {v}") from e
    return v


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVSCOPE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(default="INFO", description="Root log level.")
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DiffConfig(BaseModel):
    """Unified diff parsing configuration.

    Env vars:
        COVSCOPE__DIFF__STRIP_GIT_PREFIXES: Strip a/ and b/ from git diffs
        COVSCOPE__DIFF__NULL_DEVICE: Path diff tools use for a missing side
        COVSCOPE__DIFF__ENCODING: Encoding used to read diff files
    """

    strip_git_prefixes: bool = Field(
        default=True,
        description="Detect `git diff` output and strip its b/ destination prefix.",
    )
    null_device: str = Field(
        default="/dev/null",
        description="Sentinel path marking file creation or deletion.",
    )
    encoding: str = Field(default="utf-8", description="Encoding of diff files on disk.")

    @field_validator("null_device")
    @classmethod
    def validate_null_device(cls, v: str) -> str:
        if not v:
            raise ValueError("null_device must not be empty")
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        return _check_encoding(v)


class ExportConfig(BaseModel):
    """Cobertura export configuration.

    Env vars:
        COVSCOPE__EXPORT__INDENT: Indentation string, empty for a compact document
        COVSCOPE__EXPORT__ENCODING: Encoding of the written document
    """

    indent: str | None = Field(
        default="\t",
        description="Pretty-print indentation. None or empty writes a single line.",
    )
    encoding: str = Field(default="utf-8", description="Declared and written encoding.")

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: str | None) -> str | None:
        if v is not None and v.strip(" \t"):
            raise ValueError("indent may only contain spaces and tabs")
        return v or None

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        return _check_encoding(v)


class CovScopeConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
