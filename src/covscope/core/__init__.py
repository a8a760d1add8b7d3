"""Core module exports."""

from covscope.core.errors import (
    ConfigError,
    CoverageError,
    CovScopeError,
    DiffInputError,
    DiffParseError,
    ErrorCode,
    ExportError,
    InternalError,
)
from covscope.core.logging import (
    configure_logging,
    get_logger,
    get_run_id,
    run_scope,
)

__all__ = [
    # Errors
    "ConfigError",
    "CoverageError",
    "CovScopeError",
    "DiffInputError",
    "DiffParseError",
    "ErrorCode",
    "ExportError",
    "InternalError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "run_scope",
]
