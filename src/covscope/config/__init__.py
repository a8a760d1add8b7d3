"""Config module exports."""

from covscope.config.loader import CovScopeSettings, load_config
from covscope.config.models import (
    CovScopeConfig,
    DiffConfig,
    ExportConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "CovScopeConfig",
    "CovScopeSettings",
    "DiffConfig",
    "ExportConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
