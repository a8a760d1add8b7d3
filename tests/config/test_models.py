"""Tests for config/models.py."""

import pytest
from pydantic import ValidationError

from covscope.config.models import (
    CovScopeConfig,
    DiffConfig,
    ExportConfig,
    LoggingConfig,
    LogOutputConfig,
)


class TestLogOutputConfig:
    """Tests for LogOutputConfig."""

    def test_defaults(self) -> None:
        output = LogOutputConfig()
        assert output.format == "console"
        assert output.destination == "stderr"
        assert output.level is None

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValidationError, match="absolute"):
            LogOutputConfig(destination="logs/run.log")


class TestDiffConfig:
    """Tests for DiffConfig."""

    def test_defaults(self) -> None:
        config = DiffConfig()
        assert config.strip_git_prefixes is True
        assert config.null_device == "/dev/null"
        assert config.encoding == "utf-8"

    def test_unknown_encoding_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown encoding"):
            DiffConfig(encoding="not-an-encoding")

    def test_empty_null_device_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DiffConfig(null_device="")


class TestExportConfig:
    """Tests for ExportConfig."""

    def test_defaults(self) -> None:
        config = ExportConfig()
        assert config.indent == "\t"
        assert config.encoding == "utf-8"

    @pytest.mark.parametrize("indent", ["", None])
    def test_empty_indent_means_compact(self, indent: str | None) -> None:
        assert ExportConfig(indent=indent).indent is None

    def test_spaces_allowed(self) -> None:
        assert ExportConfig(indent="  ").indent == "  "

    def test_non_whitespace_indent_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExportConfig(indent="--")


class TestCovScopeConfig:
    """Tests for the root model."""

    def test_sections_default(self) -> None:
        config = CovScopeConfig()
        assert config.logging == LoggingConfig()
        assert config.diff == DiffConfig()
        assert config.export == ExportConfig()
