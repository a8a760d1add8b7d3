"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from covscope.config.models import LoggingConfig, LogOutputConfig
from covscope.core.logging import configure_logging, get_logger, get_run_id, run_scope
from covscope.coverage import CoverageData, export_cobertura
from covscope.diff import parse_unified_diff


class TestRunScope:
    """Run ID binding tests."""

    def test_given_no_scope_when_get_then_none(self) -> None:
        """No run id outside a scope."""
        assert get_run_id() is None

    def test_given_explicit_id_when_scoped_then_bound_and_restored(self) -> None:
        """Explicit id is bound inside the block and removed after it."""
        # When
        with run_scope("run-123") as rid:
            inside = get_run_id()

        # Then
        assert rid == inside == "run-123"
        assert get_run_id() is None

    def test_given_no_id_when_scoped_then_generates_uuid(self) -> None:
        """A 12-character id is generated when none is given."""
        with run_scope() as rid:
            assert len(rid) == 12  # uuid4().hex[:12]

    def test_given_outer_scope_when_nested_then_reuses_id(self) -> None:
        """Nested scopes share the enclosing run id."""
        with run_scope("outer"), run_scope() as inner:
            assert inner == "outer"
        assert get_run_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()

    def teardown_method(self) -> None:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers.clear()

    def test_given_json_format_when_log_then_valid_json_output(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON format produces valid JSON with required fields."""
        # Given
        configure_logging(json_format=True, level="INFO")
        logger = get_logger("test")

        # When
        logger.info("test message", key="value")

        # Then
        captured = capsys.readouterr()
        lines = [line for line in captured.err.strip().split("\n") if line]
        data = json.loads(lines[-1])
        assert data["event"] == "test message"
        assert data["key"] == "value"
        assert data["logger"] == "test"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_given_run_scope_when_parse_and_export_then_events_share_run_id(
        self, tmp_path: Path
    ) -> None:
        """Diff parsing and export log under the caller's run id."""
        # Given
        log_file = tmp_path / "run.log"
        output = LogOutputConfig(format="json", destination=str(log_file))
        configure_logging(config=LoggingConfig(level="DEBUG", outputs=[output]))

        # When
        with run_scope("abc"):
            parse_unified_diff("diff --git a/x b/x\n--- a/x\n+++ b/x\n")
            export_cobertura(CoverageData(), tmp_path / "out.xml")

        # Then
        events = [json.loads(line) for line in log_file.read_text().splitlines()]
        by_name = {e["event"]: e for e in events}
        assert by_name["git_diff_detected"]["run_id"] == "abc"
        assert by_name["cobertura_exported"]["run_id"] == "abc"

    def test_given_no_scope_when_parse_then_event_has_own_run_id(self, tmp_path: Path) -> None:
        """An operation outside any scope still tags its events."""
        # Given
        log_file = tmp_path / "run.log"
        output = LogOutputConfig(format="json", destination=str(log_file))
        configure_logging(config=LoggingConfig(outputs=[output]))

        # When
        parse_unified_diff("diff --git a/x b/x\n--- a/x\n+++ b/x\n")

        # Then
        event = json.loads(log_file.read_text().splitlines()[-1])
        assert event["event"] == "git_diff_detected"
        assert len(event["run_id"]) == 12
        assert get_run_id() is None

    def test_given_multi_output_config_when_configure_then_logs_to_all(
        self, tmp_path: Path
    ) -> None:
        """Multiple outputs receive logs according to their levels."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "nested" / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="console", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content

        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content
