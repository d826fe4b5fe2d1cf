"""Unit tests for structlog configuration."""

import json

import pytest
import structlog

from infrastructure.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def _last_renderer():
    return structlog.get_config()["processors"][-1]


class TestRendererSelection:
    """Tests for choosing between console and JSON output."""

    def test_auto_uses_json_without_tty(self, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setattr("sys.stdout.isatty", lambda: False)

        configure_logging("INFO")

        assert isinstance(_last_renderer(), structlog.processors.JSONRenderer)

    def test_auto_honours_force_color(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")

        configure_logging("INFO")

        assert isinstance(_last_renderer(), structlog.dev.ConsoleRenderer)

    def test_explicit_json_ignores_force_color(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")

        configure_logging("INFO", log_format="json")

        assert isinstance(_last_renderer(), structlog.processors.JSONRenderer)

    def test_explicit_console(self):
        configure_logging("INFO", log_format="console")

        assert isinstance(_last_renderer(), structlog.dev.ConsoleRenderer)


class TestJsonRecords:
    """Tests for the content of rendered JSON records."""

    def test_record_includes_service_context(self, capsys):
        configure_logging(
            "INFO", log_format="json", service="Tablero API", version="1.2.3"
        )

        structlog.get_logger().info("board_created", board_id="b-1")

        record = json.loads(capsys.readouterr().out.strip())
        assert record["event"] == "board_created"
        assert record["board_id"] == "b-1"
        assert record["level"] == "info"
        assert record["service"] == "Tablero API"
        assert record["version"] == "1.2.3"

    def test_service_context_is_omitted_when_not_given(self, capsys):
        configure_logging("INFO", log_format="json")

        structlog.get_logger().info("board_saved")

        record = json.loads(capsys.readouterr().out.strip())
        assert "service" not in record
        assert "version" not in record

    def test_filters_below_configured_level(self, capsys):
        configure_logging("warning", log_format="json")

        logger = structlog.get_logger()
        logger.info("board_saved")
        logger.warning("board_version_conflict")

        output = capsys.readouterr().out
        assert "board_saved" not in output
        assert "board_version_conflict" in output
