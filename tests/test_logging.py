"""Tests for skillgate.logging module."""

from __future__ import annotations

import json
import logging
import os
from unittest.mock import patch

import pytest

from skillgate import (
    LogLevel,
    SkillGateConfig,
    get_skill_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from skillgate.logging import SkillGateFormatter


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str = "Test message", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSafePreview:
    """Tests for safe_preview function."""

    def test_none_value(self) -> None:
        """Test that None returns empty string."""
        assert safe_preview(None) == ""

    def test_string_with_whitespace(self) -> None:
        """Test that whitespace is normalized."""
        assert safe_preview("hello\n\tworld  test") == "hello world test"

    def test_string_truncation(self) -> None:
        """Test that long strings are truncated."""
        result = safe_preview("a" * 300, limit=100)
        assert len(result) == 100
        assert result.endswith("…")

    def test_tuple_value(self) -> None:
        """Policy tuples are rendered as JSON."""
        assert safe_preview(("read", "write")) == '["read", "write"]'


class TestRedactSecrets:
    """Tests for redact_secrets function."""

    def test_password_pattern(self) -> None:
        result = redact_secrets('password: "secret123"')
        assert "[REDACTED]" in result
        assert "secret123" not in result

    def test_bearer_token(self) -> None:
        assert "[REDACTED]" in redact_secrets("Authorization: Bearer abc123def456")

    def test_tool_names_untouched(self) -> None:
        """Ordinary exclusion messages are not modified."""
        text = 'skill permission: tool "exec" excluded by skill "recipes" (scope: workspace)'
        assert redact_secrets(text) == text

    def test_custom_replacement(self) -> None:
        assert "[HIDDEN]" in redact_secrets("password: secret123", replacement="[HIDDEN]")


class TestSafeLogValue:
    """Tests for safe_log_value function."""

    def test_with_redaction(self) -> None:
        assert "[REDACTED]" in safe_log_value("api_key: sk-1234567890", redact=True)

    def test_without_redaction(self) -> None:
        assert "sk-1234567890" in safe_log_value("api_key: sk-1234567890", redact=False)

    def test_truncation(self) -> None:
        assert len(safe_log_value("a" * 500, limit=100)) <= 100


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_with_config(self) -> None:
        """Test logging setup with SkillGateConfig."""
        setup_logging(config=SkillGateConfig(log_level=LogLevel.DEBUG), json_format=False)
        assert logging.getLogger().level == logging.DEBUG

    @patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}, clear=True)
    def test_setup_with_env(self) -> None:
        """Test logging setup loading from environment."""
        setup_logging(json_format=False)
        assert logging.getLogger().level == logging.WARNING

    def test_single_handler(self) -> None:
        """Repeated setup replaces rather than stacks handlers."""
        config = SkillGateConfig()
        setup_logging(config=config)
        setup_logging(config=config)
        assert len(logging.getLogger().handlers) == 1

    def test_json_format(self, capsys: pytest.CaptureFixture) -> None:
        """Test JSON format output."""
        setup_logging(config=SkillGateConfig(log_level=LogLevel.INFO), json_format=True)

        logging.getLogger("test").info("Test message")

        stderr_output = capsys.readouterr().err.strip()
        assert stderr_output.startswith("{")
        data = json.loads(stderr_output)
        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["logger"] == "test"

    def test_json_from_config(self, capsys: pytest.CaptureFixture) -> None:
        """log_json selects JSON when json_format is not given."""
        setup_logging(config=SkillGateConfig(log_json=True))

        logging.getLogger("test").warning("hello")

        assert json.loads(capsys.readouterr().err.strip())["message"] == "hello"

    def test_plain_format(self, capsys: pytest.CaptureFixture) -> None:
        """Test plain text format output."""
        setup_logging(config=SkillGateConfig(log_level=LogLevel.INFO), json_format=False)

        logging.getLogger("test").info("Test message")

        stderr_output = capsys.readouterr().err.strip()
        assert "INFO" in stderr_output
        assert "Test message" in stderr_output
        assert not stderr_output.startswith("{")


class TestSkillLogger:
    """Tests for the skill logger adapter."""

    def test_bound_skill(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_skill_logger("test", skill="recipes")

        with caplog.at_level(logging.INFO):
            logger.info("Skill loaded")

        assert caplog.records[0].skill == "recipes"
        assert not hasattr(caplog.records[0], "user_id")

    def test_per_call_user(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_skill_logger("test", skill="recipes")

        with caplog.at_level(logging.INFO):
            logger.info("Tool excluded", user_id="telegram_123")

        record = caplog.records[0]
        assert record.skill == "recipes"
        assert record.user_id == "telegram_123"

    def test_without_context(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_skill_logger("test")

        with caplog.at_level(logging.INFO):
            logger.info("Test message")

        assert len(caplog.records) == 1


class TestSkillGateFormatter:
    """Tests for SkillGateFormatter."""

    def test_json_format(self) -> None:
        formatter = SkillGateFormatter(json_format=True)
        data = json.loads(formatter.format(_record(skill="recipes", user_id="telegram_1", tool_name="exec")))
        assert data["level"] == "INFO"
        assert data["skill"] == "recipes"
        assert data["user_id"] == "telegram_1"
        assert data["tool_name"] == "exec"

    def test_json_redacts_message(self) -> None:
        formatter = SkillGateFormatter(json_format=True)
        data = json.loads(formatter.format(_record("token=abc123")))
        assert "abc123" not in data["message"]

    def test_plain_format(self) -> None:
        formatter = SkillGateFormatter(json_format=False)
        result = formatter.format(_record(skill="recipes", user_id="telegram_1"))
        assert "INFO" in result
        assert "Test message" in result
        assert "skill=recipes" in result
        assert "user=telegram_1" in result
