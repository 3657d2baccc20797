"""Logging utilities for skillgate.

This module provides:
- Logging configuration from SkillGateConfig
- Safe preview utilities for values that end up in log lines
- Secret redaction
- A formatter and adapter that carry skill / user context
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .config import LogLevel, SkillGateConfig

SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|key|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s]+)',
    r"(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=]+)",
    r"(?i)(?:sk-|pk-)[a-zA-Z0-9]{32,}",
]

# Attributes every LogRecord has; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "skill", "user_id",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a single-line, length-bounded preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list, tuple)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"
    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Redact secret-looking patterns (keys, tokens, passwords) from text."""
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)
    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Preview plus optional redaction. Use for values from skill content."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


class SkillGateFormatter(logging.Formatter):
    """Formatter that includes skill/user context, as JSON or plain text."""

    def __init__(
        self,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        skill = getattr(record, "skill", None)
        user_id = getattr(record, "user_id", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if skill:
            log_data["skill"] = skill
        if user_id:
            log_data["user_id"] = user_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_log_value(value, redact=self.redact_secrets)

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if skill:
            parts.append(f"skill={skill}")
        if user_id:
            parts.append(f"user={user_id}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class SkillLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds ``skill`` and ``user_id`` to every record.

    Usage:
        logger = get_skill_logger(__name__, skill="recipes")
        logger.warning("tool excluded", user_id="telegram_123")
    """

    def __init__(
        self,
        logger: logging.Logger,
        skill: Optional[str] = None,
        user_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.skill = skill
        self.user_id = user_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        skill = kwargs.pop("skill", self.skill)
        user_id = kwargs.pop("user_id", self.user_id)

        extra = kwargs.get("extra", {})
        if skill:
            extra["skill"] = skill
        if user_id:
            extra["user_id"] = user_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[SkillGateConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Configure the root logger from SkillGateConfig.

    Args:
        config: SkillGateConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
        redact_secrets: Whether to redact secrets (default: True)
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        SkillGateFormatter(
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )
    root_logger.addHandler(console_handler)


def get_skill_logger(
    name: str,
    skill: Optional[str] = None,
    user_id: Optional[str] = None,
) -> SkillLoggerAdapter:
    """Get a logger adapter bound to a skill and/or user."""
    return SkillLoggerAdapter(logging.getLogger(name), skill=skill, user_id=user_id)


__all__ = [
    "SkillGateFormatter",
    "SkillLoggerAdapter",
    "get_skill_logger",
    "redact_secrets",
    "safe_log_value",
    "safe_preview",
    "setup_logging",
]
