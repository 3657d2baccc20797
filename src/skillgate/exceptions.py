"""Exception hierarchy for skillgate.

Policy resolution itself never raises: unknown references pass through
and invalid enum values fall back to safe defaults. These exceptions
cover configuration, strict parsing and dispatcher-side enforcement.

Usage:
    from skillgate.exceptions import SkillGateError, ToolNotPermittedError
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ConfigurationError",
    "PermissionParseError",
    "SkillGateError",
    "SkillNotEligibleError",
    "ToolNotPermittedError",
]


class SkillGateError(Exception):
    """Base exception for skillgate.

    Attributes:
        code: Stable error code string (e.g. "TOOL_NOT_PERMITTED").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(SkillGateError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class PermissionParseError(SkillGateError):
    """Permission block rejected by strict parsing."""

    code: str = "PERMISSION_PARSE_ERROR"


class ToolNotPermittedError(SkillGateError):
    """Dispatcher refused a tool under the composed policy."""

    code: str = "TOOL_NOT_PERMITTED"


class SkillNotEligibleError(SkillGateError):
    """Skill scope exceeds the user's tier ceiling."""

    code: str = "SKILL_NOT_ELIGIBLE"
