"""Configuration contract for skillgate.

Pydantic-validated models for the settings the engine consumes: logging,
user tier membership lists, the site-wide base tool policy, and the
delegation model for default-tier users.

Direct os.environ/os.getenv usage belongs in load_config_from_env() only.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .permissions.policy import TOOL_PROFILES, ToolPolicy, resolve_tool_profile_policy


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class UserAccessConfig(BaseModel):
    """Tier membership lists.

    Entries use the ``{channel}_{sender_id}`` identity format, e.g.
    ``telegram_7338489031`` or ``whatsapp_+15551234567``.
    """

    model_config = {"extra": "forbid"}

    admins: list[str] = Field(
        default_factory=list,
        description="Identities resolved to the admin tier (checked first)",
    )
    trusted: list[str] = Field(
        default_factory=list,
        description="Identities resolved to the trusted tier",
    )


class ToolPolicyConfig(BaseModel):
    """Explicit site-wide tool policy (``tools.allow`` / ``tools.deny``)."""

    model_config = {"extra": "forbid"}

    allow: Optional[list[str]] = Field(
        default=None,
        description="Allowed tool references. None = no restriction, [] = nothing",
    )
    deny: Optional[list[str]] = Field(
        default=None,
        description="Denied tool references",
    )

    def to_policy(self) -> Optional[ToolPolicy]:
        if self.allow is None and self.deny is None:
            return None
        return ToolPolicy(allow=self.allow, deny=self.deny)


class SkillGateConfig(BaseModel):
    """Top-level skillgate configuration."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Tiers
    users: UserAccessConfig = Field(
        default_factory=UserAccessConfig,
        description="Admin/trusted membership lists",
    )

    # Base policy layer
    tool_profile: Optional[str] = Field(
        default=None,
        description="Named base profile: minimal, coding, messaging, full",
    )
    tools: ToolPolicyConfig = Field(
        default_factory=ToolPolicyConfig,
        description="Explicit site-wide allow/deny",
    )

    # Delegation
    default_delegation_model: Optional[str] = Field(
        default=None,
        description="Model used for sub-sessions spawned by default-tier users",
    )

    # Exclusion audit
    learnings_threshold: int = Field(
        default=3,
        ge=1,
        description="Exclusions of one tool per skill before learnings.md is updated",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("tool_profile")
    @classmethod
    def validate_tool_profile(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        key = v.strip().lower()
        if key not in TOOL_PROFILES:
            raise ValueError(f"Unknown tool profile: {v}. Must be one of {sorted(TOOL_PROFILES)}")
        return key

    def base_policy(self) -> list[Optional[ToolPolicy]]:
        """Seed layers for the composer: profile policy, then explicit tools."""
        return [resolve_tool_profile_policy(self.tool_profile), self.tools.to_policy()]

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def _split_list(raw: Optional[str]) -> Optional[list[str]]:
    if raw is None:
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_config_from_env() -> SkillGateConfig:
    """Load configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SKILLGATE_ADMINS: Comma-separated admin identities
    - SKILLGATE_TRUSTED: Comma-separated trusted identities
    - SKILLGATE_TOOL_PROFILE: Base profile name
    - SKILLGATE_TOOLS_ALLOW: Comma-separated allow list (empty string = allow nothing)
    - SKILLGATE_TOOLS_DENY: Comma-separated deny list
    - SKILLGATE_DELEGATION_MODEL: Delegation model for default-tier users
    - SKILLGATE_LEARNINGS_THRESHOLD: Exclusion count before learnings.md is written

    Raises:
        ConfigurationError: If any value fails validation.
    """
    import os

    try:
        threshold = int(os.getenv("SKILLGATE_LEARNINGS_THRESHOLD", "3"))
    except ValueError as e:
        raise ConfigurationError(f"SKILLGATE_LEARNINGS_THRESHOLD must be an integer: {e}") from e

    try:
        return SkillGateConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
            users=UserAccessConfig(
                admins=_split_list(os.getenv("SKILLGATE_ADMINS")) or [],
                trusted=_split_list(os.getenv("SKILLGATE_TRUSTED")) or [],
            ),
            tool_profile=os.getenv("SKILLGATE_TOOL_PROFILE"),
            tools=ToolPolicyConfig(
                allow=_split_list(os.getenv("SKILLGATE_TOOLS_ALLOW")),
                deny=_split_list(os.getenv("SKILLGATE_TOOLS_DENY")),
            ),
            default_delegation_model=os.getenv("SKILLGATE_DELEGATION_MODEL"),
            learnings_threshold=threshold,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid skillgate configuration: {e}") from e


__all__ = [
    "LogLevel",
    "SkillGateConfig",
    "ToolPolicyConfig",
    "UserAccessConfig",
    "load_config_from_env",
]
