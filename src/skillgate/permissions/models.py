"""Typed permission values for skills.

These are Pydantic models; invalid enum-like strings are normalized to
their safe defaults here, so the engine only ever sees valid values.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import Delegation, ExternalAccess, SkillScope


def _normalize_choice(value: Any, allowed: frozenset[str], default: str) -> str:
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in allowed:
            return normalized
    return default


class SkillToolOverrides(BaseModel):
    """Explicit ``tools`` block of a skill: allow and/or deny references."""

    model_config = {"frozen": True, "extra": "ignore"}

    allow: Optional[tuple[str, ...]] = Field(
        default=None,
        description="Replaces the scope's default groups when present",
    )
    deny: Optional[tuple[str, ...]] = Field(
        default=None,
        description="Literal references blocked for this skill",
    )


class SkillPermissions(BaseModel):
    """Declared permission block of a skill.

    Immutable for the lifetime of a loaded skill snapshot. A skill with
    no permission block gets the defaults below.

    Example::

        SkillPermissions(scope="read-only", tools={"allow": ["web_fetch"]})
    """

    model_config = {"frozen": True, "extra": "ignore"}

    scope: str = Field(default=SkillScope.DEFAULT, description="Skill scope")
    tools: Optional[SkillToolOverrides] = Field(default=None, description="Explicit tool overrides")
    delegation: str = Field(default=Delegation.DEFAULT, description="opus | none | any")
    external: str = Field(default=ExternalAccess.DEFAULT, description="none | read | full")

    @field_validator("scope", mode="before")
    @classmethod
    def validate_scope(cls, v: Any) -> str:
        """Unknown scopes fall back to ``conversation-only``."""
        return _normalize_choice(v, SkillScope.ALL, SkillScope.DEFAULT)

    @field_validator("delegation", mode="before")
    @classmethod
    def validate_delegation(cls, v: Any) -> str:
        """Unknown delegation values fall back to ``opus``."""
        return _normalize_choice(v, Delegation.ALL, Delegation.DEFAULT)

    @field_validator("external", mode="before")
    @classmethod
    def validate_external(cls, v: Any) -> str:
        """Unknown external values fall back to ``none``."""
        return _normalize_choice(v, ExternalAccess.ALL, ExternalAccess.DEFAULT)

    @property
    def allow_override(self) -> tuple[str, ...] | None:
        return self.tools.allow if self.tools else None

    @property
    def deny_override(self) -> tuple[str, ...] | None:
        return self.tools.deny if self.tools else None


DEFAULT_SKILL_PERMISSIONS = SkillPermissions()


__all__ = [
    "DEFAULT_SKILL_PERMISSIONS",
    "SkillPermissions",
    "SkillToolOverrides",
]
