"""Typed values carried with a loaded skill."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..permissions.models import SkillPermissions


@dataclass(frozen=True)
class SkillInvocationPolicy:
    """How a skill may be triggered. Not interpreted by the policy engine."""

    user_invocable: bool = True
    disable_model_invocation: bool = False


@dataclass(frozen=True)
class SkillEntry:
    """A loaded skill as seen by the engine.

    Attributes:
        name: Skill name (unique within a snapshot).
        base_dir: Directory holding the skill's files (``learnings.md`` lives here).
        permissions: Parsed permission block.
        invocation: Invocation flags from frontmatter.
    """

    name: str
    base_dir: str = ""
    permissions: SkillPermissions = field(default_factory=SkillPermissions)
    invocation: Optional[SkillInvocationPolicy] = None

    @property
    def scope(self) -> str:
        return self.permissions.scope


@dataclass(frozen=True)
class SkillExclusionEntry:
    """A tool filtered out by a skill's permissions."""

    skill_name: str
    skill_base_dir: str
    tool_name: str
    scope: str
    bypassed: bool = False


__all__ = [
    "SkillEntry",
    "SkillExclusionEntry",
    "SkillInvocationPolicy",
]
