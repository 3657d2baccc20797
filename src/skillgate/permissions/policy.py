"""Tool policies and skill policy resolution.

Provides:
- ``ToolPolicy``: one layer of allow/deny opinions.
- ``SKILL_SCOPE_TOOL_GROUPS``: skill scope → default group references.
- ``TOOL_PROFILES``: named base profiles (minimal / coding / messaging / full).
- ``resolve_skill_tool_policy()``: skill permissions → policy layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from .constants import Delegation, SkillScope, ToolNames
from .models import SkillPermissions

logger = logging.getLogger(__name__)


def _as_refs(values: Optional[Iterable[str]]) -> Optional[tuple[str, ...]]:
    if values is None:
        return None
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class ToolPolicy:
    """Allow/deny opinion of one policy layer.

    ``allow=None`` means the layer does not restrict; ``allow=()`` means
    the layer permits nothing. ``deny=None`` means no denials.

    Lists passed in are frozen to tuples.

    Example::

        ToolPolicy(allow=["group:fs", "image"], deny=["exec"])
    """

    allow: Optional[tuple[str, ...]] = None
    deny: Optional[tuple[str, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "allow", _as_refs(self.allow))
        object.__setattr__(self, "deny", _as_refs(self.deny))

    @property
    def is_unrestricted(self) -> bool:
        return self.allow is None and not self.deny

    def to_dict(self) -> dict[str, list[str]]:
        """Return the ``{allow?, deny?}`` mapping, omitting absent fields."""
        result: dict[str, list[str]] = {}
        if self.allow is not None:
            result["allow"] = list(self.allow)
        if self.deny is not None:
            result["deny"] = list(self.deny)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Optional["ToolPolicy"]:
        """Build a policy from a ``{allow?, deny?}`` mapping. ``None`` stays ``None``."""
        if data is None:
            return None
        return cls(allow=data.get("allow"), deny=data.get("deny"))


# ── Scope defaults ──────────────────────────────────────
# None = no scope-derived ceiling on allow.

SKILL_SCOPE_TOOL_GROUPS: dict[str, Optional[tuple[str, ...]]] = {
    SkillScope.CONVERSATION_ONLY: (),
    SkillScope.READ_ONLY: ("group:memory", "group:web"),
    SkillScope.WORKSPACE: ("group:fs", "group:web", ToolNames.IMAGE),
    SkillScope.READ_WRITE: ("group:fs", "group:memory", "group:web", ToolNames.IMAGE),
    SkillScope.FULL: None,
    SkillScope.CUSTOM: None,
}


def default_groups_for(scope: str) -> Optional[tuple[str, ...]]:
    """Default group references for a skill scope.

    Returns ``None`` for ``full`` and ``custom``. Unknown scopes are
    treated as ``conversation-only``.
    """
    return SKILL_SCOPE_TOOL_GROUPS.get(scope, ())


# ── Base profiles ───────────────────────────────────────

TOOL_PROFILES: dict[str, Optional[ToolPolicy]] = {
    "minimal": ToolPolicy(allow=(ToolNames.SESSION_STATUS,)),
    "coding": ToolPolicy(
        allow=("group:fs", "group:runtime", "group:sessions", "group:memory", ToolNames.IMAGE),
    ),
    "messaging": ToolPolicy(
        allow=(
            "group:messaging",
            "sessions_list",
            "sessions_history",
            "sessions_send",
            ToolNames.SESSION_STATUS,
        ),
    ),
    "full": None,
}


def resolve_tool_profile_policy(profile: str | None) -> Optional[ToolPolicy]:
    """Look up a named base profile.

    Unknown or empty names resolve to ``None`` (no restriction) rather
    than failing, so a stale config cannot lock every tool out.
    """
    if not profile:
        return None
    key = profile.strip().lower()
    if key not in TOOL_PROFILES:
        logger.warning("Unknown tool profile '%s', ignoring", profile)
        return None
    return TOOL_PROFILES[key]


# ── Skill policy ────────────────────────────────────────


def resolve_skill_tool_policy(permissions: SkillPermissions | Mapping[str, Any]) -> Optional[ToolPolicy]:
    """Turn a skill's declared permissions into a policy layer.

    - ``full``/``custom`` without an explicit allow list: no allow
      restriction. Returns a deny-only policy if the skill lists denials,
      otherwise ``None``.
    - Otherwise the allow list is the explicit override, or the scope
      defaults, plus ``sessions_spawn`` when delegation is permitted and
      ``skill_memory_write`` always.
    - Deny entries pass through unchanged.

    Args:
        permissions: Parsed skill permissions (a mapping is validated first).

    Returns:
        A :class:`ToolPolicy`, or ``None`` for an unrestricted skill.

    Example::

        resolve_skill_tool_policy(SkillPermissions(delegation="none"))
        # ToolPolicy(allow=("skill_memory_write",), deny=None)
    """
    if not isinstance(permissions, SkillPermissions):
        permissions = SkillPermissions.model_validate(permissions)

    override = permissions.allow_override
    deny = permissions.deny_override
    default_groups = default_groups_for(permissions.scope)

    if permissions.scope in SkillScope.UNRESTRICTED and override is None:
        if deny is not None:
            return ToolPolicy(deny=deny)
        return None

    if override is not None:
        base_allow = override
    else:
        base_allow = default_groups or ()

    allow = list(base_allow)
    if permissions.delegation != Delegation.NONE:
        allow.append(ToolNames.SESSIONS_SPAWN)
    allow.append(ToolNames.SKILL_MEMORY_WRITE)

    return ToolPolicy(allow=tuple(allow), deny=deny)


__all__ = [
    "SKILL_SCOPE_TOOL_GROUPS",
    "TOOL_PROFILES",
    "ToolPolicy",
    "default_groups_for",
    "resolve_skill_tool_policy",
    "resolve_tool_profile_policy",
]
