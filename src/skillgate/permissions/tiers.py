"""User tiers: identity resolution, scope ceilings, and tier policies.

Provides:
- ``SCOPE_ORDER``: numeric rank per skill scope (``custom`` == ``full``).
- ``TIER_SCOPE_CEILING``: maximum scope a tier may activate.
- ``TIER_PROFILES``: tier → :class:`TierProfile` (ceiling + default policy).
- ``resolve_user_tier()``: ``(channel, sender_id)`` → tier.
- ``is_scope_within_ceiling()``: the eligibility gate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional, Protocol, Sequence

from .constants import SkillScope, ToolNames, UserTier
from .policy import ToolPolicy

if TYPE_CHECKING:
    from ..config import SkillGateConfig


class UserLists(Protocol):
    """Anything carrying admin/trusted membership lists."""

    admins: Sequence[str]
    trusted: Sequence[str]


# Higher = more privileged.
SCOPE_ORDER: dict[str, int] = {
    SkillScope.CONVERSATION_ONLY: 0,
    SkillScope.READ_ONLY: 1,
    SkillScope.WORKSPACE: 2,
    SkillScope.READ_WRITE: 3,
    SkillScope.FULL: 4,
    SkillScope.CUSTOM: 4,
}

# None = no ceiling.
TIER_SCOPE_CEILING: dict[str, Optional[str]] = {
    UserTier.ADMIN: None,
    UserTier.TRUSTED: SkillScope.READ_WRITE,
    UserTier.DEFAULT: SkillScope.WORKSPACE,
}


@dataclass(frozen=True)
class TierProfile:
    """Ceiling and default tool policy for one user tier."""

    ceiling: Optional[str]
    default_policy: Optional[ToolPolicy]


TIER_PROFILES: dict[str, TierProfile] = {
    UserTier.ADMIN: TierProfile(ceiling=None, default_policy=None),
    UserTier.TRUSTED: TierProfile(
        ceiling=TIER_SCOPE_CEILING[UserTier.TRUSTED],
        default_policy=ToolPolicy(
            allow=(
                "group:fs",
                "group:memory",
                "group:web",
                ToolNames.IMAGE,
                ToolNames.SESSIONS_SPAWN,
                ToolNames.SKILL_MEMORY_WRITE,
            ),
        ),
    ),
    # No memory, runtime, or system tools for unknown users.
    UserTier.DEFAULT: TierProfile(
        ceiling=TIER_SCOPE_CEILING[UserTier.DEFAULT],
        default_policy=ToolPolicy(
            allow=(
                "group:fs",
                "group:web",
                ToolNames.IMAGE,
                ToolNames.SESSIONS_SPAWN,
                ToolNames.SKILL_MEMORY_WRITE,
            ),
        ),
    ),
}


def resolve_user_tier(
    users: Optional[UserLists],
    channel: Optional[str],
    sender_id: Optional[str],
) -> Optional[str]:
    """Resolve a messaging platform user to a trust tier.

    Identity format is ``{channel}_{sender_id}`` (e.g. ``telegram_7338489031``).
    Matching is exact and case-sensitive; admins are checked before trusted.

    Args:
        users: Membership lists (typically ``SkillGateConfig.users``).
        channel: Delivery channel (e.g. ``"telegram"``).
        sender_id: Platform sender identifier.

    Returns:
        ``"admin"``, ``"trusted"`` or ``"default"``; ``None`` when channel
        or sender is missing (cron, heartbeat, inter-agent sessions), in
        which case no tier restrictions apply.
    """
    if not channel or not sender_id:
        return None
    user_id = f"{channel}_{sender_id}"
    if users is None:
        return UserTier.DEFAULT
    if user_id in (users.admins or ()):
        return UserTier.ADMIN
    if user_id in (users.trusted or ()):
        return UserTier.TRUSTED
    return UserTier.DEFAULT


def is_scope_within_ceiling(scope: str, ceiling: Optional[str]) -> bool:
    """Check whether a skill scope fits under a tier ceiling.

    A ``None`` ceiling (admin) admits any scope. ``custom`` ranks with ``full``.
    Unknown scopes rank as ``conversation-only``.
    """
    if ceiling is None:
        return True
    return SCOPE_ORDER.get(scope, 0) <= SCOPE_ORDER.get(ceiling, 0)


def _lookup_profile(user_tier: str, profiles: Mapping[str, TierProfile]) -> TierProfile:
    """Profile for a tier. Unknown tiers use the table's default entry, then the built-in one."""
    profile = profiles.get(user_tier) or profiles.get(UserTier.DEFAULT)
    if profile is None:
        profile = TIER_PROFILES[UserTier.DEFAULT]
    return profile


def tier_ceiling(user_tier: Optional[str], profiles: Mapping[str, TierProfile] = TIER_PROFILES) -> Optional[str]:
    """Scope ceiling for a tier. No tier → no ceiling."""
    if user_tier is None:
        return None
    return _lookup_profile(user_tier, profiles).ceiling


def is_skill_admitted(
    scope: str,
    user_tier: Optional[str],
    profiles: Mapping[str, TierProfile] = TIER_PROFILES,
) -> bool:
    """Eligibility gate for a (skill, user) pair."""
    return is_scope_within_ceiling(scope, tier_ceiling(user_tier, profiles))


def resolve_user_tier_tool_policy(
    user_tier: Optional[str],
    profiles: Mapping[str, TierProfile] = TIER_PROFILES,
) -> Optional[ToolPolicy]:
    """Default tool policy for a tier.

    - ``admin`` → ``None`` (no restriction)
    - ``trusted`` → fs, memory, web, image, sessions_spawn, skill_memory_write
    - ``default`` → fs, web, image, sessions_spawn, skill_memory_write

    ``sessions_spawn`` stays available to default users; their delegation
    is downgraded instead (see :func:`resolve_delegation_override`).
    """
    if user_tier is None:
        return None
    return _lookup_profile(user_tier, profiles).default_policy


@dataclass(frozen=True)
class DelegationOverride:
    """Model/thinking override applied to sub-sessions spawned by a skill."""

    model: Optional[str] = None
    thinking: Optional[str] = None


def resolve_delegation_override(
    user_tier: Optional[str],
    config: Optional["SkillGateConfig"] = None,
) -> Optional[DelegationOverride]:
    """Delegation override for a tier.

    Only ``default`` users are overridden: high thinking, and the
    configured ``default_delegation_model`` if one is set. Other tiers
    use the skill's own model.
    """
    if user_tier != UserTier.DEFAULT:
        return None
    raw_model = config.default_delegation_model if config is not None else None
    model = raw_model.strip() if isinstance(raw_model, str) and raw_model.strip() else None
    return DelegationOverride(model=model, thinking="high")


__all__ = [
    "DelegationOverride",
    "SCOPE_ORDER",
    "TIER_PROFILES",
    "TIER_SCOPE_CEILING",
    "TierProfile",
    "UserLists",
    "is_scope_within_ceiling",
    "is_skill_admitted",
    "resolve_delegation_override",
    "resolve_user_tier",
    "resolve_user_tier_tool_policy",
    "tier_ceiling",
]
