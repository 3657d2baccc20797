"""Session-level resolution: tier gate, policy composition, tool filtering.

Ties the engine together for a host setting up a session:

1. Resolve the user's tier from ``(channel, sender_id)``.
2. Drop skills whose scope exceeds the tier ceiling.
3. Compose ``[base profile, explicit tools, tier policy, skill policy]``
   into the policy handed to the tool dispatcher.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from .config import SkillGateConfig
from .exceptions import SkillNotEligibleError
from .permissions.access import filter_tool_names, intersect_tool_policies
from .permissions.catalog import DEFAULT_TOOL_CATALOG, ToolCatalog
from .permissions.constants import SkillScope
from .permissions.models import SkillPermissions
from .permissions.policy import ToolPolicy, resolve_skill_tool_policy
from .permissions.tiers import (
    TIER_PROFILES,
    DelegationOverride,
    TierProfile,
    is_skill_admitted,
    resolve_delegation_override,
    resolve_user_tier,
    resolve_user_tier_tool_policy,
    tier_ceiling,
)
from .skills.permission_log import SkillPermissionLogger
from .skills.types import SkillEntry, SkillExclusionEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionPolicy:
    """Outcome of resolving one (skill, user) pair.

    Attributes:
        user_tier: Resolved tier, or ``None`` for non-user sessions.
        scope: The skill's scope.
        eligible: False when the scope exceeds the tier ceiling.
        policy: Composed policy for the dispatcher. ``None`` when not eligible.
        delegation_override: Model/thinking override for spawned sub-sessions.
    """

    user_tier: Optional[str]
    scope: str
    eligible: bool
    policy: Optional[ToolPolicy]
    delegation_override: Optional[DelegationOverride] = None

    def require_eligible(self) -> ToolPolicy:
        """Return the policy, or raise if the skill was refused."""
        if not self.eligible or self.policy is None:
            raise SkillNotEligibleError(
                f"Skill scope '{self.scope}' exceeds the ceiling for tier '{self.user_tier}'",
                scope=self.scope,
                user_tier=self.user_tier,
            )
        return self.policy


def filter_eligible_skills(
    entries: Iterable[SkillEntry],
    user_tier: Optional[str],
    profiles: Mapping[str, TierProfile] = TIER_PROFILES,
) -> list[SkillEntry]:
    """Keep only skills whose scope fits under the tier ceiling.

    No tier (scheduled jobs, inter-agent sessions) keeps every skill.
    """
    eligible: list[SkillEntry] = []
    for entry in entries:
        if is_skill_admitted(entry.scope, user_tier, profiles):
            eligible.append(entry)
        else:
            logger.debug(
                "Skill '%s' (scope %s) exceeds ceiling %s for tier %s, dropped",
                entry.name,
                entry.scope,
                tier_ceiling(user_tier, profiles),
                user_tier,
            )
    return eligible


def resolve_session_policy(
    config: SkillGateConfig,
    permissions: Optional[SkillPermissions],
    channel: Optional[str],
    sender_id: Optional[str],
    *,
    catalog: ToolCatalog = DEFAULT_TOOL_CATALOG,
    profiles: Mapping[str, TierProfile] = TIER_PROFILES,
) -> SessionPolicy:
    """Resolve the enforced tool policy for a session.

    Args:
        config: Configuration supplying tier lists and base policy layers.
        permissions: Active skill's permissions, or ``None`` when no skill drives the session.
        channel: Delivery channel of the sender.
        sender_id: Platform sender identifier.
        catalog: Catalog used to expand allow references.
        profiles: Tier table.

    Returns:
        A :class:`SessionPolicy`. Refused skills come back with
        ``eligible=False`` and no policy rather than raising.
    """
    user_tier = resolve_user_tier(config.users, channel, sender_id)
    scope = permissions.scope if permissions is not None else SkillScope.DEFAULT

    if permissions is not None and not is_skill_admitted(permissions.scope, user_tier, profiles):
        logger.info("Skill scope %s refused for tier %s", permissions.scope, user_tier)
        return SessionPolicy(user_tier=user_tier, scope=scope, eligible=False, policy=None)

    skill_policy = resolve_skill_tool_policy(permissions) if permissions is not None else None
    layers: list[Optional[ToolPolicy]] = [
        *config.base_policy(),
        resolve_user_tier_tool_policy(user_tier, profiles),
        skill_policy,
    ]
    policy = intersect_tool_policies(layers, catalog)

    return SessionPolicy(
        user_tier=user_tier,
        scope=scope,
        eligible=True,
        policy=policy,
        delegation_override=resolve_delegation_override(user_tier, config),
    )


def filter_session_tools(
    session: SessionPolicy,
    tool_names: Sequence[str],
    skill: SkillEntry,
    permission_logger: Optional[SkillPermissionLogger] = None,
    *,
    bypassed: bool = False,
    catalog: ToolCatalog = DEFAULT_TOOL_CATALOG,
) -> list[str]:
    """Filter the tools exposed to the agent and audit every exclusion.

    With ``bypassed=True`` exclusions are still logged (tagged) but all
    tools are returned.
    """
    if session.policy is None:
        return []

    allowed, excluded = filter_tool_names(session.policy, tool_names, catalog)
    if permission_logger is not None:
        permission_logger.log_exclusions(
            SkillExclusionEntry(
                skill_name=skill.name,
                skill_base_dir=skill.base_dir,
                tool_name=name,
                scope=skill.scope,
                bypassed=bypassed,
            )
            for name in excluded
        )
    return list(tool_names) if bypassed else allowed


__all__ = [
    "SessionPolicy",
    "filter_eligible_skills",
    "filter_session_tools",
    "resolve_session_policy",
]
