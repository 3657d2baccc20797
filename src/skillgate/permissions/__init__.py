"""Tool catalog, skill scopes, user tiers, and policy composition for skillgate.

Defines:
- ToolNames / SkillScope / Delegation / ExternalAccess / UserTier constants
- ToolCatalog: aliases and (nested) tool groups, reference expansion
- ToolPolicy: one allow/deny layer; skill and profile policy resolution
- Tier ceilings and tier default policies
- intersect_tool_policies(): allow-intersection / deny-union composer
"""

from .access import (
    check_tool_allowed,
    filter_tool_names,
    intersect_tool_policies,
    is_tool_allowed,
)
from .catalog import (
    DEFAULT_TOOL_CATALOG,
    TOOL_GROUPS,
    TOOL_NAME_ALIASES,
    ToolCatalog,
    expand_tool_groups,
    normalize_tool_name,
)
from .constants import Delegation, ExternalAccess, SkillScope, ToolNames, UserTier
from .models import DEFAULT_SKILL_PERMISSIONS, SkillPermissions, SkillToolOverrides
from .policy import (
    SKILL_SCOPE_TOOL_GROUPS,
    TOOL_PROFILES,
    ToolPolicy,
    default_groups_for,
    resolve_skill_tool_policy,
    resolve_tool_profile_policy,
)
from .tiers import (
    SCOPE_ORDER,
    TIER_PROFILES,
    TIER_SCOPE_CEILING,
    DelegationOverride,
    TierProfile,
    is_scope_within_ceiling,
    is_skill_admitted,
    resolve_delegation_override,
    resolve_user_tier,
    resolve_user_tier_tool_policy,
    tier_ceiling,
)

__all__ = [
    "DEFAULT_SKILL_PERMISSIONS",
    "DEFAULT_TOOL_CATALOG",
    "SCOPE_ORDER",
    "SKILL_SCOPE_TOOL_GROUPS",
    "TIER_PROFILES",
    "TIER_SCOPE_CEILING",
    "TOOL_GROUPS",
    "TOOL_NAME_ALIASES",
    "TOOL_PROFILES",
    "Delegation",
    "DelegationOverride",
    "ExternalAccess",
    "SkillPermissions",
    "SkillScope",
    "SkillToolOverrides",
    "TierProfile",
    "ToolCatalog",
    "ToolNames",
    "ToolPolicy",
    "UserTier",
    "check_tool_allowed",
    "default_groups_for",
    "expand_tool_groups",
    "filter_tool_names",
    "intersect_tool_policies",
    "is_scope_within_ceiling",
    "is_skill_admitted",
    "is_tool_allowed",
    "normalize_tool_name",
    "resolve_delegation_override",
    "resolve_skill_tool_policy",
    "resolve_tool_profile_policy",
    "resolve_user_tier",
    "resolve_user_tier_tool_policy",
    "tier_ceiling",
]
