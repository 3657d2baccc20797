from .config import LogLevel, SkillGateConfig, ToolPolicyConfig, UserAccessConfig, load_config_from_env
from .exceptions import (
    ConfigurationError,
    PermissionParseError,
    SkillGateError,
    SkillNotEligibleError,
    ToolNotPermittedError,
)
from .logging import (
    SkillGateFormatter,
    SkillLoggerAdapter,
    get_skill_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .permissions import (
    DEFAULT_SKILL_PERMISSIONS,
    DEFAULT_TOOL_CATALOG,
    SCOPE_ORDER,
    SKILL_SCOPE_TOOL_GROUPS,
    TIER_PROFILES,
    TIER_SCOPE_CEILING,
    TOOL_GROUPS,
    TOOL_NAME_ALIASES,
    TOOL_PROFILES,
    Delegation,
    DelegationOverride,
    ExternalAccess,
    SkillPermissions,
    SkillScope,
    SkillToolOverrides,
    TierProfile,
    ToolCatalog,
    ToolNames,
    ToolPolicy,
    UserTier,
    check_tool_allowed,
    default_groups_for,
    expand_tool_groups,
    filter_tool_names,
    intersect_tool_policies,
    is_scope_within_ceiling,
    is_skill_admitted,
    is_tool_allowed,
    normalize_tool_name,
    resolve_delegation_override,
    resolve_skill_tool_policy,
    resolve_tool_profile_policy,
    resolve_user_tier,
    resolve_user_tier_tool_policy,
    tier_ceiling,
)
from .session import SessionPolicy, filter_eligible_skills, filter_session_tools, resolve_session_policy
from .skills import (
    SkillEntry,
    SkillExclusionEntry,
    SkillInvocationPolicy,
    SkillPermissionLogger,
    parse_skill_permissions,
    resolve_skill_invocation_policy,
    suggest_scope_for_tool,
)

__all__ = [
    'LogLevel',
    'SkillGateConfig',
    'ToolPolicyConfig',
    'UserAccessConfig',
    'load_config_from_env',
    'ConfigurationError',
    'PermissionParseError',
    'SkillGateError',
    'SkillNotEligibleError',
    'ToolNotPermittedError',
    'SkillGateFormatter',
    'SkillLoggerAdapter',
    'get_skill_logger',
    'redact_secrets',
    'safe_log_value',
    'safe_preview',
    'setup_logging',
    'DEFAULT_SKILL_PERMISSIONS',
    'DEFAULT_TOOL_CATALOG',
    'SCOPE_ORDER',
    'SKILL_SCOPE_TOOL_GROUPS',
    'TIER_PROFILES',
    'TIER_SCOPE_CEILING',
    'TOOL_GROUPS',
    'TOOL_NAME_ALIASES',
    'TOOL_PROFILES',
    'Delegation',
    'DelegationOverride',
    'ExternalAccess',
    'SkillPermissions',
    'SkillScope',
    'SkillToolOverrides',
    'TierProfile',
    'ToolCatalog',
    'ToolNames',
    'ToolPolicy',
    'UserTier',
    'check_tool_allowed',
    'default_groups_for',
    'expand_tool_groups',
    'filter_tool_names',
    'intersect_tool_policies',
    'is_scope_within_ceiling',
    'is_skill_admitted',
    'is_tool_allowed',
    'normalize_tool_name',
    'resolve_delegation_override',
    'resolve_skill_tool_policy',
    'resolve_tool_profile_policy',
    'resolve_user_tier',
    'resolve_user_tier_tool_policy',
    'tier_ceiling',
    'SessionPolicy',
    'filter_eligible_skills',
    'filter_session_tools',
    'resolve_session_policy',
    'SkillEntry',
    'SkillExclusionEntry',
    'SkillInvocationPolicy',
    'SkillPermissionLogger',
    'parse_skill_permissions',
    'resolve_skill_invocation_policy',
    'suggest_scope_for_tool',
]
