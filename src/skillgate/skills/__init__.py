"""Skill-side collaborators: permission block parsing and exclusion auditing."""

from .parser import (
    extract_permissions_section,
    parse_bracket_list,
    parse_skill_permissions,
    resolve_skill_invocation_policy,
)
from .permission_log import LEARNINGS_THRESHOLD, SkillPermissionLogger, suggest_scope_for_tool
from .serialize import KeyedLock, run_serialized, serialize_by_key
from .types import SkillEntry, SkillExclusionEntry, SkillInvocationPolicy

__all__ = [
    "LEARNINGS_THRESHOLD",
    "KeyedLock",
    "SkillEntry",
    "SkillExclusionEntry",
    "SkillInvocationPolicy",
    "SkillPermissionLogger",
    "extract_permissions_section",
    "parse_bracket_list",
    "parse_skill_permissions",
    "resolve_skill_invocation_policy",
    "run_serialized",
    "serialize_by_key",
    "suggest_scope_for_tool",
]
