"""Parse a skill's ``## Permissions`` block into :class:`SkillPermissions`.

This is the single place where untyped skill text becomes typed
permission values. Format::

    ## Permissions

    scope: workspace
    tools:
      allow: [read, write, web_fetch]
      deny: [exec, deploy]
    delegation: opus
    external: read

Invalid scope/delegation/external values fall back to
``conversation-only`` / ``opus`` / ``none`` unless ``strict=True``.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping, Optional

from ..exceptions import PermissionParseError
from ..permissions.constants import Delegation, ExternalAccess, SkillScope
from ..permissions.models import DEFAULT_SKILL_PERMISSIONS, SkillPermissions, SkillToolOverrides
from .types import SkillInvocationPolicy

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^##\s+permissions\s*$", re.IGNORECASE)
_SECTION_END_RE = re.compile(r"^##\s")
_KEY_RE = re.compile(r"^(\w[\w-]*):\s*(.*)$")
_TOOLS_SUBKEY_RE = re.compile(r"^\s+(allow|deny):\s*(.*)$")

_CHOICES: dict[str, tuple[frozenset[str], str]] = {
    "scope": (SkillScope.ALL, SkillScope.DEFAULT),
    "delegation": (Delegation.ALL, Delegation.DEFAULT),
    "external": (ExternalAccess.ALL, ExternalAccess.DEFAULT),
}


def parse_bracket_list(raw: str) -> Optional[list[str]]:
    """Parse ``[a, b, group:web]`` into a list.

    Returns ``None`` for an empty list or anything not bracket-delimited.
    """
    trimmed = raw.strip()
    if not trimmed.startswith("[") or not trimmed.endswith("]"):
        return None
    inner = trimmed[1:-1].strip()
    if not inner:
        return None
    return [item.strip() for item in inner.split(",") if item.strip()]


def extract_permissions_section(content: str) -> Optional[str]:
    """Return the text between ``## Permissions`` and the next ``##`` heading."""
    lines = content.split("\n")
    start = None
    for index, line in enumerate(lines):
        if _HEADING_RE.match(line.strip()):
            start = index + 1
            break
    if start is None:
        return None

    end = len(lines)
    for index in range(start, len(lines)):
        if _SECTION_END_RE.match(lines[index]):
            end = index
            break

    section = "\n".join(lines[start:end]).strip()
    return section or None


def parse_skill_permissions(content: str, *, strict: bool = False) -> SkillPermissions:
    """Parse the ``## Permissions`` section of a skill document.

    Args:
        content: Full skill document text.
        strict: Raise :class:`PermissionParseError` on invalid enum values
            instead of falling back to the safe default.

    Returns:
        Parsed permissions, or the defaults when the section is missing.
    """
    section = extract_permissions_section(content)
    if section is None:
        return DEFAULT_SKILL_PERMISSIONS

    values: dict[str, str] = {}
    allow: Optional[list[str]] = None
    deny: Optional[list[str]] = None

    for line in section.split("\n"):
        match = _KEY_RE.match(line)
        if match is None:
            sub = _TOOLS_SUBKEY_RE.match(line)
            if sub is not None:
                parsed = parse_bracket_list(sub.group(2))
                if sub.group(1) == "allow" and parsed is not None:
                    allow = parsed
                elif sub.group(1) == "deny" and parsed is not None:
                    deny = parsed
            continue

        key = match.group(1).lower()
        if key not in _CHOICES:
            # "tools:" has no inline value; its sub-keys are handled above.
            continue
        value = match.group(2).strip().lower()
        allowed, default = _CHOICES[key]
        if value not in allowed:
            if strict:
                raise PermissionParseError(
                    f"Invalid {key} '{value}'. Must be one of {sorted(allowed)}",
                    field=key,
                    value=value,
                )
            logger.debug("Invalid %s '%s' in permission block, using '%s'", key, value, default)
            value = default
        values[key] = value

    tools = None
    if allow is not None or deny is not None:
        tools = SkillToolOverrides(allow=allow, deny=deny)
    return SkillPermissions(tools=tools, **values)


_TRUE_VALUES = frozenset({"true", "yes", "on", "1"})
_FALSE_VALUES = frozenset({"false", "no", "off", "0"})


def _parse_bool(value: Optional[str], fallback: bool) -> bool:
    if not isinstance(value, str):
        return fallback
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return fallback


def resolve_skill_invocation_policy(frontmatter: Mapping[str, str]) -> SkillInvocationPolicy:
    """Read invocation flags from already-parsed frontmatter values."""
    return SkillInvocationPolicy(
        user_invocable=_parse_bool(frontmatter.get("user-invocable"), True),
        disable_model_invocation=_parse_bool(frontmatter.get("disable-model-invocation"), False),
    )


__all__ = [
    "extract_permissions_section",
    "parse_bracket_list",
    "parse_skill_permissions",
    "resolve_skill_invocation_policy",
]
