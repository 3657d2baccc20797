"""Tool names, skill scopes, and user tiers for skillgate.

Provides:
- ``ToolNames``: canonical tool name constants referenced by the engine.
- ``SkillScope``: ordered skill capability levels.
- ``Delegation`` / ``ExternalAccess``: skill permission enums.
- ``UserTier``: trust tiers derived from platform identity.
"""

from __future__ import annotations


class ToolNames:
    """Canonical tool names the engine itself refers to.

    The catalog may know many more; these are the ones the resolver
    appends or checks by name.
    """

    READ = "read"
    WRITE = "write"
    EDIT = "edit"
    APPLY_PATCH = "apply_patch"
    EXEC = "exec"
    PROCESS = "process"
    WEB_SEARCH = "web_search"
    WEB_FETCH = "web_fetch"
    MEMORY_SEARCH = "memory_search"
    MEMORY_GET = "memory_get"
    IMAGE = "image"
    SESSIONS_SPAWN = "sessions_spawn"
    SESSION_STATUS = "session_status"
    SKILL_MEMORY_WRITE = "skill_memory_write"

    GROUP_PREFIX = "group:"


class SkillScope:
    """Self-declared ambient capability level of a skill.

    Ordering: ``conversation-only`` < ``read-only`` < ``workspace`` <
    ``read-write`` < ``full`` == ``custom``.

    ``custom`` ranks with ``full`` for ceiling checks but means the skill
    supplies its own explicit tool list.
    """

    CONVERSATION_ONLY = "conversation-only"
    READ_ONLY = "read-only"
    WORKSPACE = "workspace"
    READ_WRITE = "read-write"
    FULL = "full"
    CUSTOM = "custom"

    DEFAULT = CONVERSATION_ONLY
    UNRESTRICTED = frozenset({"full", "custom"})
    ALL = frozenset({"conversation-only", "read-only", "workspace", "read-write", "full", "custom"})


class Delegation:
    """Whether a skill may spawn sub-agent sessions."""

    OPUS = "opus"
    NONE = "none"
    ANY = "any"

    DEFAULT = OPUS
    ALL = frozenset({"opus", "none", "any"})


class ExternalAccess:
    """How far a skill reaches outside the workspace."""

    NONE = "none"
    READ = "read"
    FULL = "full"

    DEFAULT = NONE
    ALL = frozenset({"none", "read", "full"})


class UserTier:
    """Trust tier of the user driving a session.

    Not persisted; recomputed from configuration on every resolution.
    """

    ADMIN = "admin"
    TRUSTED = "trusted"
    DEFAULT = "default"

    ALL = frozenset({"admin", "trusted", "default"})


__all__ = [
    "Delegation",
    "ExternalAccess",
    "SkillScope",
    "ToolNames",
    "UserTier",
]
