"""Tool catalog: canonical names, aliases, groups, and reference expansion.

Provides:
- ``TOOL_NAME_ALIASES``: alias → canonical tool name.
- ``TOOL_GROUPS``: ``group:<name>`` → member references (may nest).
- ``ToolCatalog``: read-only catalog object, injectable for tests.
- ``normalize_tool_name()`` / ``expand_tool_groups()``: reference resolver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from .constants import ToolNames

# ── Aliases ─────────────────────────────────────────────
# Keys are stored folded (lower-case, ``-`` → ``_``).

TOOL_NAME_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "bash": ToolNames.EXEC,
        "apply_patch": ToolNames.APPLY_PATCH,
    }
)


# ── Groups ──────────────────────────────────────────────

TOOL_GROUPS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "group:memory": (ToolNames.MEMORY_SEARCH, ToolNames.MEMORY_GET),
        "group:web": (ToolNames.WEB_SEARCH, ToolNames.WEB_FETCH),
        "group:fs": (
            ToolNames.READ,
            ToolNames.WRITE,
            ToolNames.EDIT,
            ToolNames.APPLY_PATCH,
        ),
        "group:runtime": (ToolNames.EXEC, ToolNames.PROCESS),
        "group:sessions": (
            "sessions_list",
            "sessions_history",
            "sessions_send",
            ToolNames.SESSIONS_SPAWN,
            ToolNames.SESSION_STATUS,
        ),
        "group:ui": ("browser", "canvas"),
        "group:automation": ("cron", "gateway"),
        "group:messaging": ("message",),
        "group:nodes": ("nodes",),
        # Aggregate of the built-in agent tools. Nested on purpose.
        "group:agent": (
            "group:ui",
            "group:nodes",
            "group:automation",
            "group:messaging",
            "group:sessions",
            "group:memory",
            "group:web",
            "agents_list",
            ToolNames.IMAGE,
        ),
    }
)


def _fold(reference: str) -> str:
    return reference.strip().lower().replace("-", "_")


@dataclass(frozen=True)
class ToolCatalog:
    """Read-only table of tool groups and aliases.

    The module-level :data:`DEFAULT_TOOL_CATALOG` is what the engine uses
    unless a caller passes its own catalog.

    Args:
        groups: Mapping of ``group:<name>`` to member references.
        aliases: Mapping of folded alias to canonical tool name.
    """

    groups: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: TOOL_GROUPS)
    aliases: Mapping[str, str] = field(default_factory=lambda: TOOL_NAME_ALIASES)

    def normalize(self, reference: str) -> str:
        """Normalize a single reference.

        Trims and lower-cases. Known aliases (matched under ``-``/``_``
        folding) map to their canonical name; anything else is returned
        as its normalized literal.
        """
        normalized = reference.strip().lower()
        return self.aliases.get(_fold(normalized), normalized)

    def is_group(self, reference: str) -> bool:
        return self.normalize(reference).startswith(ToolNames.GROUP_PREFIX)

    def expand(self, references: Iterable[str]) -> frozenset[str]:
        """Expand references into a set of canonical tool names.

        Group references are resolved recursively. Each group is expanded
        at most once per call, so self-referential or mutually-referential
        groups terminate. Unknown names and unknown groups pass through
        as literals.
        """
        expanded: set[str] = set()
        visited: set[str] = set()
        self._expand_into(references, expanded, visited)
        return frozenset(expanded)

    def _expand_into(self, references: Iterable[str], expanded: set[str], visited: set[str]) -> None:
        for reference in references:
            normalized = self.normalize(reference)
            if not normalized:
                continue
            members = self.groups.get(normalized) if normalized.startswith(ToolNames.GROUP_PREFIX) else None
            if members is None:
                expanded.add(normalized)
                continue
            if normalized in visited:
                continue
            visited.add(normalized)
            self._expand_into(members, expanded, visited)


DEFAULT_TOOL_CATALOG = ToolCatalog()


def normalize_tool_name(reference: str, catalog: ToolCatalog = DEFAULT_TOOL_CATALOG) -> str:
    """Normalize a tool reference to its canonical name.

    Example::

        normalize_tool_name(" BASH ")       # "exec"
        normalize_tool_name("apply-patch")  # "apply_patch"
        normalize_tool_name("my_tool")      # "my_tool"
    """
    return catalog.normalize(reference)


def expand_tool_groups(
    references: Iterable[str],
    catalog: ToolCatalog = DEFAULT_TOOL_CATALOG,
) -> frozenset[str]:
    """Expand aliases and group references into canonical tool names.

    Args:
        references: Tool names, aliases, or ``group:<name>`` references.
        catalog: Catalog to resolve against.

    Returns:
        Frozenset of canonical tool names.

    Example::

        >>> sorted(expand_tool_groups(["group:fs", "BASH"]))
        ['apply_patch', 'edit', 'exec', 'read', 'write']
    """
    return catalog.expand(references)


__all__ = [
    "DEFAULT_TOOL_CATALOG",
    "TOOL_GROUPS",
    "TOOL_NAME_ALIASES",
    "ToolCatalog",
    "expand_tool_groups",
    "normalize_tool_name",
]
